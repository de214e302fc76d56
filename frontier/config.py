# frontier/config.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import os
import tomllib  # python >=3.11

_log = logging.getLogger(__name__)

# Defaults (centipawns)
MATERIAL_MG = {
    "PAWN": 82,
    "KNIGHT": 337,
    "BISHOP": 365,
    "ROOK": 477,
    "QUEEN": 1025,
    "KING": 0,
}

MATERIAL_EG = {
    "PAWN": 94,
    "KNIGHT": 281,
    "BISHOP": 297,
    "ROOK": 512,
    "QUEEN": 936,
    "KING": 0,
}

# Exchange values used by SEE, MVV-LVA ordering and futility pruning.
SEE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

# Piece-square tables are written the way a board is printed: rank 8 first,
# a-file on the left. White squares are looked up mirrored, Black directly.
PST_PAWN_MG = [
      0,   0,   0,   0,   0,   0,   0,   0,
     50,  50,  50,  50,  50,  50,  50,  50,
     10,  10,  20,  30,  30,  20,  10,  10,
      5,   5,  10,  25,  25,  10,   5,   5,
      0,   0,   0,  20,  20,   0,   0,   0,
      5,  -5, -10,   0,   0, -10,  -5,   5,
      5,  10,  10, -20, -20,  10,  10,   5,
      0,   0,   0,   0,   0,   0,   0,   0,
]

PST_PAWN_EG = [
      0,   0,   0,   0,   0,   0,   0,   0,
     80,  80,  80,  80,  80,  80,  80,  80,
     50,  50,  50,  50,  50,  50,  50,  50,
     30,  30,  30,  30,  30,  30,  30,  30,
     20,  20,  20,  20,  20,  20,  20,  20,
     10,  10,  10,  10,  10,  10,  10,  10,
      0,   0,   0,   0,   0,   0,   0,   0,
      0,   0,   0,   0,   0,   0,   0,   0,
]

PST_KNIGHT_MG = [
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
]

PST_BISHOP_MG = [
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
]

PST_ROOK_MG = [
      0,   0,   0,   0,   0,   0,   0,   0,
      5,  10,  10,  10,  10,  10,  10,   5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
      0,   0,   0,   5,   5,   0,   0,   0,
]

PST_QUEEN_MG = [
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,   5,   5,   5,   0, -10,
     -5,   0,   5,   5,   5,   5,   0,  -5,
      0,   0,   5,   5,   5,   5,   0,  -5,
    -10,   5,   5,   5,   5,   5,   0, -10,
    -10,   0,   5,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
]

PST_KING_MG = [
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -10, -20, -20, -20, -20, -20, -20, -10,
     20,  20,   0,   0,   0,   0,  20,  20,
     20,  30,  10,   0,   0,  10,  30,  20,
]

PST_KING_EG = [
    -50, -40, -30, -20, -20, -30, -40, -50,
    -30, -20, -10,   0,   0, -10, -20, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -30,   0,   0,   0,   0, -30, -30,
    -50, -30, -30, -30, -30, -30, -30, -50,
]


@dataclass
class SearchConfig:
    nodes: int = 200              # default node-expansion budget
    epsilon: int = 0              # slack before a window violation triggers repair
    time_limit_ms: Optional[int] = None  # None means budget-only
    max_ply: int = 246
    infinite: int = 32001
    mate_value: int = 32000
    known_win: int = 10000
    draw_value: int = 0
    futility_margin: int = 118
    futility_move_cap: int = 2
    quiet_evasion_cap: int = 2
    checks_depth: int = 0         # quiet checks are generated while depth >= this
    recapture_depth: int = -5     # only recaptures once depth <= this

    @property
    def loss_threshold(self) -> int:
        """Values at or below this are treated as hopeless (forced loss)."""
        return -(self.mate_value - 2 * self.max_ply)

    def mated_in(self, ply: int) -> int:
        return -self.mate_value + ply

    def mate_in(self, ply: int) -> int:
        return self.mate_value - ply


@dataclass
class EvalConfig:
    MATERIAL_MG: Dict[str, int] = field(default_factory=lambda: MATERIAL_MG.copy())
    MATERIAL_EG: Dict[str, int] = field(default_factory=lambda: MATERIAL_EG.copy())
    SEE_VALUES: Dict[str, int] = field(default_factory=lambda: SEE_VALUES.copy())
    PST_PAWN_MG: List[int] = field(default_factory=lambda: list(PST_PAWN_MG))
    PST_PAWN_EG: List[int] = field(default_factory=lambda: list(PST_PAWN_EG))
    PST_KNIGHT_MG: List[int] = field(default_factory=lambda: list(PST_KNIGHT_MG))
    PST_BISHOP_MG: List[int] = field(default_factory=lambda: list(PST_BISHOP_MG))
    PST_ROOK_MG: List[int] = field(default_factory=lambda: list(PST_ROOK_MG))
    PST_QUEEN_MG: List[int] = field(default_factory=lambda: list(PST_QUEEN_MG))
    PST_KING_MG: List[int] = field(default_factory=lambda: list(PST_KING_MG))
    PST_KING_EG: List[int] = field(default_factory=lambda: list(PST_KING_EG))
    BISHOP_PAIR_BONUS: int = 30
    DOUBLED_PAWN_PENALTY: int = -15
    ISOLATED_PAWN_PENALTY: int = -12
    PASSED_PAWN_BONUS: List[int] = field(default_factory=lambda: [0, 5, 10, 20, 35, 60, 100, 0])
    TEMPO_BONUS: int = 10


@dataclass
class UIConfig:
    engine_name: str = "Frontier"


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    _log.warning("Unknown config key [%s] %s ignored", section, k)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging once for the command line and REST wrappers."""
    logging.basicConfig(
        level=(level or CONFIG.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("FRONTIER_CONFIG_TOML", "config.toml"))
# allow env override of the node budget for quick debugging
override_nodes = os.environ.get("FRONTIER_SEARCH_NODES")
if override_nodes:
    try:
        CONFIG.search.nodes = int(override_nodes)
    except ValueError:
        _log.warning("Ignoring non-integer FRONTIER_SEARCH_NODES=%r", override_nodes)
