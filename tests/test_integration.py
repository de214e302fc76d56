"""
Integration test suite for the frontier search.

Tests components working together end-to-end:
- Engine wrapper playing short games
- Command line wrapper (arguments, prompts, bad input)
- FastAPI REST API
- Configuration loading from TOML
"""

import chess
import pytest
from fastapi.testclient import TestClient

import interface.api as api
from frontier.config import Config, SearchConfig
from frontier.core.board import Position
from frontier.core.search import FrontierSearch
from frontier.main import Engine
from interface.cli import main as cli_main

BACK_RANK = "6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"

# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER: SHORT GAMES
# ════════════════════════════════════════════════════════════════════════════


class TestEngineGames:
    def test_best_move_is_legal(self):
        engine = Engine(nodes=5)
        move, value = engine.get_best_move()
        assert chess.Move.from_uci(move) in engine.position.board.legal_moves
        assert isinstance(value, int)
        assert engine.position.fen() == chess.STARTING_FEN

    def test_finds_mate_in_one(self):
        engine = Engine(nodes=10, fen=BACK_RANK)
        move, value = engine.get_best_move()
        assert move == "a1a8"
        assert value == SearchConfig().mate_in(1)

    def test_no_move_when_mated(self):
        engine = Engine(nodes=10, fen=FOOLS_MATE)
        move, _value = engine.get_best_move()
        assert move is None

    def test_self_play_stays_legal(self):
        """Engine plays both sides for a few moves with a tiny budget."""
        engine = Engine(nodes=3)
        for _ in range(8):
            if engine.position.is_game_over():
                break
            move, _value = engine.get_best_move()
            assert engine.make_move(move)
        assert engine.position.pending == 0
        assert len(engine.position.board.move_stack) > 0

    def test_search_reuses_one_position(self):
        position = Position()
        search = FrontierSearch(SearchConfig())
        first = search.search(position, 4)
        second = search.search(position, 4)
        assert first.best_move == second.best_move
        assert first.value == second.value


# ════════════════════════════════════════════════════════════════════════════
#  COMMAND LINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestCli:
    def test_arguments(self, capsys):
        assert cli_main(["--fen", BACK_RANK, "--nodes", "5"]) == 0
        out = capsys.readouterr().out
        assert "Best move: a1a8" in out
        assert "Depth of PV: 1" in out
        assert "Max ply: 1" in out
        assert "Time:" in out

    def test_zero_budget(self, capsys):
        assert cli_main(["--fen", chess.STARTING_FEN, "--nodes", "0"]) == 0
        assert "Depth of PV: 0" in capsys.readouterr().out

    def test_prompts_for_missing_input(self, monkeypatch, capsys):
        answers = iter([BACK_RANK, "3"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
        assert cli_main([]) == 0
        assert "Best move: a1a8" in capsys.readouterr().out

    def test_invalid_fen(self, capsys):
        assert cli_main(["--fen", "garbage", "--nodes", "1"]) == 2
        assert "Invalid FEN" in capsys.readouterr().err

    def test_negative_budget(self, capsys):
        assert cli_main(["--fen", chess.STARTING_FEN, "--nodes", "-1"]) == 2
        assert "Invalid node budget" in capsys.readouterr().err

    def test_non_numeric_budget_prompt(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda _prompt: "lots")
        assert cli_main(["--fen", chess.STARTING_FEN]) == 2
        assert "Invalid node budget" in capsys.readouterr().err

    def test_checkmated_position(self, capsys):
        assert cli_main(["--fen", FOOLS_MATE, "--nodes", "5"]) == 0
        assert "Best move: (none)" in capsys.readouterr().out


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI REST API
# ════════════════════════════════════════════════════════════════════════════


class TestApi:
    @pytest.fixture(autouse=True)
    def client(self):
        api.position.reset()
        self.client = TestClient(api.app)
        yield
        api.position.reset()

    def test_get_board(self):
        r = self.client.get("/board")
        assert r.status_code == 200
        data = r.json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert len(data["legal_moves"]) == 20
        assert data["is_game_over"] is False
        assert data["result"] is None

    def test_set_position(self):
        r = self.client.post("/position", json={"fen": BACK_RANK})
        assert r.status_code == 200
        assert r.json()["fen"] == BACK_RANK

    def test_set_invalid_position(self):
        r = self.client.post("/position", json={"fen": "nonsense"})
        assert r.status_code == 400

    def test_make_move(self):
        r = self.client.post("/move", json={"move": "e2e4"})
        assert r.status_code == 200
        assert self.client.get("/board").json()["turn"] == "black"

    def test_illegal_move(self):
        r = self.client.post("/move", json={"move": "e2e5"})
        assert r.status_code == 400

    def test_search(self):
        self.client.post("/position", json={"fen": BACK_RANK})
        r = self.client.post("/search", json={"nodes": 5})
        assert r.status_code == 200
        data = r.json()
        assert data["best_move"] == "a1a8"
        assert data["pv"][0] == "a1a8"
        assert data["pv_depth"] == 1
        assert data["fen"] == BACK_RANK
        # Searching never changes the game position
        assert self.client.get("/board").json()["fen"] == BACK_RANK

    def test_search_negative_budget(self):
        r = self.client.post("/search", json={"nodes": -1})
        assert r.status_code == 422

    def test_search_game_over(self):
        self.client.post("/position", json={"fen": FOOLS_MATE})
        r = self.client.post("/search", json={"nodes": 5})
        assert r.status_code == 400

    def test_reset(self):
        self.client.post("/move", json={"move": "e2e4"})
        r = self.client.post("/reset")
        assert r.json()["fen"] == chess.STARTING_FEN


# ════════════════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = Config.load_from_toml(str(tmp_path / "absent.toml"))
        assert cfg.search.nodes == SearchConfig().nodes
        assert cfg.search.loss_threshold == -(32000 - 2 * 246)

    def test_values_override_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'log_level = "DEBUG"\n'
            "[search]\nnodes = 42\nepsilon = 5\n"
            "[eval]\nTEMPO_BONUS = 0\n"
        )
        cfg = Config.load_from_toml(str(path))
        assert cfg.search.nodes == 42
        assert cfg.search.epsilon == 5
        assert cfg.eval.TEMPO_BONUS == 0
        assert cfg.log_level == "DEBUG"

    def test_unknown_key_ignored(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text("[search]\nbogus = 1\n")
        cfg = Config.load_from_toml(str(path))
        assert not hasattr(cfg.search, "bogus")
        assert "bogus" in caplog.text

    def test_mate_helpers(self):
        cfg = SearchConfig()
        assert cfg.mated_in(0) == -cfg.mate_value
        assert cfg.mate_in(3) == -cfg.mated_in(3)
        assert cfg.loss_threshold < -cfg.known_win
