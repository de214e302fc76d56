"""Command line wrapper: search one position and print the recommended move.

    python -m interface.cli --fen "<FEN>" --nodes 500

Missing arguments are asked for interactively.
"""

import argparse
import sys

from frontier.config import CONFIG, configure_logging
from frontier.core.board import Position
from frontier.core.search import FrontierSearch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Best-first frontier search for one chess position")
    parser.add_argument("--fen", help="Position to search (prompted for if omitted)")
    parser.add_argument("--nodes", type=int, help="Node-expansion budget (prompted for if omitted)")
    parser.add_argument("--log-level", default=None, help=f"Logging level (default {CONFIG.log_level})")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    fen = args.fen or input("Position FEN: ").strip()
    nodes = args.nodes
    if nodes is None:
        raw = input("Nodes to search: ").strip()
        try:
            nodes = int(raw) if raw else CONFIG.search.nodes
        except ValueError:
            print(f"Invalid node budget: {raw!r}", file=sys.stderr)
            return 2
    if nodes < 0:
        print(f"Invalid node budget: {nodes}", file=sys.stderr)
        return 2

    try:
        position = Position(fen)
    except ValueError as e:
        print(f"Invalid FEN: {e}", file=sys.stderr)
        return 2

    result = FrontierSearch().search(position, nodes)
    best = result.best_move.uci() if result.best_move else "(none)"
    print(f"Best move: {best}")
    print(f"Depth of PV: {result.pv_depth}")
    print(f"Max ply: {result.max_depth}")
    print(f"Time: {result.elapsed:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
