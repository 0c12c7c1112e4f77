"""CLI entrypoint for the quiz shell."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from .channel import ConsoleChannel, InputFn, PrintFn
from .config import Settings, load_settings, parse_log_level, parse_port
from .dispatcher import Dispatcher
from .log import configure_logging
from .server import open_store, run_session, serve


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quizshell", description="Trivia quiz command shell")
    parser.add_argument("command", nargs="?", default="shell", choices=["shell", "serve"])
    parser.add_argument("--db", type=Path, help="quiz database file")
    parser.add_argument("--host", help="address to listen on (serve)")
    parser.add_argument("--port", type=parse_port, help="TCP port to listen on (serve)")
    parser.add_argument("--log-level", type=parse_log_level, help="loguru level name")
    parser.add_argument("--no-seed", action="store_true", help="do not insert sample quizzes into an empty database")
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    args = _parser().parse_args(argv)
    settings = load_settings().override(
        db_path=args.db,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        seed=False if args.no_seed else None,
    )
    configure_logging(settings.log_level)
    if args.command == "serve":
        try:
            asyncio.run(serve(settings))
        except KeyboardInterrupt:
            pass
        return 0
    return play_shell(settings)


def play_shell(settings: Settings, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the command loop on the local terminal."""
    store = open_store(settings)
    try:
        asyncio.run(run_session(Dispatcher(store), ConsoleChannel(input_fn, print_fn)))
    finally:
        store.close()
    return 0


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
