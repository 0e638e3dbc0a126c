from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from cachefront.application.manager import CacheManager
from cachefront.domain.errors import CacheError
from cachefront.infrastructure.composition import build_cache_manager
from cachefront.infrastructure.config import load_config
from cachefront.infrastructure.logging.setup import configure_logging

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cachefront")

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--backend",
        default=None,
        choices=["memory", "diskcache", "redis"],
        help="Override cache backend.",
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Override diskcache directory.",
    )
    parser.add_argument(
        "--failure-mode",
        default=None,
        choices=["raise", "log"],
        help="Override failure mode.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="Print the value stored under KEY.")
    get.add_argument("key")
    get.add_argument("--default", default=None, help="Printed on a miss.")

    set_ = commands.add_parser("set", help="Store VALUE (as text) under KEY.")
    set_.add_argument("key")
    set_.add_argument("value")
    set_.add_argument("--ttl", type=int, default=None, help="Lifetime in seconds.")

    delete = commands.add_parser("delete", help="Remove KEY.")
    delete.add_argument("key")

    has = commands.add_parser("has", help="Print whether KEY is present.")
    has.add_argument("key")

    commands.add_parser("clear", help="Remove every entry.")

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.backend:
        overrides["cache_backend"] = args.backend
    if args.cache_dir:
        overrides["cache_dir"] = args.cache_dir
    if args.failure_mode:
        overrides["cache_failure_mode"] = args.failure_mode
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return overrides


def _run(manager: CacheManager, args: argparse.Namespace) -> int:
    cache = manager.cache

    if args.command == "get":
        value = cache.get(args.key, args.default)
        if value is not None:
            print(value)
        return 0
    if args.command == "has":
        print("true" if cache.has(args.key) else "false")
        return 0

    if args.command == "set":
        ok = cache.set(args.key, args.value, args.ttl)
    elif args.command == "delete":
        ok = cache.delete(args.key)
    else:
        ok = cache.clear()
    return 0 if ok else 1


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, builds the cache stack and runs one command.
    Returns the process exit code (0 success, 1 cache error / refused write).
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )
    configure_logging(config)

    try:
        with build_cache_manager(config) as manager:
            return _run(manager, args)
    except CacheError as e:
        log.debug("cli_command_failed", command=args.command, code=e.code)
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(start())
