"""CLI entrypoint for aarcache."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from aarcache import __version__
from aarcache.cli.handlers import handle_clear, handle_lookup, handle_sync, handle_validate_config
from aarcache.constants.branding import CLI_DESCRIPTION
from aarcache.constants.sync import SYNC_MODE_INCREMENTAL, VALID_SYNC_MODES


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="aarcache",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Bring the unpacked AAR cache in line with the declared libraries")
    sync.add_argument("-r", "--root", type=Path, required=True, help="Workspace root path")
    sync.add_argument("-c", "--config", type=Path, help="Explicit config file")
    sync.add_argument(
        "--mode",
        choices=sorted(VALID_SYNC_MODES),
        default=SYNC_MODE_INCREMENTAL,
        help="Sync mode: full (clear first), incremental (default, prunes), partial (no pruning)",
    )
    sync.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the JSON sync report (no file written if omitted)",
    )
    sync.add_argument("--no-stdout", action="store_true", help="Silence stdout output")
    sync.add_argument("--no-color", action="store_true", help="Disable colored output")
    sync.add_argument("-v", "--verbose", action="store_true", help="Show cache location and debug logging")

    lookup = subparsers.add_parser("lookup", help="Print cached locations for a library key")
    lookup.add_argument("-r", "--root", type=Path, required=True, help="Workspace root path")
    lookup.add_argument("-c", "--config", type=Path, help="Explicit config file")
    lookup.add_argument("library_key", help="Library key as declared in the config")

    clear = subparsers.add_parser("clear", help="Delete the unpacked AAR cache")
    clear.add_argument("-r", "--root", type=Path, required=True, help="Workspace root path")
    clear.add_argument("-c", "--config", type=Path, help="Explicit config file")

    validate = subparsers.add_parser("validate-config", help="Validate configuration without syncing")
    validate.add_argument("-r", "--root", type=Path, required=True, help="Workspace root path")
    validate.add_argument("-c", "--config", type=Path, help="Explicit config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    verbose = getattr(args, "verbose", False)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return handle_validate_config(args)
    if args.command == "lookup":
        return handle_lookup(args)
    if args.command == "clear":
        return handle_clear(args)
    if args.command != "sync":
        parser.error(f"Unsupported command: {args.command}")
    return handle_sync(args)


if __name__ == "__main__":
    raise SystemExit(main())
