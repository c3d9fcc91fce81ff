"""CLI subcommand handlers."""

from __future__ import annotations

import argparse
import json
import sys

from aarcache.exceptions import AarCacheError, CacheConfigurationError, ConfigError, SyncCancelledError
from aarcache.exceptions.validation import format_errors
from aarcache.reporting.stdout import StdoutReporter
from aarcache.validation import preflight_validate
from aarcache.workspace import clear_workspace_cache, lookup_library, sync_workspace


def handle_sync(args: argparse.Namespace) -> int:
    """Run one sync pass and print its summary."""
    validation_errors = preflight_validate(root=args.root, config_path=args.config)
    if validation_errors:
        print(format_errors(validation_errors), file=sys.stderr)
        return 2

    try:
        result = sync_workspace(
            root=args.root,
            config_path=args.config,
            mode=args.mode,
            out=args.output_dir,
        )
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except (SyncCancelledError, KeyboardInterrupt):
        print("Sync cancelled.", file=sys.stderr)
        return 130
    except AarCacheError as exc:
        print(f"Sync error: {exc}", file=sys.stderr)
        return 1

    if not args.no_stdout:
        use_color = not args.no_color and sys.stdout.isatty()
        reporter = StdoutReporter(
            result,
            color=use_color,
            verbose=args.verbose,
            cache_dir=result.cache_dir,
            fingerprint=result.config_fingerprint,
        )
        print(reporter.render())
    return 0


def handle_lookup(args: argparse.Namespace) -> int:
    """Print the cached resource directory and class jar of a library key as JSON."""
    try:
        resolved = lookup_library(root=args.root, library_key=args.library_key, config_path=args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except CacheConfigurationError as exc:
        print(f"Lookup error: {exc}", file=sys.stderr)
        return 1

    if not resolved:
        print(f"Lookup error: no declared library with key {args.library_key!r}", file=sys.stderr)
        return 1
    print(json.dumps([entry.to_dict() for entry in resolved], indent=2, sort_keys=True))
    return 0


def handle_clear(args: argparse.Namespace) -> int:
    """Delete the cache root."""
    try:
        cache_dir = clear_workspace_cache(root=args.root, config_path=args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    print(f"Cleared {cache_dir}")
    return 0


def handle_validate_config(args: argparse.Namespace) -> int:
    """Run config validation and report results."""
    errors = preflight_validate(root=args.root, config_path=args.config)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0
