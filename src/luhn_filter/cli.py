"""CLI interface for luhn-filter — a stdin-to-stdout stream filter.

Usage:
    # Mask card numbers in a log file
    luhn-filter < app.log > app.redacted.log

    # Follow a live stream; output appears as soon as it is final
    tail -f app.log | luhn-filter

    # Larger buffer for inputs with very long digit/separator runs
    luhn-filter --capacity 1048576 < dump.txt

    # Settings from YAML, counters on stderr
    luhn-filter --config filter.yaml --stats < in.txt > out.txt

Environment:
    LUHN_FILTER_CONFIG    default for --config
    LUHN_FILTER_CAPACITY  default for --capacity
"""

from __future__ import annotations
import argparse
import dataclasses
import json
import os
import sys
from typing import Any

from .config import create_filter, load_config, load_from_yaml
from .log import configure_logging, get_logger
from .types import CapacityExceeded, ConfigError

logger = get_logger(__name__)


def _resolve_config(args: argparse.Namespace) -> dict[str, Any]:
    """Config file, then environment, then flags."""
    config_path = args.config or os.environ.get("LUHN_FILTER_CONFIG")
    cfg = load_from_yaml(config_path) if config_path else load_config({})

    env_capacity = os.environ.get("LUHN_FILTER_CAPACITY")
    if env_capacity:
        try:
            cfg["capacity"] = int(env_capacity)
        except ValueError as exc:
            raise ConfigError(f"LUHN_FILTER_CAPACITY is not an integer: {env_capacity!r}") from exc

    for key in ("capacity", "min_digits", "max_digits", "mask", "log_level"):
        value = getattr(args, key)
        if value is not None:
            cfg[key] = value
    return load_config(cfg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luhn-filter",
        description="Mask Luhn-valid card numbers in a byte stream (stdin to stdout)",
    )
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--capacity", type=int, default=None, help="Working-buffer size in bytes")
    parser.add_argument("--min-digits", dest="min_digits", type=int, default=None,
                        help="Shortest digit run to mask (default 14)")
    parser.add_argument("--max-digits", dest="max_digits", type=int, default=None,
                        help="Longest digit run to mask (default 16)")
    parser.add_argument("--mask", default=None, help="Replacement character (default X)")
    parser.add_argument("--log-level", dest="log_level", default=None, help="Log level for stderr")
    parser.add_argument("--stats", action="store_true", help="Print JSON counters to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = _resolve_config(args)
        configure_logging(cfg["log_level"])
        redactor = create_filter(cfg)
    except (ConfigError, ValueError, OSError) as exc:
        sys.stderr.write(f"luhn-filter: {exc}\n")
        return 1

    try:
        stats = redactor.redact_stream(sys.stdin.buffer, sys.stdout.buffer)
    except CapacityExceeded as exc:
        sys.stderr.write(f"luhn-filter: {exc}; retry with a larger --capacity\n")
        return 1
    except OSError as exc:
        logger.error("stream_failed", error=str(exc))
        sys.stderr.write(f"luhn-filter: I/O error: {exc}\n")
        return 1
    finally:
        sys.stdout.flush()

    if args.stats:
        json.dump(dataclasses.asdict(stats), sys.stderr)
        sys.stderr.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
