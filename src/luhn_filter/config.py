"""YAML/dict config loader for luhn-filter.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    luhn_filter:
      enabled: true
      capacity: 65536        # working-buffer bytes
      min_digits: 14
      max_digits: 16
      mask: X
      log_level: WARNING
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml

from .log import get_logger
from .redactor import LuhnRedactor
from .types import (
    DEFAULT_CAPACITY, DEFAULT_MASK, MAX_DIGITS, MIN_DIGITS,
    ConfigError, FilterConfig, PumpStats,
)

logger = get_logger(__name__)


class _NoopRedactor:
    """Pass-through redactor when filtering is disabled."""
    def __init__(self, config: FilterConfig | None = None) -> None:
        self.config = config or FilterConfig()
    def redact(self, data: bytes) -> bytes:
        return data
    def redact_text(self, text: str) -> str:
        return text
    def redact_stream(self, source, sink) -> PumpStats:
        stats = PumpStats()
        while chunk := source.read(self.config.capacity):
            sink.write(chunk)
            stats.bytes_read += len(chunk)
            stats.bytes_written += len(chunk)
            stats.flushes += 1
        return stats
    def redact_chunks(self, chunks):
        for chunk in chunks:
            if chunk:
                yield chunk


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"config must be a mapping, got {type(data).__name__}")
    # Support nested under "luhn_filter" key or flat
    if "luhn_filter" in data:
        data = data["luhn_filter"] or {}

    try:
        return {
            "enabled": bool(data.get("enabled", True)),
            "capacity": int(data.get("capacity", DEFAULT_CAPACITY)),
            "min_digits": int(data.get("min_digits", MIN_DIGITS)),
            "max_digits": int(data.get("max_digits", MAX_DIGITS)),
            "mask": str(data.get("mask", DEFAULT_MASK)),
            "log_level": str(data.get("log_level", "WARNING")).upper(),
        }
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid config value: {exc}") from exc


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"cannot parse {path}: {exc}") from exc
    cfg = load_config(raw)
    logger.debug("config_loaded", path=str(path), capacity=cfg["capacity"])
    return cfg


def to_filter_config(cfg: dict[str, Any]) -> FilterConfig:
    return FilterConfig(
        capacity=cfg["capacity"],
        min_digits=cfg["min_digits"],
        max_digits=cfg["max_digits"],
        mask=cfg["mask"],
    )


def create_filter(config: dict[str, Any]) -> LuhnRedactor:
    """Create a configured redactor from a config dict."""
    cfg = load_config(config)

    if not cfg["enabled"]:
        # Return a pass-through redactor (no masking)
        return _NoopRedactor(to_filter_config(cfg))

    return LuhnRedactor(to_filter_config(cfg))
