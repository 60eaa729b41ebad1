"""luhn-filter — stream redaction of Luhn-valid card numbers with bounded memory."""

from .redactor import LuhnRedactor
from .streaming import ChunkReader, StreamPump, StreamingLuhnFilter
from .buffer import WorkingBuffer
from .scanner import scan, luhn_weight
from .config import create_filter, load_config, load_from_yaml
from .types import (
    FilterConfig, PumpStats,
    LuhnFilterError, CapacityExceeded, ConfigError,
)

__all__ = [
    "LuhnRedactor", "FilterConfig", "PumpStats",
    "StreamPump", "StreamingLuhnFilter", "ChunkReader",
    "WorkingBuffer", "scan", "luhn_weight",
    "create_filter", "load_config", "load_from_yaml",
    "LuhnFilterError", "CapacityExceeded", "ConfigError",
]
__version__ = "0.1.0"
