"""Core types."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol

# Luhn window and buffer defaults
MIN_DIGITS = 14
MAX_DIGITS = 16
DEFAULT_CAPACITY = 32 * 1024
DEFAULT_MASK = "X"
SEPARATORS = b" -"


class LuhnFilterError(Exception):
    """Base class for filter errors."""


class CapacityExceeded(LuhnFilterError):
    """The working buffer cannot hold a candidate run that is still unresolved."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"working buffer of {capacity} bytes exhausted by an unbroken digit run")
        self.capacity = capacity


class ConfigError(LuhnFilterError, ValueError):
    """Invalid filter configuration."""


class ByteSource(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...


class ByteSink(Protocol):
    def write(self, data: bytes, /) -> object: ...


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Configuration for the Luhn filter."""
    capacity: int = DEFAULT_CAPACITY   # fixed working-buffer size in bytes
    min_digits: int = MIN_DIGITS
    max_digits: int = MAX_DIGITS
    mask: str = DEFAULT_MASK           # single ASCII byte written over each digit

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ConfigError(f"capacity must be positive, got {self.capacity}")
        if self.min_digits < 1:
            raise ConfigError(f"min_digits must be positive, got {self.min_digits}")
        if self.max_digits < self.min_digits:
            raise ConfigError(
                f"max_digits ({self.max_digits}) is smaller than min_digits ({self.min_digits})"
            )
        if len(self.mask) != 1 or not self.mask.isascii():
            raise ConfigError(f"mask must be a single ASCII character, got {self.mask!r}")
        encoded = self.mask.encode("ascii")
        if encoded.isdigit() or encoded in SEPARATORS:
            raise ConfigError(f"mask {self.mask!r} would be read back as part of a number")

    @property
    def mask_byte(self) -> int:
        return ord(self.mask)


@dataclass(slots=True)
class PumpStats:
    """Counters for one filtered stream."""
    bytes_read: int = 0
    bytes_written: int = 0
    digits_masked: int = 0
    flushes: int = 0                   # non-empty writes to the sink
