"""LuhnRedactor — the main API.

Usage:
    from luhn_filter import LuhnRedactor

    redactor = LuhnRedactor()
    redactor.redact(b"card 4111 1111 1111 1111 ok")
    # b"card XXXX XXXX XXXX XXXX ok"

    redactor.redact_text("ref 56613959932537")
    # "ref XXXXXXXXXXXXXX"

    with open("in.log", "rb") as src, open("out.log", "wb") as dst:
        stats = redactor.redact_stream(src, dst)
"""

from __future__ import annotations
import io
from typing import Iterable, Iterator

from .streaming import StreamingLuhnFilter, StreamPump
from .types import ByteSink, ByteSource, FilterConfig, PumpStats


class LuhnRedactor:
    """Masks Luhn-valid 14–16 digit runs in bytes, text and streams.

    Reusable; every call gets its own working buffer.
    """

    def __init__(self, config: FilterConfig | None = None) -> None:
        self.config = config or FilterConfig()

    def redact(self, data: bytes) -> bytes:
        """Redact a complete input held in memory."""
        sink = io.BytesIO()
        self.redact_stream(io.BytesIO(data), sink)
        return sink.getvalue()

    def redact_text(self, text: str) -> str:
        """Redact a string (UTF-8 never puts ASCII digits inside multibyte sequences)."""
        return self.redact(text.encode("utf-8")).decode("utf-8")

    def redact_stream(self, source: ByteSource, sink: ByteSink) -> PumpStats:
        """Filter ``source`` into ``sink`` until end-of-stream."""
        return StreamPump(source, sink, self.config).run()

    def redact_chunks(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        """Yield redacted output as soon as each part of it becomes final."""
        stream = StreamingLuhnFilter(self.config)
        for chunk in chunks:
            out = stream.feed(chunk)
            if out:
                yield out
        tail = stream.flush()
        if tail:
            yield tail
