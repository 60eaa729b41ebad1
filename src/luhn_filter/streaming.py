"""Streaming filter — masks card numbers in a byte stream with bounded memory.

Two front ends share the same buffer discipline:

    # pull from a source, push to a sink
    pump = StreamPump(sys.stdin.buffer, sys.stdout.buffer)
    stats = pump.run()

    # push chunks in, collect what is ready
    f = StreamingLuhnFilter()
    for chunk in chunks:
        out.write(f.feed(chunk))
    out.write(f.flush())

After each chunk the whole retained region is rescanned, the prefix up to the
safe anchor is emitted and the rest is shifted to the front of the buffer to
wait for more input.  Output does not depend on how the input was chunked.
"""

from __future__ import annotations

from .buffer import WorkingBuffer
from .log import get_logger
from .scanner import scan
from .types import ByteSink, ByteSource, CapacityExceeded, FilterConfig, PumpStats

logger = get_logger(__name__)


def _release(buffer: WorkingBuffer, config: FilterConfig, stats: PumpStats) -> bytes:
    """Scan the buffer, detach the safe prefix and compact the rest."""
    raw, redacted = buffer.snapshot_for_scan()
    try:
        safe_anchor = scan(
            raw,
            redacted,
            min_digits=config.min_digits,
            max_digits=config.max_digits,
            mask=config.mask_byte,
        )
    finally:
        raw.release()
        redacted.release()
    if safe_anchor == 0:
        return b""
    out = buffer.redacted_bytes(0, safe_anchor)
    _count_masked(buffer, out, config, stats)
    buffer.compact(safe_anchor)
    return out


def _drain_tail(buffer: WorkingBuffer, config: FilterConfig, stats: PumpStats) -> bytes:
    """Detach everything left; the last scan already masked it."""
    out = buffer.redacted_bytes()
    _count_masked(buffer, out, config, stats)
    buffer.clear()
    return out


def _count_masked(buffer: WorkingBuffer, out: bytes, config: FilterConfig, stats: PumpStats) -> None:
    raw = buffer.raw_bytes(0, len(out))
    mask = config.mask.encode("ascii")
    stats.digits_masked += out.count(mask) - raw.count(mask)


class ChunkReader:
    """Pulls the next chunk from a byte source into a working buffer."""

    __slots__ = ("_read", "_buffer")

    def __init__(self, source: ByteSource, buffer: WorkingBuffer) -> None:
        # read1 returns what is available instead of blocking for a full buffer
        self._read = getattr(source, "read1", None) or source.read
        self._buffer = buffer

    def read(self) -> int:
        """Append up to the remaining capacity; return bytes read, 0 at end-of-stream."""
        if self._buffer.is_full:
            raise CapacityExceeded(self._buffer.capacity)
        data = self._read(self._buffer.remaining)
        if not data:
            return 0
        self._buffer.append(data)
        return len(data)


class StreamPump:
    """Read → scan → write safe prefix → compact, until the source is exhausted."""

    def __init__(
        self,
        source: ByteSource,
        sink: ByteSink,
        config: FilterConfig | None = None,
    ) -> None:
        self.config = config or FilterConfig()
        self.buffer = WorkingBuffer(self.config.capacity)
        self.stats = PumpStats()
        self._reader = ChunkReader(source, self.buffer)
        self._sink = sink
        self._flush = getattr(sink, "flush", None)

    def run(self) -> PumpStats:
        """Filter the whole stream.  Raises CapacityExceeded or the source/sink's OSError."""
        log = logger.bind(capacity=self.config.capacity)
        log.debug("pump_started")
        try:
            while True:
                count = self._reader.read()
                if count == 0:
                    break
                self.stats.bytes_read += count
                self._write(_release(self.buffer, self.config, self.stats))
        except CapacityExceeded:
            log.error("capacity_exceeded", pending=len(self.buffer), bytes_read=self.stats.bytes_read)
            raise

        self._write(_drain_tail(self.buffer, self.config, self.stats))
        log.debug(
            "pump_finished",
            bytes_read=self.stats.bytes_read,
            bytes_written=self.stats.bytes_written,
            digits_masked=self.stats.digits_masked,
            flushes=self.stats.flushes,
        )
        return self.stats

    def _write(self, data: bytes) -> None:
        if not data:
            return
        self._sink.write(data)
        if self._flush is not None:
            self._flush()
        self.stats.bytes_written += len(data)
        self.stats.flushes += 1
        logger.debug("pump_flushed", size=len(data), retained=len(self.buffer))


class StreamingLuhnFilter:
    """Push-style filter: feed chunks, get back whatever is final."""

    __slots__ = ("config", "stats", "_buffer")

    def __init__(self, config: FilterConfig | None = None) -> None:
        self.config = config or FilterConfig()
        self.stats = PumpStats()
        self._buffer = WorkingBuffer(self.config.capacity)

    @property
    def pending(self) -> int:
        """Bytes held back waiting for more input."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> bytes:
        """Feed a chunk, return any output that is now safe to emit."""
        out_parts: list[bytes] = []
        view = memoryview(chunk)
        while view:
            # same slicing the pump gets from a capacity-bounded read
            if self._buffer.is_full:
                logger.error("capacity_exceeded", pending=len(self._buffer))
                raise CapacityExceeded(self._buffer.capacity)
            piece = view[:self._buffer.remaining]
            view = view[len(piece):]
            self._buffer.append(piece)
            self.stats.bytes_read += len(piece)
            out = _release(self._buffer, self.config, self.stats)
            if out:
                out_parts.append(out)
        return self._account(b"".join(out_parts))

    def flush(self) -> bytes:
        """Emit the held-back tail (call at end of stream)."""
        return self._account(_drain_tail(self._buffer, self.config, self.stats))

    def _account(self, out: bytes) -> bytes:
        if out:
            self.stats.bytes_written += len(out)
            self.stats.flushes += 1
        return out
