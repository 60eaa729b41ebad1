"""Luhn scanner — finds and masks card-number-like digit runs in a buffer.

The scan runs right to left.  Every digit is tried as the right end (anchor)
of a candidate run; from there a second cursor walks left over digits and
interior separators, accumulating the Luhn sum one digit at a time.  Whenever
the run holds ``min_digits``..``max_digits`` digits and the sum is a multiple
of ten the start mark moves to the cursor, so the longest valid run for the
anchor is the one masked.

Besides masking, the scan reports a *safe anchor*: one past the first hard
delimiter (a byte that is neither digit nor separator) met on the way left.
Nothing before it can change when more input is appended, because a run can
only reach further left, never across a delimiter.
"""

from __future__ import annotations

from .types import MAX_DIGITS, MIN_DIGITS, SEPARATORS

_DIGITS = frozenset(b"0123456789")
_SEPARATORS = frozenset(SEPARATORS)
_ZERO = ord("0")

# Doubled digit with its own digits summed:  0  1  2  3  4  5  6  7  8  9
_LUHN_DOUBLED = (0, 2, 4, 6, 8, 1, 3, 5, 7, 9)


def luhn_weight(position: int, digit: int) -> int:
    """Weight of ``digit`` (0-9) at 1-based ``position`` from the run's right end."""
    return _LUHN_DOUBLED[digit] if position % 2 == 0 else digit


def scan(
    raw,
    redacted,
    *,
    min_digits: int = MIN_DIGITS,
    max_digits: int = MAX_DIGITS,
    mask: int = ord("X"),
) -> int:
    """Mask every Luhn-valid run in ``raw`` into ``redacted``.

    Args:
        raw: Input bytes (any indexable byte sequence, e.g. a memoryview).
        redacted: Writable byte sequence of the same length, pre-filled with
            a copy of ``raw`` (earlier masking may already be present).
        min_digits: Shortest digit count eligible for masking.
        max_digits: Longest digit count a run may extend to.
        mask: Byte value written over masked digits.

    Returns:
        The safe anchor: ``len(raw)`` when no digit was seen, else one past
        the first hard delimiter found scanning leftwards, or ``0`` when
        nothing can be emitted yet.
    """
    length = len(raw)
    safe_anchor = 0
    saw_digit = False

    for anchor in range(length - 1, -1, -1):
        byte = raw[anchor]
        if byte not in _DIGITS:
            if safe_anchor == 0 and byte not in _SEPARATORS:
                safe_anchor = anchor + 1
            continue

        saw_digit = True
        considered = 1
        checksum = byte - _ZERO
        start_mark = anchor + 1

        mark = anchor - 1
        while mark >= 0 and considered < max_digits:
            byte = raw[mark]
            if byte in _DIGITS:
                considered += 1
                checksum += luhn_weight(considered, byte - _ZERO)
            elif byte not in _SEPARATORS:
                if safe_anchor == 0:
                    safe_anchor = mark + 1
                break
            if considered >= min_digits and checksum % 10 == 0:
                start_mark = mark
            mark -= 1

        # empty range unless a valid run was found
        for index in range(start_mark, anchor + 1):
            if raw[index] in _DIGITS:
                redacted[index] = mask

    return safe_anchor if saw_digit else length
