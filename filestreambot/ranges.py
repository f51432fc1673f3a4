"""Parsing of HTTP Range headers into byte ranges."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INT_RE = re.compile(r"[+-]?\d+")


class RangeError(ValueError):
    """A Range header that is malformed or cannot be satisfied."""


@dataclass(frozen=True)
class ByteRange:
    """An inclusive byte range within a file."""

    start: int
    end: int

    @property
    def length(self) -> int:
        """Number of bytes the range covers."""
        return self.end - self.start + 1


def _parse_int(text: str) -> int | None:
    text = text.strip()
    return int(text) if _INT_RE.fullmatch(text) else None


def parse_range(size: int, header: str) -> list[ByteRange]:
    """Return the satisfiable ranges of a Range header for a file of ``size`` bytes.

    Raises RangeError when the header has no ``=`` or no range in it can be served.
    """
    unit, sep, spec = header.partition("=")
    if not sep:
        raise RangeError("malformed range header")

    ranges = []
    for part in spec.split(","):
        first, dash, last = part.partition("-")
        if not dash:
            continue
        start = _parse_int(first)
        end = _parse_int(last)
        if start is None and end is None:
            continue
        if start is None:
            start = size - end
            end = size - 1
        elif end is None:
            end = size - 1
        end = min(end, size - 1)
        if start > end or start < 0:
            continue
        ranges.append(ByteRange(start, end))

    if not ranges:
        raise RangeError("unsatisfiable range")
    return ranges