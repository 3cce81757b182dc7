from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from tvac_log_analyzer.errors import StreamExhausted
from tvac_log_analyzer.models.phases import Phase, RawBlock


def is_blank(line: str) -> bool:
    return not line.strip()


class LineSource:
    """
    Pull-based line stream with one line of lookahead.

    Trailing ``\\n`` / ``\\r\\n`` are removed from every line. ``lines_read``
    counts consumed lines, so it is also the 0-based number of the next line.
    """

    def __init__(self, lines: Iterable[str]):
        self._it: Iterator[str] = iter(lines)
        self._peeked: Optional[str] = None
        self._has_peeked = False
        self.lines_read = 0

    @staticmethod
    def _clean(line: str) -> str:
        return line.rstrip("\r\n")

    def peek(self) -> Optional[str]:
        """Return the next line without consuming it, or None at end of stream."""
        if not self._has_peeked:
            raw = next(self._it, None)
            self._peeked = None if raw is None else self._clean(raw)
            self._has_peeked = True
        return self._peeked

    def next(self) -> Optional[str]:
        """Consume and return the next line, or None at end of stream."""
        line = self.peek()
        self._has_peeked = False
        self._peeked = None
        if line is not None:
            self.lines_read += 1
        return line

    def take(self, n: int) -> List[str]:
        """Consume up to ``n`` lines; fewer are returned only at end of stream."""
        out: List[str] = []
        while len(out) < n:
            line = self.next()
            if line is None:
                break
            out.append(line)
        return out

    @property
    def exhausted(self) -> bool:
        return self.peek() is None


class PacketFramer:
    """Cuts the line stream into fixed-length blocks for the active phase."""

    def __init__(self, source: LineSource):
        self.source = source

    def skip_blank(self) -> int:
        """Consume a run of blank separator lines; return how many were skipped."""
        n = 0
        while True:
            line = self.source.peek()
            if line is None or not is_blank(line):
                return n
            self.source.next()
            n += 1

    def frame(self, phase: Phase) -> RawBlock:
        """
        Pull exactly ``phase.block_length`` lines after any blank separators.

        Raises StreamExhausted if the source ends first; the partially collected
        lines are consumed and dropped.
        """
        self.skip_blank()
        needed = phase.block_length
        first_line_no = self.source.lines_read
        lines = self.source.take(needed)
        if len(lines) < needed:
            raise StreamExhausted(needed, len(lines), phase=phase.value, first_line_no=first_line_no)
        return RawBlock(phase=phase, lines=tuple(lines), first_line_no=first_line_no)

    def resync(self) -> int:
        """
        Discard lines up to and including the next blank line (or end of stream).

        Returns the number of discarded lines, separator included.
        """
        n = 0
        while True:
            line = self.source.next()
            if line is None:
                return n
            n += 1
            if is_blank(line):
                return n
