"""Line-start table for offset to line/column mapping."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final
from typing import TypeAlias

LineTable: TypeAlias = list[int]


def build_line_table(source: str) -> LineTable:
    """Records the offset at which every line of ``source`` begins.

    One entry per line, including the empty line after a trailing newline.
    The first entry is always 0 and entries are strictly increasing.
    """
    table: LineTable = []
    start = 0
    for line in source.split("\n"):
        table.append(start)
        # +1 for the newline consumed by split
        start += len(line) + 1
    return table


def line_of(table: LineTable, offset: int) -> int:
    """Returns the 1-based line containing ``offset``.

    Offsets that precede every recorded start map to line 1.
    """
    return max(bisect_right(table, offset), 1)


class LineIndex:
    """Offset lookups against the line table of a single source text.

    Built once per parse and read-only afterwards.
    """

    def __init__(self, source: str) -> None:
        self.source: Final = source
        self.table: Final = build_line_table(source)

    @property
    def line_count(self) -> int:
        return len(self.table)

    def line_of(self, offset: int) -> int:
        """Converts a character offset to its 1-based line number."""
        return line_of(self.table, offset)

    def column_of(self, offset: int) -> int:
        """Converts a character offset to its 1-based column number."""
        return offset - self.table[self.line_of(offset) - 1] + 1
