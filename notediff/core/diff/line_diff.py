"""
Line alignment between two texts.

Turns difflib opcodes into a flat stream of per-line operations. A
``replace`` block is paired line by line; the paired lines become
REPLACE operations, which is what marks them as modified (rather than
independently deleted and added) further down the pipeline.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Sequence


class LineOpTag(Enum):
    """Alignment operation for a single line."""
    EQUAL = auto()
    DELETE = auto()
    INSERT = auto()
    REPLACE = auto()


@dataclass(frozen=True)
class LineOp:
    """
    One aligned line.

    ``old_index``/``new_index`` are 0-based. On the side a line does not
    exist on (old side of an INSERT, new side of a DELETE) the index is
    the position the line sits at on that side and the text is None.
    """
    tag: LineOpTag
    old_index: int
    new_index: int
    old_text: Optional[str] = None
    new_text: Optional[str] = None

    @property
    def is_change(self) -> bool:
        return self.tag != LineOpTag.EQUAL


def split_lines(content: str) -> list[str]:
    """
    Split content into lines.

    Only ``\\n`` separates lines; a trailing ``\\r`` is stripped from
    each line and a final newline does not produce an empty last line.
    """
    if not content:
        return []
    lines = content.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


class LineDiffEngine:
    """Computes an LCS-style alignment of two line sequences."""

    def align(self, old_lines: Sequence[str], new_lines: Sequence[str]) -> list[LineOp]:
        """Return the ordered alignment operations."""
        return list(self.iter_ops(old_lines, new_lines))

    def iter_ops(self, old_lines: Sequence[str], new_lines: Sequence[str]) -> Iterator[LineOp]:
        old = list(old_lines)
        new = list(new_lines)

        matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                for offset in range(i2 - i1):
                    yield LineOp(LineOpTag.EQUAL, i1 + offset, j1 + offset,
                                 old[i1 + offset], new[j1 + offset])
            elif tag == 'delete':
                for i in range(i1, i2):
                    yield LineOp(LineOpTag.DELETE, i, j1, old_text=old[i])
            elif tag == 'insert':
                for j in range(j1, j2):
                    yield LineOp(LineOpTag.INSERT, i1, j, new_text=new[j])
            else:
                yield from self._pair_replace(old, new, i1, i2, j1, j2)

    @staticmethod
    def _pair_replace(
        old: list[str],
        new: list[str],
        i1: int,
        i2: int,
        j1: int,
        j2: int
    ) -> Iterator[LineOp]:
        """Pair up a replace block; surplus lines become deletes/inserts."""
        paired = min(i2 - i1, j2 - j1)

        for offset in range(paired):
            yield LineOp(LineOpTag.REPLACE, i1 + offset, j1 + offset,
                         old[i1 + offset], new[j1 + offset])

        for i in range(i1 + paired, i2):
            yield LineOp(LineOpTag.DELETE, i, j1 + paired, old_text=old[i])

        for j in range(j1 + paired, j2):
            yield LineOp(LineOpTag.INSERT, i2, j, new_text=new[j])
