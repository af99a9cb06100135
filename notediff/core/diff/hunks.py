"""
Grouping of aligned lines into hunks.

The grouper walks the alignment stream as a two-state machine:

- Idle: scanning unchanged lines. A change within ``context`` lines
  opens a hunk seeded with up to ``context`` preceding unchanged lines.
- Open: changes accumulate; unchanged lines collect as trailing context
  until ``context`` of them close the hunk. A change arriving while
  trailing context is being collected discards that context and keeps
  the hunk open.

Each hunk is assembled by a HunkBuilder that is consumed on finalize.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from notediff.core.diff.line_diff import LineOp, LineOpTag
from notediff.core.models import Change, ChangeType, ContextLine, Hunk


logger = logging.getLogger(__name__)


def context_line(op: LineOp) -> ContextLine:
    """Create a ContextLine from an EQUAL operation."""
    return ContextLine(old_line=op.old_index + 1, new_line=op.new_index + 1, text=op.old_text)


def change_from_op(op: LineOp) -> Change:
    """Create a Change from a non-equal operation."""
    if op.tag == LineOpTag.DELETE:
        return Change(ChangeType.DELETE, old_line=op.old_index + 1, old_text=op.old_text)
    if op.tag == LineOpTag.INSERT:
        return Change(ChangeType.ADD, new_line=op.new_index + 1, new_text=op.new_text)
    if op.tag == LineOpTag.REPLACE:
        return Change(
            ChangeType.MODIFY,
            old_line=op.old_index + 1,
            new_line=op.new_index + 1,
            old_text=op.old_text,
            new_text=op.new_text,
        )
    raise ValueError(f"Not a change operation: {op.tag}")


class HunkBuilder:
    """Accumulates one hunk; ``finalize`` turns it into an immutable Hunk."""

    def __init__(self, context_before: Sequence[ContextLine], max_changes: int):
        self.context_before = list(context_before)
        self.changes: list[Change] = []
        self.context_after: list[ContextLine] = []
        self.max_changes = max_changes
        self._first_op: Optional[LineOp] = None
        self._span_start: Optional[int] = None
        self._span_end: Optional[int] = None
        self._finalized = False

    def add_change(self, op: LineOp) -> None:
        if self._first_op is None:
            self._first_op = op
        self.changes.append(change_from_op(op))
        self.context_after = []

        # Base line touched; an insertion claims the line it precedes
        line = op.old_index + 1
        self._span_start = line if self._span_start is None else min(self._span_start, line)
        self._span_end = line + 1 if self._span_end is None else max(self._span_end, line + 1)

    def add_context_after(self, op: LineOp) -> None:
        self.context_after.append(context_line(op))

    def finalize(self, context: int) -> Hunk:
        """Build the Hunk. The builder cannot be used afterwards."""
        if self._finalized:
            raise RuntimeError("HunkBuilder already finalized")
        if self._first_op is None:
            raise RuntimeError("Cannot finalize a hunk without changes")
        self._finalized = True

        context_after = self.context_after[:context]

        if self.context_before:
            old_start = self.context_before[0].old_line
            new_start = self.context_before[0].new_line
        else:
            old_start = self._first_op.old_index + 1
            new_start = self._first_op.new_index + 1

        surrounding = len(self.context_before) + len(context_after)
        old_lines = surrounding + sum(1 for c in self.changes if c.old_text is not None)
        new_lines = surrounding + sum(1 for c in self.changes if c.new_text is not None)

        changes = self.changes
        truncated = len(changes) > self.max_changes
        if truncated:
            logger.warning(
                f"HunkBuilder - Hunk at line {old_start} has {len(changes)} changes, "
                f"keeping {self.max_changes}"
            )
            changes = changes[:self.max_changes]

        return Hunk(
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
            context_before=tuple(self.context_before),
            changes=tuple(changes),
            context_after=tuple(context_after),
            truncated=truncated,
            change_span=(self._span_start, self._span_end),
        )


class HunkGrouper:
    """Groups an alignment stream into hunks bounded by context lines."""

    def __init__(self, context: int = 3, max_hunks: int = 1000, max_changes_per_hunk: int = 500):
        if context < 0:
            raise ValueError("context must not be negative")
        self.context = context
        self.max_hunks = max_hunks
        self.max_changes_per_hunk = max_changes_per_hunk

    def group(self, ops: Sequence[LineOp]) -> tuple[list[Hunk], bool]:
        """
        Group operations into hunks.

        Returns:
            Tuple of (hunks, truncated) where truncated is True if
            collection stopped at ``max_hunks``
        """
        hunks: list[Hunk] = []
        builder: Optional[HunkBuilder] = None
        floor = 0  # First op not yet owned by an emitted hunk
        truncated = False

        i = 0
        while i < len(ops):
            op = ops[i]

            if builder is None:
                start = i if op.is_change else self._next_change(ops, i + 1)
                if start is None:
                    # Everything up to i + context is unchanged
                    i += self.context + 1
                    continue
                if len(hunks) >= self.max_hunks:
                    truncated = True
                    break
                builder = self._open(ops, start, floor)
                i = start
                continue

            if op.is_change:
                builder.add_change(op)
            else:
                if len(builder.context_after) < self.context:
                    builder.add_context_after(op)
                if len(builder.context_after) >= self.context:
                    hunks.append(builder.finalize(self.context))
                    builder = None
                    floor = i + 1
            i += 1

        if builder is not None:
            hunks.append(builder.finalize(self.context))

        if truncated:
            logger.warning(f"HunkGrouper - Stopped after {self.max_hunks} hunks")

        return hunks, truncated

    def _next_change(self, ops: Sequence[LineOp], start: int) -> Optional[int]:
        """Index of the first change within ``context`` ops from start."""
        for index in range(start, min(start + self.context, len(ops))):
            if ops[index].is_change:
                return index
        return None

    def _open(self, ops: Sequence[LineOp], start: int, floor: int) -> HunkBuilder:
        """Open a hunk at ``start`` with context collected backwards."""
        first = max(floor, start - self.context)
        context_before = [context_line(op) for op in ops[first:start]]
        return HunkBuilder(context_before, self.max_changes_per_hunk)
