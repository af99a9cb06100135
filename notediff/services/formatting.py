"""
Text and JSON rendering of diff and merge preview results.
"""

from __future__ import annotations

import json
from typing import Iterator, Sequence, Union

from notediff.core.models import (
    Change,
    ChangeType,
    DiffResult,
    Hunk,
    MergeHunk,
    MergePreviewResult,
    Token,
    TokenType,
)


def to_json(result: Union[DiffResult, MergePreviewResult], indent: int = 2) -> str:
    """Serialize a result to its JSON wire shape."""
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)


def render_tokens(tokens: Sequence[Token]) -> str:
    """Render word spans with ``[-deleted-]`` and ``{+added+}`` markers."""
    parts = []
    for token in tokens:
        if token.type == TokenType.DELETED:
            parts.append(f"[-{token.text}-]")
        elif token.type == TokenType.ADDED:
            parts.append(f"{{+{token.text}+}}")
        else:
            parts.append(token.text)
    return ''.join(parts)


def _format_change(change: Change) -> Iterator[str]:
    if change.type == ChangeType.ADD:
        yield f"+{change.new_text}"
    elif change.type == ChangeType.DELETE:
        yield f"-{change.old_text}"
    elif change.word_diff is not None:
        yield f"-{render_tokens(change.word_diff.old_tokens)}"
        yield f"+{render_tokens(change.word_diff.new_tokens)}"
    else:
        yield f"-{change.old_text}"
        yield f"+{change.new_text}"


def format_hunk(hunk: Hunk) -> Iterator[str]:
    """Yield the unified-style lines of one hunk."""
    yield hunk.header
    for line in hunk.context_before:
        yield f" {line.text}"
    for change in hunk.changes:
        yield from _format_change(change)
    if hunk.truncated:
        yield "... (hunk truncated)"
    for line in hunk.context_after:
        yield f" {line.text}"


def format_diff(
    result: DiffResult,
    left_label: str = "left",
    right_label: str = "right"
) -> Iterator[str]:
    """Generate unified-style diff output."""
    yield f"--- {left_label}"
    yield f"+++ {right_label}"

    for hunk in result.hunks:
        yield from format_hunk(hunk)

    if result.truncated:
        yield "... (diff truncated)"


def _base_range(merge_hunk: MergeHunk) -> str:
    if merge_hunk.conflict_region is not None:
        start, end = merge_hunk.conflict_region.start, merge_hunk.conflict_region.end
    else:
        hunk = merge_hunk.local_hunk or merge_hunk.head_hunk
        start, end = hunk.old_start, hunk.old_end
    if end - start <= 1:
        return f"base line {start}"
    return f"base lines {start}-{end - 1}"


def format_merge_preview(result: MergePreviewResult) -> Iterator[str]:
    """Generate a human-readable merge preview report."""
    summary = result.summary
    yield f"Merge preview: {result.status.value}"
    yield (f"Hunks: {summary.total_hunks} "
           f"({summary.clean_count} clean, {summary.conflict_count} conflicts)")
    yield f"Local changes: {summary.local_stats}"
    yield f"Head changes: {summary.head_stats}"

    for merge_hunk in result.hunks:
        yield ""
        yield f"[{merge_hunk.status.value}] {merge_hunk.type.value}  {_base_range(merge_hunk)}"
        if merge_hunk.local_hunk is not None:
            yield "  local:"
            for line in format_hunk(merge_hunk.local_hunk):
                yield f"    {line}"
        if merge_hunk.head_hunk is not None:
            yield "  head:"
            for line in format_hunk(merge_hunk.head_hunk):
                yield f"    {line}"
