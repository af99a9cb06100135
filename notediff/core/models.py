"""
Core data models for the diff and merge preview engine.

This module defines all data structures produced by the engine:
- Line and word level diff models
- Hunk models
- Merge preview models

All models are designed to be:
- Transport-agnostic (callers serialize them via ``to_dict``)
- Immutable once produced (frozen dataclasses holding tuples)
- Type-hinted for IDE support
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Enumerations
# =============================================================================

class DiffMode(Enum):
    """Granularity of a diff."""
    LINE = "line"
    WORD = "word"
    AUTO = "auto"   # Request-only: resolved to LINE or WORD per result

    @classmethod
    def from_string(cls, value: str) -> 'DiffMode':
        """Create from a name or value, case-insensitively."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid diff mode: {value!r}")
        normalized = value.strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Invalid diff mode: {value!r}")


class ChangeType(Enum):
    """Type of a changed line inside a hunk."""
    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"


class TokenType(Enum):
    """Type of a word-level span."""
    UNCHANGED = "unchanged"
    ADDED = "added"
    DELETED = "deleted"


class MergeStatus(Enum):
    """Overall outcome of a merge preview."""
    CLEAN = "clean"
    CONFLICTED = "conflicted"


class MergeHunkStatus(Enum):
    """Outcome for a single merge hunk."""
    CLEAN = "clean"
    CONFLICT = "conflict"


class MergeHunkType(Enum):
    """Which side(s) changed a region of the base document."""
    LOCAL_ONLY = "local_only"    # Changed only in local
    HEAD_ONLY = "head_only"      # Changed only in head
    IDENTICAL = "identical"      # Both changed the same way
    OVERLAPPING = "overlapping"  # Both changed differently (conflict)


# =============================================================================
# Word Diff Models
# =============================================================================

@dataclass(frozen=True)
class Token:
    """A merged run of consecutive same-typed word/whitespace tokens."""
    type: TokenType
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {'type': self.type.value, 'text': self.text}


@dataclass(frozen=True)
class WordDiff:
    """Word-level refinement of a modified line."""
    old_tokens: tuple[Token, ...] = ()
    new_tokens: tuple[Token, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            'old_tokens': [token.to_dict() for token in self.old_tokens],
            'new_tokens': [token.to_dict() for token in self.new_tokens],
        }


# =============================================================================
# Line Diff Models
# =============================================================================

@dataclass(frozen=True)
class ContextLine:
    """An unchanged line kept next to a change for readability."""
    old_line: Optional[int]   # 1-indexed line number in the old text
    new_line: Optional[int]   # 1-indexed line number in the new text
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {'old_line': self.old_line, 'new_line': self.new_line, 'text': self.text}


@dataclass(frozen=True)
class Change:
    """
    A single changed line.

    ADD changes carry only the new side, DELETE changes only the old
    side, MODIFY changes both. ``word_diff`` is set on MODIFY changes
    when word-level refinement ran.
    """
    type: ChangeType
    old_line: Optional[int] = None
    new_line: Optional[int] = None
    old_text: Optional[str] = None
    new_text: Optional[str] = None
    word_diff: Optional[WordDiff] = None

    def same_edit(self, other: Change) -> bool:
        """True if both changes make the same textual edit."""
        return (self.type == other.type and
                self.old_text == other.old_text and
                self.new_text == other.new_text)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            'type': self.type.value,
            'old_line': self.old_line,
            'new_line': self.new_line,
        }
        if self.old_text is not None:
            data['old_text'] = self.old_text
        if self.new_text is not None:
            data['new_text'] = self.new_text
        if self.word_diff is not None:
            data['word_diff'] = self.word_diff.to_dict()
        return data


@dataclass(frozen=True)
class Hunk:
    """
    A group of related changes with surrounding context.

    ``old_start``/``new_start`` are 1-indexed. ``old_lines`` counts the
    context lines plus every change carrying old text; ``new_lines`` is
    the symmetric count for the new side. The counts are taken before
    ``changes`` is cut to the per-hunk limit, so they only match
    ``changes`` while ``truncated`` is False.
    """
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    context_before: tuple[ContextLine, ...] = ()
    changes: tuple[Change, ...] = ()
    context_after: tuple[ContextLine, ...] = ()
    truncated: bool = False
    # Half-open base interval touched by the changes (not serialized).
    # A pure insertion occupies the slot of the base line it precedes.
    change_span: tuple[int, int] = field(default=(0, 0), compare=False, repr=False)

    @property
    def header(self) -> str:
        """Generate unified diff hunk header."""
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"

    @property
    def old_end(self) -> int:
        """Exclusive end of the hunk in base coordinates."""
        return self.old_start + self.old_lines

    @property
    def change_count(self) -> int:
        return len(self.changes)

    def overlaps(self, other: Hunk) -> bool:
        """Check if both hunks change overlapping base lines."""
        start, end = self.change_span
        other_start, other_end = other.change_span
        return start < other_end and other_start < end

    def same_changes(self, other: Hunk) -> bool:
        """True if both hunks make exactly the same edits."""
        if len(self.changes) != len(other.changes):
            return False
        return all(a.same_edit(b) for a, b in zip(self.changes, other.changes))

    def to_dict(self) -> dict[str, Any]:
        return {
            'old_start': self.old_start,
            'old_lines': self.old_lines,
            'new_start': self.new_start,
            'new_lines': self.new_lines,
            'context_before': [line.to_dict() for line in self.context_before],
            'changes': [change.to_dict() for change in self.changes],
            'context_after': [line.to_dict() for line in self.context_after],
            'truncated': self.truncated,
        }


@dataclass(frozen=True)
class DiffStats:
    """Line level operation counts of a diff."""
    additions: int = 0
    deletions: int = 0
    modifications: int = 0
    unchanged: int = 0

    @property
    def total_changes(self) -> int:
        """Total number of changed lines."""
        return self.additions + self.deletions + self.modifications

    def to_dict(self) -> dict[str, int]:
        return {
            'additions': self.additions,
            'deletions': self.deletions,
            'modifications': self.modifications,
            'unchanged': self.unchanged,
        }

    def __str__(self) -> str:
        return (f"+{self.additions} -{self.deletions} "
                f"~{self.modifications} ={self.unchanged}")


@dataclass(frozen=True)
class DiffResult:
    """Complete result of a text diff."""
    hunks: tuple[Hunk, ...]
    stats: DiffStats
    truncated: bool = False
    mode: DiffMode = DiffMode.LINE

    @property
    def is_identical(self) -> bool:
        return len(self.hunks) == 0

    @property
    def hunk_count(self) -> int:
        return len(self.hunks)

    def iter_changes(self):
        """Iterate over the changes of every hunk."""
        for hunk in self.hunks:
            yield from hunk.changes

    def to_dict(self) -> dict[str, Any]:
        return {
            'hunks': [hunk.to_dict() for hunk in self.hunks],
            'stats': self.stats.to_dict(),
            'truncated': self.truncated,
            'mode': self.mode.value,
        }


# =============================================================================
# Merge Preview Models
# =============================================================================

@dataclass(frozen=True)
class ConflictRegion:
    """Base document line span covered by two conflicting hunks."""
    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {'start': self.start, 'end': self.end}


@dataclass(frozen=True)
class MergeHunk:
    """Classification of one changed region of the base document."""
    status: MergeHunkStatus
    type: MergeHunkType
    local_hunk: Optional[Hunk] = None
    head_hunk: Optional[Hunk] = None
    conflict_region: Optional[ConflictRegion] = None

    @property
    def is_conflict(self) -> bool:
        return self.status == MergeHunkStatus.CONFLICT

    @property
    def position(self) -> int:
        """Start of the region in the base document, used for ordering."""
        if self.local_hunk is not None:
            return self.local_hunk.old_start
        if self.head_hunk is not None:
            return self.head_hunk.old_start
        return 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            'status': self.status.value,
            'type': self.type.value,
            'local_hunk': self.local_hunk.to_dict() if self.local_hunk else None,
            'head_hunk': self.head_hunk.to_dict() if self.head_hunk else None,
        }
        if self.conflict_region is not None:
            data['conflict_region'] = self.conflict_region.to_dict()
        return data


@dataclass(frozen=True)
class MergeSummary:
    """Aggregate counts of a merge preview."""
    total_hunks: int = 0
    clean_count: int = 0
    conflict_count: int = 0
    local_stats: DiffStats = field(default_factory=DiffStats)
    head_stats: DiffStats = field(default_factory=DiffStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            'total_hunks': self.total_hunks,
            'clean_count': self.clean_count,
            'conflict_count': self.conflict_count,
            'local_stats': self.local_stats.to_dict(),
            'head_stats': self.head_stats.to_dict(),
        }


@dataclass(frozen=True)
class MergePreviewResult:
    """Result of comparing base->local against base->head."""
    status: MergeStatus
    hunks: tuple[MergeHunk, ...] = ()
    summary: MergeSummary = field(default_factory=MergeSummary)

    @property
    def has_conflicts(self) -> bool:
        return self.status == MergeStatus.CONFLICTED

    def to_dict(self) -> dict[str, Any]:
        return {
            'status': self.status.value,
            'hunks': [hunk.to_dict() for hunk in self.hunks],
            'summary': self.summary.to_dict(),
        }
