"""
notediff - diff and three-way merge preview engine for versioned notes.

Two pure entry points:
- compute_diff(left, right, options) -> DiffResult
- compute_merge_preview(base, local, head, options) -> MergePreviewResult
"""

from notediff.core.diff.text_diff import (
    ContentTooLargeError,
    DiffError,
    DiffOptions,
    TextDiffEngine,
    compute_diff,
)
from notediff.core.merge.merge_preview import MergePreviewEngine, compute_merge_preview
from notediff.core.models import (
    Change,
    ChangeType,
    ConflictRegion,
    ContextLine,
    DiffMode,
    DiffResult,
    DiffStats,
    Hunk,
    MergeHunk,
    MergeHunkStatus,
    MergeHunkType,
    MergePreviewResult,
    MergeStatus,
    MergeSummary,
    Token,
    TokenType,
    WordDiff,
)
from notediff.services.settings import DiffSettings, SettingsManager

__version__ = "1.0.0"

__all__ = [
    # Entry points
    'compute_diff',
    'compute_merge_preview',
    'TextDiffEngine',
    'MergePreviewEngine',
    'DiffOptions',
    'DiffSettings',
    'SettingsManager',
    # Errors
    'DiffError',
    'ContentTooLargeError',
    # Models
    'Change',
    'ChangeType',
    'ConflictRegion',
    'ContextLine',
    'DiffMode',
    'DiffResult',
    'DiffStats',
    'Hunk',
    'MergeHunk',
    'MergeHunkStatus',
    'MergeHunkType',
    'MergePreviewResult',
    'MergeStatus',
    'MergeSummary',
    'Token',
    'TokenType',
    'WordDiff',
]
