"""
Diff module for note content comparison.

Provides:
- Text preparation (HTML note content to structured plain text)
- Line alignment and hunk grouping
- Word-level refinement of modified lines
"""

from notediff.core.diff.text_diff import (
    TextDiffEngine,
    DiffOptions,
    DiffError,
    ContentTooLargeError,
    compute_diff,
)
from notediff.core.diff.text_prep import TextPreparer
from notediff.core.diff.line_diff import LineDiffEngine, LineOp, LineOpTag
from notediff.core.diff.hunks import HunkBuilder, HunkGrouper
from notediff.core.diff.word_diff import WordDiffRefiner

__all__ = [
    # Engine
    'TextDiffEngine',
    'DiffOptions',
    'DiffError',
    'ContentTooLargeError',
    'compute_diff',
    # Pipeline stages
    'TextPreparer',
    'LineDiffEngine',
    'LineOp',
    'LineOpTag',
    'HunkBuilder',
    'HunkGrouper',
    'WordDiffRefiner',
]
