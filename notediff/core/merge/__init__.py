"""
Merge module for three-way merge previews.
"""

from notediff.core.merge.merge_preview import (
    MergePreviewEngine,
    MergeConflictDetector,
    compute_merge_preview,
)

__all__ = [
    'MergePreviewEngine',
    'MergeConflictDetector',
    'compute_merge_preview',
]
