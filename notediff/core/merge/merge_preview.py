"""
Three-way merge preview for note versions.

Implements conflict detection between two edits of a common base:
1. Computes diffs from base to local and base to head
2. Pairs up hunks that change overlapping lines of the base
3. Classifies each region as local-only, head-only, identical or conflicting
4. Orders the regions by their position in the base document
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from notediff.core.diff.text_diff import DiffOptions, TextDiffEngine, check_content_size
from notediff.core.models import (
    ConflictRegion,
    DiffStats,
    Hunk,
    MergeHunk,
    MergeHunkStatus,
    MergeHunkType,
    MergePreviewResult,
    MergeStatus,
    MergeSummary,
)
from notediff.services.settings import DiffSettings


logger = logging.getLogger(__name__)


class MergeConflictDetector:
    """Classifies the hunks of two diffs against the same base."""

    def detect(self, local_hunks: Sequence[Hunk], head_hunks: Sequence[Hunk]) -> list[MergeHunk]:
        """
        Pair local and head hunks by base-line overlap.

        Args:
            local_hunks: Hunks of the base->local diff
            head_hunks: Hunks of the base->head diff

        Returns:
            MergeHunks sorted by position in the base document
        """
        merge_hunks: list[MergeHunk] = []
        consumed: set[int] = set()

        for local_hunk in local_hunks:
            overlapping = [
                (index, head_hunk) for index, head_hunk in enumerate(head_hunks)
                if index not in consumed and local_hunk.overlaps(head_hunk)
            ]

            if not overlapping:
                merge_hunks.append(MergeHunk(
                    status=MergeHunkStatus.CLEAN,
                    type=MergeHunkType.LOCAL_ONLY,
                    local_hunk=local_hunk,
                ))
                continue

            for index, head_hunk in overlapping:
                consumed.add(index)
                merge_hunks.append(self._classify_pair(local_hunk, head_hunk))

        for index, head_hunk in enumerate(head_hunks):
            if index in consumed:
                continue
            merge_hunks.append(MergeHunk(
                status=MergeHunkStatus.CLEAN,
                type=MergeHunkType.HEAD_ONLY,
                head_hunk=head_hunk,
            ))

        return sorted(merge_hunks, key=lambda hunk: hunk.position)

    @staticmethod
    def _classify_pair(local_hunk: Hunk, head_hunk: Hunk) -> MergeHunk:
        """Identical edits are clean, anything else is a conflict."""
        if local_hunk.same_changes(head_hunk):
            return MergeHunk(
                status=MergeHunkStatus.CLEAN,
                type=MergeHunkType.IDENTICAL,
                local_hunk=local_hunk,
                head_hunk=head_hunk,
            )

        return MergeHunk(
            status=MergeHunkStatus.CONFLICT,
            type=MergeHunkType.OVERLAPPING,
            local_hunk=local_hunk,
            head_hunk=head_hunk,
            conflict_region=ConflictRegion(
                start=min(local_hunk.old_start, head_hunk.old_start),
                end=max(local_hunk.old_end, head_hunk.old_end),
            ),
        )


class MergePreviewEngine:
    """
    Merge preview engine.

    Compares local and head edits of a shared base version and reports
    which changed regions would merge cleanly.
    """

    def __init__(self, options: Optional[DiffOptions] = None, settings: Optional[DiffSettings] = None):
        self.options = options or DiffOptions()
        self.settings = settings or DiffSettings()

    def preview(
        self,
        base: Optional[str],
        local: Optional[str],
        head: Optional[str]
    ) -> MergePreviewResult:
        """
        Compute the merge preview.

        Raises:
            ContentTooLargeError: If any input exceeds the size ceiling
        """
        base = base or ''
        local = local or ''
        head = head or ''

        for content in (base, local, head):
            check_content_size(content, self.settings.max_content_size_bytes)

        # Fast paths: one side made no changes at all
        if base == head:
            logger.debug("MergePreviewEngine - Head equals base, nothing to merge")
            return self.clean_result()
        if base == local:
            logger.debug("MergePreviewEngine - Local equals base, nothing to merge")
            return self.clean_result()

        engine = TextDiffEngine(self.options, self.settings)
        base_to_local = engine.compare(base, local)
        base_to_head = engine.compare(base, head)

        hunks = MergeConflictDetector().detect(base_to_local.hunks, base_to_head.hunks)

        conflict_count = sum(1 for hunk in hunks if hunk.is_conflict)
        clean_count = len(hunks) - conflict_count
        status = MergeStatus.CONFLICTED if conflict_count > 0 else MergeStatus.CLEAN

        logger.info(
            f"MergePreviewEngine - status={status.value}, {len(hunks)} hunks "
            f"({clean_count} clean, {conflict_count} conflicts)"
        )

        return MergePreviewResult(
            status=status,
            hunks=tuple(hunks),
            summary=MergeSummary(
                total_hunks=len(hunks),
                clean_count=clean_count,
                conflict_count=conflict_count,
                local_stats=base_to_local.stats,
                head_stats=base_to_head.stats,
            ),
        )

    @staticmethod
    def clean_result() -> MergePreviewResult:
        """Clean, empty preview."""
        return MergePreviewResult(
            status=MergeStatus.CLEAN,
            hunks=(),
            summary=MergeSummary(local_stats=DiffStats(), head_stats=DiffStats()),
        )


def compute_merge_preview(
    base: Optional[str],
    local: Optional[str],
    head: Optional[str],
    options: Optional[DiffOptions] = None,
    settings: Optional[DiffSettings] = None
) -> MergePreviewResult:
    """Classify local and head edits of base as clean or conflicting."""
    return MergePreviewEngine(options, settings).preview(base, local, head)
