import pytest

from notediff.core.diff.text_diff import ContentTooLargeError, DiffOptions
from notediff.core.merge.merge_preview import (
    MergeConflictDetector,
    MergePreviewEngine,
    compute_merge_preview,
)
from notediff.core.models import (
    ConflictRegion,
    DiffMode,
    MergeHunkStatus,
    MergeHunkType,
    MergeStatus,
)
from notediff.services.settings import DiffSettings


FIVE_LINES = "Line 1\nLine 2\nLine 3\nLine 4\nLine 5\n"


class TestExamples:
    """The canonical merge scenarios."""

    def test_conflict(self, three_line_base):
        local = "Line 1\nLocal Change\nLine 3\n"
        head = "Line 1\nHead Change\nLine 3\n"

        result = compute_merge_preview(three_line_base, local, head)

        assert result.status == MergeStatus.CONFLICTED
        assert result.has_conflicts
        assert len(result.hunks) == 1
        hunk = result.hunks[0]
        assert hunk.type == MergeHunkType.OVERLAPPING
        assert hunk.status == MergeHunkStatus.CONFLICT
        assert hunk.local_hunk is not None
        assert hunk.head_hunk is not None
        assert hunk.conflict_region == ConflictRegion(start=1, end=4)
        assert result.summary.conflict_count == 1
        assert result.summary.clean_count == 0
        assert result.summary.total_hunks == 1

    def test_identical_edit(self, three_line_base):
        edited = "Line 1\nModified Line 2\nLine 3\n"

        result = compute_merge_preview(three_line_base, edited, edited)

        assert result.status == MergeStatus.CLEAN
        assert [hunk.type for hunk in result.hunks] == [MergeHunkType.IDENTICAL]
        assert result.hunks[0].status == MergeHunkStatus.CLEAN
        assert result.hunks[0].conflict_region is None

    def test_non_overlapping_edits(self):
        local = FIVE_LINES.replace("Line 1\n", "Local first line\n")
        head = FIVE_LINES.replace("Line 5\n", "Head last line\n")

        result = compute_merge_preview(FIVE_LINES, local, head)

        assert result.status == MergeStatus.CLEAN
        assert [hunk.type for hunk in result.hunks] == [
            MergeHunkType.LOCAL_ONLY,
            MergeHunkType.HEAD_ONLY,
        ]
        local_only, head_only = result.hunks
        assert local_only.head_hunk is None
        assert head_only.local_hunk is None
        assert result.summary.clean_count == 2
        assert result.summary.conflict_count == 0


class TestFastPaths:

    def test_head_equals_base(self, three_line_base):
        result = compute_merge_preview(three_line_base, "something else\n", three_line_base)

        assert result.status == MergeStatus.CLEAN
        assert result.hunks == ()
        assert result.summary.total_hunks == 0

    def test_local_equals_base(self, three_line_base):
        result = compute_merge_preview(three_line_base, three_line_base, "something else\n")

        assert result.status == MergeStatus.CLEAN
        assert result.hunks == ()

    def test_all_empty(self):
        result = compute_merge_preview(None, None, None)

        assert result.status == MergeStatus.CLEAN
        assert result.hunks == ()

    def test_same_edit_on_both_sides_is_clean(self, numbered_lines):
        base = numbered_lines(20)
        edited = numbered_lines(20, changed={2, 11, 19})

        result = compute_merge_preview(base, edited, edited)

        assert result.status == MergeStatus.CLEAN
        assert result.summary.conflict_count == 0
        assert all(hunk.type == MergeHunkType.IDENTICAL for hunk in result.hunks)


def test_hunks_ordered_by_base_position(numbered_lines):
    base = numbered_lines(20)
    local = numbered_lines(20, changed={18})
    head = numbered_lines(20, changed={2})

    result = compute_merge_preview(base, local, head)

    assert [hunk.type for hunk in result.hunks] == [
        MergeHunkType.HEAD_ONLY,
        MergeHunkType.LOCAL_ONLY,
    ]
    positions = [hunk.position for hunk in result.hunks]
    assert positions == sorted(positions)


def test_conflicting_insertions_at_same_place():
    result = compute_merge_preview("a\nb\n", "a\nfrom local\nb\n", "a\nfrom head\nb\n")

    assert result.status == MergeStatus.CONFLICTED
    assert result.hunks[0].type == MergeHunkType.OVERLAPPING


def test_insertion_next_to_modification_does_not_conflict():
    base = "a\nb\nc\n"
    local = "a\nb\nnew line\nc\n"
    head = "a\nB\nc\n"

    result = compute_merge_preview(base, local, head)

    assert result.status == MergeStatus.CLEAN
    assert sorted(hunk.type.value for hunk in result.hunks) == ["head_only", "local_only"]


def test_mixed_clean_and_conflicting_regions(numbered_lines):
    base = numbered_lines(30)
    local = numbered_lines(30, changed={3, 15}, suffix=" by local")
    head = numbered_lines(30, changed={15, 27}, suffix=" by head")

    result = compute_merge_preview(base, local, head)

    assert result.status == MergeStatus.CONFLICTED
    assert [hunk.type for hunk in result.hunks] == [
        MergeHunkType.LOCAL_ONLY,
        MergeHunkType.OVERLAPPING,
        MergeHunkType.HEAD_ONLY,
    ]
    assert result.summary.clean_count == 2
    assert result.summary.conflict_count == 1
    assert result.summary.local_stats.modifications == 2
    assert result.summary.head_stats.modifications == 2


def test_every_input_is_size_checked():
    settings = DiffSettings(max_content_size_bytes=5)
    small = "abc"
    large = "x" * 6

    for args in [(large, small, small), (small, large, small), (small, small, large)]:
        with pytest.raises(ContentTooLargeError):
            compute_merge_preview(*args, settings=settings)


def test_options_apply_to_both_diffs(three_line_base):
    options = DiffOptions(mode=DiffMode.LINE, context=0)
    local = "Line 1\nLocal Change\nLine 3\n"
    head = "Line 1\nHead Change\nLine 3\n"

    result = MergePreviewEngine(options).preview(three_line_base, local, head)

    hunk = result.hunks[0]
    for side in (hunk.local_hunk, hunk.head_hunk):
        assert side.context_before == ()
        assert side.changes[0].word_diff is None
    assert hunk.conflict_region == ConflictRegion(start=2, end=3)


def test_detector_with_no_hunks():
    assert MergeConflictDetector().detect([], []) == []


def test_to_dict_shape(three_line_base):
    local = "Line 1\nLocal Change\nLine 3\n"
    head = "Line 1\nHead Change\nLine 3\n"
    data = compute_merge_preview(three_line_base, local, head).to_dict()

    assert data["status"] == "conflicted"
    assert data["summary"]["conflict_count"] == 1
    merge_hunk = data["hunks"][0]
    assert merge_hunk["status"] == "conflict"
    assert merge_hunk["type"] == "overlapping"
    assert merge_hunk["conflict_region"] == {"start": 1, "end": 4}

    clean = compute_merge_preview(FIVE_LINES, FIVE_LINES.replace("Line 1", "One"), FIVE_LINES + "Six\n")
    for merge_hunk in clean.to_dict()["hunks"]:
        assert "conflict_region" not in merge_hunk
        assert (merge_hunk["local_hunk"] is None) != (merge_hunk["head_hunk"] is None)
