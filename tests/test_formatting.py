import json

from notediff.core.diff.text_diff import DiffOptions, compute_diff
from notediff.core.merge.merge_preview import compute_merge_preview
from notediff.core.models import DiffMode, Token, TokenType
from notediff.services.formatting import (
    format_diff,
    format_merge_preview,
    render_tokens,
    to_json,
)


def test_render_tokens():
    tokens = [
        Token(TokenType.UNCHANGED, "the "),
        Token(TokenType.DELETED, "quick"),
        Token(TokenType.ADDED, "slow"),
        Token(TokenType.UNCHANGED, " fox"),
    ]
    assert render_tokens(tokens) == "the [-quick-]{+slow+} fox"


def test_format_line_diff():
    result = compute_diff("a\nb\nc\n", "a\nx\nc\n", DiffOptions(mode=DiffMode.LINE))

    assert list(format_diff(result, "old.txt", "new.txt")) == [
        "--- old.txt",
        "+++ new.txt",
        "@@ -1,3 +1,3 @@",
        " a",
        "-b",
        "+x",
        " c",
    ]


def test_format_word_diff():
    result = compute_diff("the quick fox\n", "the slow fox\n", DiffOptions(mode=DiffMode.WORD))
    lines = list(format_diff(result))

    assert "-the [-quick-] fox" in lines
    assert "+the {+slow+} fox" in lines


def test_format_add_and_delete():
    result = compute_diff("keep\ndrop\n", "keep\nadded\nmore\n", DiffOptions(mode=DiffMode.LINE))
    lines = list(format_diff(result))

    assert " keep" in lines
    assert lines[2:] == ["@@ -1,2 +1,3 @@", " keep", "-drop", "+added", "+more"]


def test_format_identical_has_only_headers():
    result = compute_diff("same\n", "same\n")

    assert list(format_diff(result)) == ["--- left", "+++ right"]


def test_to_json_round_trips_dict():
    result = compute_diff("a\n", "b\n")

    assert json.loads(to_json(result)) == result.to_dict()


def test_format_merge_preview_conflict(three_line_base):
    result = compute_merge_preview(
        three_line_base,
        "Line 1\nLocal Change\nLine 3\n",
        "Line 1\nHead Change\nLine 3\n",
        options=DiffOptions(mode=DiffMode.LINE),
    )
    lines = list(format_merge_preview(result))

    assert lines[0] == "Merge preview: conflicted"
    assert lines[1] == "Hunks: 1 (0 clean, 1 conflicts)"
    assert "[conflict] overlapping  base lines 1-3" in lines
    assert "  local:" in lines
    assert "  head:" in lines
    assert "    +Local Change" in lines
    assert "    +Head Change" in lines


def test_format_merge_preview_clean():
    result = compute_merge_preview("same\n", "same\n", "changed\n")
    lines = list(format_merge_preview(result))

    assert lines[0] == "Merge preview: clean"
    assert lines[1] == "Hunks: 0 (0 clean, 0 conflicts)"
    assert len(lines) == 4
