"""
Text diff engine.

Provides hunk-based comparison of two text blobs with support for:
- HTML note content (converted to structured plain text first)
- Configurable context lines
- Word-level refinement of modified lines (explicit or automatic)
- Input size ceiling and output caps
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from notediff.core.diff.hunks import HunkGrouper
from notediff.core.diff.line_diff import LineDiffEngine, LineOp, LineOpTag, split_lines
from notediff.core.diff.text_prep import TextPreparer
from notediff.core.diff.word_diff import WordDiffRefiner, is_split_modification
from notediff.core.models import DiffMode, DiffResult, DiffStats
from notediff.services.settings import DiffSettings


logger = logging.getLogger(__name__)


class DiffError(Exception):
    """Base class for diff engine errors."""


class ContentTooLargeError(DiffError):
    """An input exceeds the configured size ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Content size {size} bytes exceeds maximum of {limit} bytes")


@dataclass(frozen=True)
class DiffOptions:
    """
    Per-call diff options.

    ``context`` and ``word_threshold_lines`` fall back to DiffSettings
    when left as None.
    """
    mode: DiffMode = DiffMode.AUTO
    context: Optional[int] = None
    word_threshold_lines: Optional[int] = None
    extract_text_from_html: bool = True

    def __post_init__(self):
        if not isinstance(self.mode, DiffMode):
            object.__setattr__(self, 'mode', DiffMode.from_string(self.mode))
        if self.context is not None and self.context < 0:
            raise ValueError("context must not be negative")
        if self.word_threshold_lines is not None and self.word_threshold_lines < 0:
            raise ValueError("word_threshold_lines must not be negative")

    @classmethod
    def from_dict(cls, params: Optional[Mapping[str, Any]]) -> 'DiffOptions':
        """Build options from loosely typed request parameters."""
        params = params or {}

        def optional_int(key: str) -> Optional[int]:
            value = params.get(key)
            if value is None or value == '':
                return None
            return int(value)

        extract = params.get('extract_text_from_html', True)
        if isinstance(extract, str):
            extract = extract.strip().lower() not in ('0', 'false', 'no', 'off')

        return cls(
            mode=DiffMode.from_string(params.get('mode') or DiffMode.AUTO.value),
            context=optional_int('context'),
            word_threshold_lines=optional_int('word_threshold_lines'),
            extract_text_from_html=bool(extract),
        )


def check_content_size(content: str, limit: int) -> None:
    """Raise ContentTooLargeError if content is larger than limit bytes."""
    # Cheap bound first: a UTF-8 character takes at most 4 bytes
    if len(content) * 4 <= limit:
        return
    size = len(content.encode('utf-8'))
    if size > limit:
        raise ContentTooLargeError(size, limit)


class TextDiffEngine:
    """
    Engine for comparing note contents.

    Pipeline: size check, text preparation, line alignment, hunk
    grouping, then word refinement when word mode applies.
    """

    def __init__(self, options: Optional[DiffOptions] = None, settings: Optional[DiffSettings] = None):
        self.options = options or DiffOptions()
        self.settings = settings or DiffSettings()

    @property
    def context(self) -> int:
        if self.options.context is not None:
            return self.options.context
        return self.settings.default_context

    @property
    def word_threshold_lines(self) -> int:
        if self.options.word_threshold_lines is not None:
            return self.options.word_threshold_lines
        return self.settings.word_threshold_lines

    def compare(self, left: Optional[str], right: Optional[str]) -> DiffResult:
        """
        Compare two texts.

        Args:
            left: Old content (None is treated as empty)
            right: New content (None is treated as empty)

        Returns:
            DiffResult with hunks, statistics and the resolved mode

        Raises:
            ContentTooLargeError: If either input exceeds the size ceiling
        """
        left = left or ''
        right = right or ''

        check_content_size(left, self.settings.max_content_size_bytes)
        check_content_size(right, self.settings.max_content_size_bytes)

        preparer = TextPreparer(self.options.extract_text_from_html)
        old_lines = split_lines(preparer.prepare(left))
        new_lines = split_lines(preparer.prepare(right))

        ops = LineDiffEngine().align(old_lines, new_lines)
        stats = self._calculate_statistics(ops)

        grouper = HunkGrouper(
            context=self.context,
            max_hunks=self.settings.max_hunks,
            max_changes_per_hunk=self.settings.max_changes_per_hunk,
        )
        hunks, truncated = grouper.group(ops)

        mode = self._resolve_mode(sum(hunk.change_count for hunk in hunks))
        if mode == DiffMode.WORD:
            hunks = WordDiffRefiner().refine_hunks(hunks)

        logger.debug(
            f"TextDiffEngine - {len(old_lines)} vs {len(new_lines)} lines: "
            f"{len(hunks)} hunks, {stats}, mode={mode.value}, truncated={truncated}"
        )

        return DiffResult(
            hunks=tuple(hunks),
            stats=stats,
            truncated=truncated,
            mode=mode,
        )

    def _resolve_mode(self, changed_lines: int) -> DiffMode:
        """Pick LINE or WORD for the whole diff."""
        if self.options.mode == DiffMode.AUTO:
            if changed_lines <= self.word_threshold_lines:
                return DiffMode.WORD
            return DiffMode.LINE
        return self.options.mode

    def _calculate_statistics(self, ops: Sequence[LineOp]) -> DiffStats:
        """Count line operations; dissimilar replacements count as delete+add."""
        additions = deletions = modifications = unchanged = 0
        threshold = self.settings.similarity_threshold

        for op in ops:
            if op.tag == LineOpTag.EQUAL:
                unchanged += 1
            elif op.tag == LineOpTag.INSERT:
                additions += 1
            elif op.tag == LineOpTag.DELETE:
                deletions += 1
            elif is_split_modification(op.old_text, op.new_text, threshold):
                additions += 1
                deletions += 1
            else:
                modifications += 1

        return DiffStats(
            additions=additions,
            deletions=deletions,
            modifications=modifications,
            unchanged=unchanged,
        )


def compute_diff(
    left: Optional[str],
    right: Optional[str],
    options: Optional[DiffOptions] = None,
    settings: Optional[DiffSettings] = None
) -> DiffResult:
    """Compute the hunk-based difference between two texts."""
    return TextDiffEngine(options, settings).compare(left, right)
