"""
Word-level refinement of modified lines.

Provides:
- Tokenization into word and whitespace runs
- Word alignment producing merged Unchanged/Added/Deleted spans
- The similarity heuristic deciding whether a replaced line is an
  in-place modification or better reported as a delete plus an add
"""

from __future__ import annotations

import difflib
import re
from dataclasses import replace
from typing import Sequence

from rapidfuzz.distance import Levenshtein

from notediff.core.models import Change, ChangeType, Hunk, Token, TokenType, WordDiff


_TOKEN_PATTERN = re.compile(r'\s+|\S+')


def tokenize(text: str) -> list[str]:
    """Tokenize text into words and whitespace."""
    return _TOKEN_PATTERN.findall(text)


def levenshtein(old: str, new: str) -> int:
    """Character edit distance (insertions, deletions and substitutions)."""
    return Levenshtein.distance(old, new)


def similarity(old: str, new: str) -> float:
    """
    Normalized edit similarity (0.0 to 1.0).

    1.0 means identical, 0.0 means nothing in common.
    """
    longest = max(len(old), len(new))
    if longest == 0:
        return 1.0
    return (longest - levenshtein(old, new)) / longest


def is_split_modification(old: str, new: str, threshold: float) -> bool:
    """True if a replaced line is too different to count as a modification."""
    return similarity(old, new) < threshold


class WordDiffRefiner:
    """Computes word-level spans for modified lines."""

    def diff_words(self, old_text: str, new_text: str) -> WordDiff:
        """Align the words of two lines and build typed spans per side."""
        old_words = tokenize(old_text)
        new_words = tokenize(new_text)

        matcher = difflib.SequenceMatcher(None, old_words, new_words, autojunk=False)

        old_spans = _SpanCollector()
        new_spans = _SpanCollector()

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                old_spans.add(TokenType.UNCHANGED, old_words[i1:i2])
                new_spans.add(TokenType.UNCHANGED, new_words[j1:j2])
            elif tag == 'delete':
                old_spans.add(TokenType.DELETED, old_words[i1:i2])
            elif tag == 'insert':
                new_spans.add(TokenType.ADDED, new_words[j1:j2])
            else:  # replace
                old_spans.add(TokenType.DELETED, old_words[i1:i2])
                new_spans.add(TokenType.ADDED, new_words[j1:j2])

        return WordDiff(old_tokens=old_spans.tokens(), new_tokens=new_spans.tokens())

    def refine_change(self, change: Change) -> Change:
        """Attach a word diff to a MODIFY change; other changes pass through."""
        if (change.type != ChangeType.MODIFY or
                change.old_text is None or change.new_text is None):
            return change
        return replace(change, word_diff=self.diff_words(change.old_text, change.new_text))

    def refine_hunks(self, hunks: Sequence[Hunk]) -> list[Hunk]:
        """Return copies of the hunks with word diffs on their modifications."""
        return [
            replace(hunk, changes=tuple(self.refine_change(c) for c in hunk.changes))
            for hunk in hunks
        ]


class _SpanCollector:
    """Merges consecutive same-typed tokens into spans."""

    def __init__(self):
        self._types: list[TokenType] = []
        self._texts: list[list[str]] = []

    def add(self, token_type: TokenType, words: Sequence[str]) -> None:
        if not words:
            return
        if self._types and self._types[-1] == token_type:
            self._texts[-1].extend(words)
        else:
            self._types.append(token_type)
            self._texts.append(list(words))

    def tokens(self) -> tuple[Token, ...]:
        return tuple(
            Token(type=token_type, text=''.join(texts))
            for token_type, texts in zip(self._types, self._texts)
        )
