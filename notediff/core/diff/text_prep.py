"""
Text preparation before diffing.

Rich text editors store notes as HTML fragments. Diffing raw markup
produces one giant line per paragraph run, so HTML input is converted
into structure-preserving plain text first:
- Paragraphs, divs and headings become lines separated by a blank line
- List items become "- " markers indented by nesting depth
- Inline formatting is flattened into the surrounding text
"""

from __future__ import annotations

import logging
import re
from typing import Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString, Tag


logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset({'p', 'div', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6'})
LIST_TAGS = frozenset({'ul', 'ol'})

# Children of these force line-oriented joining of their parent
_LINE_BREAKING_TAGS = BLOCK_TAGS | LIST_TAGS | {'li', 'br'}

_TAG_PATTERN = re.compile(r'<[a-zA-Z][^>]*>')
_BLOCK_TAG_PATTERN = re.compile(r'<(?:p|div|h[1-6]|ul|ol|li|br)\b', re.IGNORECASE)
_BLANK_RUN_PATTERN = re.compile(r'\n{3,}')

Node = Union[Tag, NavigableString]


class TextPreparer:
    """Converts HTML-like note content into diffable plain text."""

    def __init__(self, extract_text_from_html: bool = True):
        self.extract_text_from_html = extract_text_from_html

    def prepare(self, text: str) -> str:
        """
        Return the text to diff.

        Plain text, and any text when extraction is disabled, is returned
        unchanged. HTML that cannot be processed degrades to a
        pretty-printed rendering of the original markup.
        """
        if not self.extract_text_from_html or not self.looks_like_html(text):
            return text

        try:
            soup = BeautifulSoup(text, 'html.parser')
            return self._extract(soup, depth=0, is_list_item=False).strip('\n')
        except (ParserRejectedMarkup, RecursionError) as e:
            logger.warning(f"TextPreparer - HTML extraction failed, using pretty-printed markup: {e}")
            return self._pretty_fallback(text)

    @staticmethod
    def looks_like_html(text: str) -> bool:
        """Check for a tag-like pattern plus at least one block level tag."""
        return bool(_TAG_PATTERN.search(text) and _BLOCK_TAG_PATTERN.search(text))

    def _extract(self, node: Tag, depth: int, is_list_item: bool) -> str:
        """Recursively extract the text of ``node``'s children."""
        children = [child for child in node.children if self._is_significant(child)]
        parts: list[str] = []

        for index, child in enumerate(children):
            is_last = index == len(children) - 1

            if isinstance(child, NavigableString):
                parts.append(child.strip())
                continue

            name = child.name
            if name in BLOCK_TAGS:
                parts.append(self._extract(child, depth, False))
                if not is_last:
                    parts.append('')
            elif name == 'br':
                parts.append('')
            elif name in LIST_TAGS:
                parts.append(self._extract(child, depth + 1, True))
            elif name == 'li':
                indent = '  ' * max(depth - 1, 0)
                parts.append(f"{indent}- {self._extract(child, depth, False)}")
            else:
                # Inline (strong, em, code, a, ...) and unknown elements are transparent
                parts.append(self._extract(child, depth, False))

        if self._joins_lines(node, children, is_list_item):
            return _BLANK_RUN_PATTERN.sub('\n\n', '\n'.join(parts))
        return ' '.join(part for part in parts if part)

    @staticmethod
    def _joins_lines(node: Tag, children: list[Node], is_list_item: bool) -> bool:
        if isinstance(node, BeautifulSoup) or is_list_item:
            return True
        return any(isinstance(child, Tag) and child.name in _LINE_BREAKING_TAGS
                   for child in children)

    @staticmethod
    def _is_significant(node: Node) -> bool:
        if isinstance(node, Tag):
            return True
        # Comments, doctypes and CDATA carry no note text
        if isinstance(node, PreformattedString):
            return False
        return bool(node.strip())

    @staticmethod
    def _pretty_fallback(text: str) -> str:
        """Indented, one-tag-per-line rendering of the original markup."""
        try:
            return BeautifulSoup(text, 'html.parser').prettify()
        except (ParserRejectedMarkup, RecursionError) as e:
            logger.warning(f"TextPreparer - Pretty-printing failed, diffing raw markup: {e}")
            return text
