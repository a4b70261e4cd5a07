"""Deterministic clean-up of recovered body text into HTML.

The pipeline only removes boilerplate and converts lightweight markdown; it
never injects content. It is idempotent: running it on its own output
returns the output unchanged.

The removal steps (leaked structure, preambles, fences, footers) run as one
pass that repeats until the text stops changing, since removing one kind of
junk can expose another. Markdown conversion then runs once on the clean
text. Every pattern stays local to the place it matches, so the work grows
with the input length.
"""

from __future__ import annotations

import re
from typing import Optional

from .logging_config import get_logger
from .patterns import PatternLibrary

logger = get_logger(__name__)

MAX_CLEAN_PASSES = 16


def _skip_space_back(text: str, end: int) -> int:
    while end > 0 and text[end - 1].isspace():
        end -= 1
    return end


def _strip_trailing_closers(text: str) -> str:
    """Drop any run of '"}' (whitespace allowed) from the end of the text."""
    end = len(text)
    while True:
        brace = _skip_space_back(text, end)
        if brace == 0 or text[brace - 1] != "}":
            break
        quote = _skip_space_back(text, brace - 1)
        if quote == 0 or text[quote - 1] != '"':
            break
        end = quote - 1
    return text[:end]


class ContentNormalizer:
    """Ordered body normalization driven by a PatternLibrary."""

    def __init__(self, patterns: Optional[PatternLibrary] = None):
        self.patterns = patterns or PatternLibrary()

    def normalize(self, text: str) -> str:
        text = (text or "").replace("\r\n", "\n")
        if not text.strip():
            return ""

        text = self.clean(text)
        text = self.markdown_to_html(text)
        return self.collapse_whitespace(text)

    __call__ = normalize

    def clean(self, text: str) -> str:
        """Apply the removal steps until none of them changes the text."""
        for _ in range(MAX_CLEAN_PASSES):
            cleaned = self.strip_leaked_structure(text)
            cleaned = self.strip_preambles(cleaned)
            cleaned = self.strip_fences(cleaned)
            cleaned = self.strip_footers(cleaned)
            if cleaned == text:
                return text
            text = cleaned
        logger.debug("Clean-up still changing after %d passes", MAX_CLEAN_PASSES)
        return text

    # -- 1. leaked key/value fragments -------------------------------------

    def strip_leaked_structure(self, text: str) -> str:
        for pattern in self.patterns.leak_patterns:
            text = pattern.sub("", text)
        return _strip_trailing_closers(text)

    # -- 2. introductory boilerplate ---------------------------------------

    def strip_preambles(self, text: str) -> str:
        """Remove preamble lines and object openers from the start."""
        leading = self.patterns.leading_patterns + self.patterns.preamble_patterns
        cut = 0
        while True:
            start = cut
            while start < len(text) and text[start].isspace():
                start += 1
            for pattern in leading:
                match = pattern.match(text, start)
                if match is not None and match.end() > start:
                    cut = match.end()
                    break
            else:
                break
        if cut:
            logger.debug("Removed %d chars of preamble", cut)
        return text[cut:]

    # -- 3. fences ---------------------------------------------------------

    def strip_fences(self, text: str) -> str:
        return self.patterns.any_fence.sub("", text)

    # -- 4. trailing commentary --------------------------------------------

    def strip_footers(self, text: str) -> str:
        for pattern in self.patterns.footer_patterns:
            match = pattern.search(text)
            if match is None:
                continue
            logger.debug("Removed %d chars of footer", len(match.group(0)))
            text = text[: match.start()]
            # A footer cut inside a paragraph leaves it unclosed.
            if text.rfind("<p>") > text.rfind("</p>"):
                text = text.rstrip() + "</p>"
        return text

    # -- 5. markdown -> HTML -----------------------------------------------

    def markdown_to_html(self, text: str) -> str:
        p = self.patterns

        # Headers become their own blocks so the text around them still
        # gets wrapped in paragraphs.
        for level, pattern in p.header_patterns:
            text = pattern.sub(rf"\n\n<h{level}>\1</h{level}>\n\n", text)

        text = p.bold_pattern.sub(r"<strong>\1</strong>", text)
        text = p.italic_pattern.sub(r"<em>\1</em>", text)

        text = p.unordered_list.sub(lambda m: self._list_block(m.group(0), "ul", p.unordered_item), text)
        text = p.ordered_list.sub(lambda m: self._list_block(m.group(0), "ol", p.ordered_item), text)

        return self._wrap_paragraphs(text)

    @staticmethod
    def _list_block(block: str, tag: str, marker: re.Pattern[str]) -> str:
        items = "\n".join(
            f"  <li>{marker.sub('', line, count=1).strip()}</li>"
            for line in block.split("\n")
        )
        return f"\n\n<{tag}>\n{items}\n</{tag}>\n\n"

    def _wrap_paragraphs(self, text: str) -> str:
        blocks = []
        for block in self.patterns.paragraph_split.split(text):
            block = block.strip()
            if not block:
                continue
            if len(block) < 3 or self.patterns.block_tag.match(block):
                blocks.append(block)
            else:
                blocks.append(f"<p>{block}</p>")
        return "\n\n".join(blocks)

    # -- 6. whitespace -----------------------------------------------------

    def collapse_whitespace(self, text: str) -> str:
        return self.patterns.blank_lines.sub("\n\n", text).strip()


def normalize(text: str, patterns: Optional[PatternLibrary] = None) -> str:
    """Normalize body text with the default (or given) pattern tables."""
    return ContentNormalizer(patterns).normalize(text)
