"""
Pattern Tables for Response Decoding

Data-driven regular expressions shared by every decoding stage: fence
markers, preamble phrases, footer phrases and the field-key signatures of
the expected JSON payload.

Design:
- Phrase tables are plain tuples of regex source strings, so each phrase can
  be tested on its own and extended without touching the pipeline
- Everything is compiled once when a PatternLibrary is built; compiled
  patterns are never mutated afterwards
- Tables can be extended from a JSON file (see PatternLibrary.from_file)

Usage:
    from decoding.patterns import PatternLibrary

    patterns = PatternLibrary()
    patterns.title_pattern.search('"metaSeoTitle": "T"').group(1)
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .exceptions import PatternLibraryError
from .models import FieldNames

# Leading fence with an optional language tag, e.g. "```json".
LEADING_FENCE = r"^\s*```[\w+-]*"

# Trailing fence at the very end of the text.
TRAILING_FENCE = r"```\s*$"

# Any fence marker inside a body. A language tag is only consumed when the
# fence sits alone on its line, so "```Hope" does not lose a word.
ANY_FENCE = r"```(?:[\w+-]+)?[ \t]*(?=\r?\n|$)|```"

# Introductory boilerplate. Fillers use [^<\n] so a phrase never reaches
# across a tag or onto the next line, and are bounded so a long first line
# cannot make a phrase backtrack over the whole of it.
DEFAULT_PREAMBLES: tuple[str, ...] = (
    r"here[’']?s the[^<\n]{0,120}?content",
    r"here[’']?s an?[^<\n]{0,120}?optimized",
    r"here[’']?s (?:your|the)[^<\n]{0,120}?(?:article|blog post|post|json|response|draft)[^<\n]{0,120}?:",
    r"here is (?:your|the)[^<\n]{0,120}?(?:content|article|blog post|post|json|response|draft)[^<\n]{0,120}?:",
    r"i[’']ll create",
    r"i[’']ve (?:created|written|drafted)[^<\n]{0,120}?:",
    r"based on[^<\n]{0,120}?analysis[^<\n]{0,120}?:",
    r"(?:sure|certainly|absolutely)[!,.][^<\n]{0,120}?:",
)

# Trailing commentary. Each phrase strips from its first occurrence at a
# line start to the end of the text.
DEFAULT_FOOTERS: tuple[str, ...] = (
    r"this content structure:",
    r"would you like me to",
    r"the content includes:",
    r"key features of this content:",
    r"this (?:article|content|post) covers",
    r"let me know if you(?:[’']d like| want| need)",
    r"i hope this helps",
    r"hope this helps",
    r"feel free to (?:adjust|modify|let me know)",
)

# Block-level tags; blocks starting with one of these are not wrapped in <p>.
BLOCK_TAGS: tuple[str, ...] = (
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "ul", "ol", "li", "div", "blockquote", "pre", "table", "thead",
    "tbody", "tr", "section", "article", "aside", "header", "footer", "nav",
    "figure", "hr", "dl", "details", "form",
)


def _compile(source: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise PatternLibraryError(
            "Invalid pattern",
            pattern=source,
            details=str(exc),
        ) from exc


@dataclass
class PatternLibrary:
    """
    Compiled pattern tables for one set of field names.

    Attributes:
        fields: JSON keys of the body, title and summary
        preambles: Regex sources for introductory boilerplate
        footers: Regex sources for trailing commentary
    """

    fields: FieldNames = field(default_factory=FieldNames)
    preambles: tuple[str, ...] = DEFAULT_PREAMBLES
    footers: tuple[str, ...] = DEFAULT_FOOTERS

    def __post_init__(self) -> None:
        self.preambles = tuple(self.preambles)
        self.footers = tuple(self.footers)

        body = re.escape(self.fields.body)
        title = re.escape(self.fields.title)
        summary = re.escape(self.fields.summary)
        meta = f"(?:{title}|{summary})"

        self.leading_fence = _compile(LEADING_FENCE, re.IGNORECASE)
        self.trailing_fence = _compile(TRAILING_FENCE)
        self.any_fence = _compile(ANY_FENCE)

        # Candidate objects, in priority order: brace spans without nested
        # braces whose keys appear body->title->summary, then
        # title->summary->body, then any {...} span.
        self.flat_object = _compile(r"\{[^{}]*\}")
        self.signature_orders = (
            tuple(f'"{key}"' for key in (self.fields.body, self.fields.title, self.fields.summary)),
            tuple(f'"{key}"' for key in (self.fields.title, self.fields.summary, self.fields.body)),
        )
        self.generic_object = _compile(r"\{[\s\S]*?\}")

        # Salvage patterns. The body value is read from the key opener up to
        # a quote that ends it: one followed by a short-field key, or, when
        # the body is the last field, the first unescaped quote that is
        # followed by a comma, a brace, a fence or the end of the text.
        self.body_key = _compile(rf'"{body}"\s*:\s*"')
        self.body_end = _compile(rf'"\s*,\s*(?="{meta}")')
        self.unescaped_quote = _compile(r'(?<!\\)(?:\\\\)*"')
        self.value_end = _compile(r"\s*(?:[,}]|```|\Z)")
        self.title_pattern = _compile(rf'"{title}"\s*:\s*"([^"]*?)"')
        self.summary_pattern = _compile(rf'"{summary}"\s*:\s*"([^"]*?)"')

        # Leaked structure that can survive inside a recovered body. None of
        # these can reach past a brace, so each attempt stays local.
        self.leak_patterns = (
            _compile(rf'\{{\s*"{meta}"\s*:\s*"[^"]*"\s*(?:,[^{{}}]*)?\}}'),
            _compile(rf'\{{\s*"{body}"\s*:\s*"[^{{}}]*?"{title}"[^{{}}]*\}}'),
            _compile(rf'"\s*,\s*"{meta}"\s*:\s*"[^"]*"(?:\s*,\s*"{meta}"\s*:\s*"[^"]*")*\s*\}}?'),
            _compile(rf'^[^\S\n]*"{body}"\s*:\s*"?[^\S\n]*$', re.MULTILINE),
            _compile(r"^[^\S\n]*[{}][^\S\n]*(?:\n|\Z)", re.MULTILINE),
        )

        # Junk that is only removed at the very start of the text. These are
        # tried at the first non-blank character, again and again, until none
        # of them applies.
        self.leading_patterns = (
            _compile(rf'\{{\s*"{body}"\s*:\s*"'),
            _compile(r"[{}][^\S\n]*(?:\n|\Z)"),
        )
        self.preamble_patterns = tuple(
            _compile(
                rf"(?:```[\w+-]*[^\S\n]*\n)?[^<\n]{{0,200}}?(?:{phrase})[^<\n]*(?:\n|\Z|(?=<))",
                re.IGNORECASE,
            )
            for phrase in self.preambles
        )
        self.footer_patterns = tuple(
            _compile(
                rf"\n[^\S\n]*(?:<p>\s*)?(?:{phrase})[\s\S]*",
                re.IGNORECASE,
            )
            for phrase in self.footers
        )

        # Markdown conversion. Emphasis never spans a tag, so converted
        # markup is not matched again.
        self.header_patterns = tuple(
            (level, _compile(rf"^{'#' * level}[ \t]+(?=\S)(.*\S)[^\S\n]*$", re.MULTILINE))
            for level in (3, 2, 1)
        )
        self.bold_pattern = _compile(r"\*\*(?=\S)((?:[^*\n<]|\*(?!\*))+?)(?<=\S)\*\*")
        self.italic_pattern = _compile(r"\*(?=[^\s*])([^*\n<]+?)(?<=\S)\*")
        self.unordered_list = _compile(r"^[*-][ \t]+.+(?:\n[*-][ \t]+.+)*", re.MULTILINE)
        self.unordered_item = _compile(r"^[*-][ \t]+")
        self.ordered_list = _compile(r"^\d+\.[ \t]+.+(?:\n\d+\.[ \t]+.+)*", re.MULTILINE)
        self.ordered_item = _compile(r"^\d+\.[ \t]+")
        self.block_tag = _compile(
            r"^<(?:!--|/?(?:" + "|".join(BLOCK_TAGS) + r")\b)",
            re.IGNORECASE,
        )
        self.paragraph_split = _compile(r"\n\s*\n")
        self.blank_lines = _compile(r"\n[ \t]*\n(?:[ \t]*\n)+")

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        fields: Optional[FieldNames] = None,
    ) -> "PatternLibrary":
        """
        Build a library from a JSON table file.

        The file may contain "preambles" and "footers" lists of regex
        sources. They are appended to the defaults unless the file sets
        "replace": true.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PatternLibraryError(
                "Could not load pattern file",
                path=str(path),
                details=str(exc),
            ) from exc

        if not isinstance(data, dict):
            raise PatternLibraryError("Pattern file must contain an object", path=str(path))

        replace = bool(data.get("replace", False))
        preambles = _phrase_list(data.get("preambles", []), "preambles", path)
        footers = _phrase_list(data.get("footers", []), "footers", path)

        if not replace:
            preambles = list(DEFAULT_PREAMBLES) + preambles
            footers = list(DEFAULT_FOOTERS) + footers

        return cls(
            fields=fields or FieldNames(),
            preambles=tuple(preambles),
            footers=tuple(footers),
        )

    def with_phrases(
        self,
        preambles: Iterable[str] = (),
        footers: Iterable[str] = (),
    ) -> "PatternLibrary":
        """Return a copy with extra preamble/footer phrases appended."""
        return PatternLibrary(
            fields=self.fields,
            preambles=self.preambles + tuple(preambles),
            footers=self.footers + tuple(footers),
        )


def _phrase_list(value: object, key: str, path: Path) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PatternLibraryError(
            f"'{key}' must be a list of strings",
            path=str(path),
        )
    return list(value)
