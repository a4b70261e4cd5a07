"""
Extraction Strategies

Each strategy implements one capability, try_extract(text), returning an
accepted Candidate or None. Strategies never raise: stage failures are
raised internally as ParseFailure/ValidationFailure and converted to None
by the base class.

Default order (see default_strategies):
    StructuredExtractor  -> whole text, fences stripped
    BoundaryScanner      -> first "{" .. last "}"
    PatternMatcher       -> ranked brace-delimited candidates
    FieldSalvager        -> per-field regexes, no structure required
"""

from __future__ import annotations

from typing import Optional

from .exceptions import DecodeError, ParseFailure
from .json_utils import (
    accept,
    has_recognized_field,
    parse_object,
    strip_fences,
    unescape_fragment,
)
from .logging_config import get_logger
from .models import Candidate
from .patterns import PatternLibrary

logger = get_logger(__name__)


def _keys_in_order(span: str, keys: tuple[str, ...]) -> bool:
    pos = 0
    for key in keys:
        pos = span.find(key, pos)
        if pos == -1:
            return False
        pos += len(key)
    return True


class Strategy:
    """Base class for one extraction stage."""

    name = "strategy"

    def __init__(self, patterns: Optional[PatternLibrary] = None):
        self.patterns = patterns or PatternLibrary()

    def try_extract(self, text: str) -> Optional[Candidate]:
        try:
            candidate = self._extract(text)
        except DecodeError as exc:
            logger.debug("%s: no match (%s)", self.name, exc)
            return None
        logger.debug("%s: accepted keys %s", self.name, sorted(candidate.data))
        return candidate

    def _extract(self, text: str) -> Candidate:
        raise NotImplementedError

    def _parse_and_accept(self, text: str) -> Candidate:
        data = parse_object(text, self.name)
        accept(data, self.patterns.fields, self.name)
        return Candidate(data=data, strategy=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StructuredExtractor(Strategy):
    """Strict parse of the whole text after stripping wrapper fences."""

    name = "structured_extractor"

    def _extract(self, text: str) -> Candidate:
        return self._parse_and_accept(strip_fences(text, self.patterns))


class BoundaryScanner(Strategy):
    """Strict parse of the span from the first "{" to the last "}"."""

    name = "boundary_scanner"

    def _extract(self, text: str) -> Candidate:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise ParseFailure(self.name, "No brace pair")
        return self._parse_and_accept(text[start : end + 1])


class FieldSalvager(Strategy):
    """Recover each field on its own, without requiring valid structure."""

    name = "field_salvager"

    def salvage(self, text: str) -> dict[str, str]:
        fields = self.patterns.fields
        found: dict[str, str] = {}

        body = self._salvage_body(text)
        if body is not None:
            found[fields.body] = unescape_fragment(body)

        match = self.patterns.title_pattern.search(text)
        if match is not None:
            found[fields.title] = match.group(1)

        match = self.patterns.summary_pattern.search(text)
        if match is not None:
            found[fields.summary] = match.group(1)

        return found

    def _salvage_body(self, text: str) -> Optional[str]:
        p = self.patterns
        opener = p.body_key.search(text)
        if opener is None:
            return None
        start = opener.end()

        end = p.body_end.search(text, start)
        if end is not None:
            return text[start : end.start()]

        # Body as the last field: stop at the first quote that closes a
        # value, or keep everything up to a truncated end.
        pos = start
        while True:
            quote = p.unescaped_quote.search(text, pos)
            if quote is None:
                return p.trailing_fence.sub("", text[start:]).rstrip()
            if p.value_end.match(text, quote.end()):
                return text[start : quote.end() - 1]
            pos = quote.end()

    def _extract(self, text: str) -> Candidate:
        found = self.salvage(text)
        if not found:
            raise ParseFailure(self.name, "No field recovered")
        logger.debug("%s: recovered %s", self.name, sorted(found))
        return Candidate(data=found, strategy=self.name)


class PatternMatcher(Strategy):
    """
    Scan for brace-delimited candidates and parse them longest first.

    Truncation artifacts are shorter than complete objects, so the longest
    match is the likeliest to be whole. A candidate that fails to parse gets
    one salvage attempt on the full text before the next candidate is tried.
    """

    name = "pattern_matcher"

    def __init__(
        self,
        patterns: Optional[PatternLibrary] = None,
        salvager: Optional[FieldSalvager] = None,
    ):
        super().__init__(patterns)
        self.salvager = salvager or FieldSalvager(self.patterns)

    def candidates(self, text: str) -> list[str]:
        """Pooled matches of all alternatives, longest first."""
        matches: list[str] = []
        flat = [m.group(0) for m in self.patterns.flat_object.finditer(text)]
        for keys in self.patterns.signature_orders:
            matches.extend(span for span in flat if _keys_in_order(span, keys))

        # Lazy scan bounded by the last "}" so every start finds a close.
        end = text.rfind("}")
        if end != -1:
            matches.extend(
                m.group(0) for m in self.patterns.generic_object.finditer(text, 0, end + 1)
            )

        unique = list(dict.fromkeys(matches))
        return sorted(unique, key=len, reverse=True)

    def _extract(self, text: str) -> Candidate:
        ranked = self.candidates(text)
        logger.debug("%s: %d candidate(s)", self.name, len(ranked))

        salvage_tried = False
        for index, raw in enumerate(ranked):
            try:
                data = parse_object(raw, self.name)
            except ParseFailure as exc:
                logger.debug("%s: candidate %d unparsable (%s)", self.name, index + 1, exc)
                if not salvage_tried:
                    salvage_tried = True
                    found = self.salvager.salvage(text)
                    if found:
                        return Candidate(data=found, strategy=self.salvager.name)
                continue

            if has_recognized_field(data, self.patterns.fields):
                return Candidate(data=data, strategy=self.name)
            logger.debug("%s: candidate %d has no recognized field", self.name, index + 1)

        raise ParseFailure(self.name, f"None of {len(ranked)} candidate(s) accepted")


def default_strategies(patterns: Optional[PatternLibrary] = None) -> list[Strategy]:
    """The fixed decoding order."""
    patterns = patterns or PatternLibrary()
    salvager = FieldSalvager(patterns)
    return [
        StructuredExtractor(patterns),
        BoundaryScanner(patterns),
        PatternMatcher(patterns, salvager=salvager),
        salvager,
    ]
