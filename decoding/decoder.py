from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Optional, Union

from .clamp import LengthClamper
from .logging_config import get_logger
from .models import Candidate, DecodeLimits, ExtractedRecord
from .normalizer import ContentNormalizer
from .patterns import PatternLibrary
from .strategies import Strategy, default_strategies

logger = get_logger(__name__)

RawResponse = Union[str, bytes, bytearray, None]


class ResponseDecoder:
    """
    Recover body, title and summary from untrusted generator output.

    Strategies run in order and the first accepted candidate wins. When all
    of them fail, the raw text is normalized into the body and the short
    fields stay empty. decode() never raises.
    """

    def __init__(
        self,
        limits: DecodeLimits | None = None,
        patterns: PatternLibrary | None = None,
        normalizer: ContentNormalizer | None = None,
        clamper: LengthClamper | None = None,
        strategies: Optional[Iterable[Strategy]] = None,
    ):
        self.limits = limits or DecodeLimits()
        self.patterns = patterns or PatternLibrary()
        self.normalizer = normalizer or ContentNormalizer(self.patterns)
        self.clamper = clamper or LengthClamper(self.limits)
        if strategies is None:
            strategies = default_strategies(self.patterns)
        self.strategies: list[Strategy] = list(strategies)

    def decode(self, raw: RawResponse) -> ExtractedRecord:
        text = _as_text(raw)
        trimmed = text.strip()
        logger.debug("Decoding response of %d chars", len(text))

        candidate = self._first_candidate(trimmed) if trimmed else None
        if candidate is None:
            logger.debug("No strategy matched; using raw text as body")
            return ExtractedRecord(body=self._normalize(text))

        fields = self.patterns.fields
        return ExtractedRecord(
            body=self._normalize(candidate.text(fields.body)),
            title=self.clamper.clamp_title(candidate.text(fields.title)),
            summary=self.clamper.clamp_summary(candidate.text(fields.summary)),
            strategy=candidate.strategy,
        )

    __call__ = decode

    def _first_candidate(self, text: str) -> Optional[Candidate]:
        for strategy in self.strategies:
            try:
                candidate = strategy.try_extract(text)
            except Exception:  # noqa: BLE001
                logger.warning("Strategy %s failed unexpectedly", strategy.name, exc_info=True)
                continue
            if candidate is not None:
                logger.debug("Accepted candidate from %s", candidate.strategy)
                return candidate
        return None

    def _normalize(self, body: str) -> str:
        try:
            return self.normalizer.normalize(body)
        except Exception:  # noqa: BLE001
            logger.warning("Normalization failed; returning trimmed body", exc_info=True)
            return body.strip()


def _as_text(raw: RawResponse) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    return raw if isinstance(raw, str) else str(raw)


@lru_cache(maxsize=1)
def _default_patterns() -> PatternLibrary:
    return PatternLibrary()


def decode(raw: RawResponse, limits: DecodeLimits | None = None) -> ExtractedRecord:
    """Decode with default pattern tables and the given (or default) limits."""
    return ResponseDecoder(limits=limits, patterns=_default_patterns()).decode(raw)
