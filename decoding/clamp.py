from __future__ import annotations

from typing import Optional

from .logging_config import get_logger
from .models import DecodeLimits

logger = get_logger(__name__)


class LengthClamper:
    """Truncate title and summary to their configured maximum lengths.

    The body is never clamped. With an ellipsis configured, a truncated value
    ends in the ellipsis and still fits the limit.
    """

    def __init__(self, limits: Optional[DecodeLimits] = None, ellipsis: str = ""):
        self.limits = limits or DecodeLimits()
        self.ellipsis = ellipsis

    def clamp(self, value: str, limit: int, field: str = "field") -> str:
        if len(value) <= limit:
            return value

        if self.ellipsis and len(self.ellipsis) < limit:
            clamped = value[: limit - len(self.ellipsis)] + self.ellipsis
        else:
            clamped = value[:limit]

        logger.debug("Clamped %s from %d to %d chars", field, len(value), len(clamped))
        return clamped

    def clamp_title(self, title: str) -> str:
        return self.clamp(title, self.limits.title_max, "title")

    def clamp_summary(self, summary: str) -> str:
        return self.clamp(summary, self.limits.summary_max, "summary")
