from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldNames(BaseModel):
    """JSON keys the upstream generator is asked to emit."""

    model_config = ConfigDict(frozen=True)

    body: str = Field(default="content", min_length=1)
    title: str = Field(default="metaSeoTitle", min_length=1)
    summary: str = Field(default="metaDescription", min_length=1)

    def keys(self) -> tuple[str, str, str]:
        return (self.body, self.title, self.summary)


class DecodeLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    title_max: int = Field(default=70, ge=0)
    summary_max: int = Field(default=160, ge=0)


class ExtractedRecord(BaseModel):
    """Final body/title/summary triple handed to callers."""

    model_config = ConfigDict(frozen=True)

    body: str = ""
    title: str = ""
    summary: str = ""
    strategy: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        """True when no strategy matched or the short fields are missing."""
        return self.strategy is None or not (self.title and self.summary)


@dataclass
class Candidate:
    """A parsed object considered for acceptance, tagged with its stage."""

    data: dict[str, Any] = field(default_factory=dict)
    strategy: str = ""

    def text(self, key: str) -> str:
        value = self.data.get(key)
        return value if isinstance(value, str) else ""
