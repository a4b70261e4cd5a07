from dataclasses import dataclass
import os
from typing import Optional

from .clamp import LengthClamper
from .decoder import ResponseDecoder
from .models import DecodeLimits, FieldNames
from .normalizer import ContentNormalizer
from .patterns import PatternLibrary


@dataclass
class DecoderConfig:
    title_max: int = 70
    summary_max: int = 160
    body_key: str = "content"
    title_key: str = "metaSeoTitle"
    summary_key: str = "metaDescription"
    patterns_file: Optional[str] = None
    ellipsis: str = ""

    @classmethod
    def from_env(cls) -> "DecoderConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        return cls(
            title_max=_int("DECODER_TITLE_MAX", cls.title_max),
            summary_max=_int("DECODER_SUMMARY_MAX", cls.summary_max),
            body_key=os.environ.get("DECODER_BODY_KEY", cls.body_key),
            title_key=os.environ.get("DECODER_TITLE_KEY", cls.title_key),
            summary_key=os.environ.get("DECODER_SUMMARY_KEY", cls.summary_key),
            patterns_file=os.environ.get("DECODER_PATTERNS_FILE") or None,
            ellipsis=os.environ.get("DECODER_ELLIPSIS", cls.ellipsis),
        )

    @property
    def limits(self) -> DecodeLimits:
        return DecodeLimits(title_max=self.title_max, summary_max=self.summary_max)

    @property
    def fields(self) -> FieldNames:
        return FieldNames(body=self.body_key, title=self.title_key, summary=self.summary_key)

    def build_patterns(self) -> PatternLibrary:
        if self.patterns_file:
            return PatternLibrary.from_file(self.patterns_file, fields=self.fields)
        return PatternLibrary(fields=self.fields)

    def build_decoder(self) -> ResponseDecoder:
        patterns = self.build_patterns()
        limits = self.limits
        return ResponseDecoder(
            limits=limits,
            patterns=patterns,
            normalizer=ContentNormalizer(patterns),
            clamper=LengthClamper(limits, ellipsis=self.ellipsis),
        )
