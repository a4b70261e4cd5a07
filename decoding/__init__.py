"""
Decoding Module - tolerant recovery of generated content records

Takes the raw text an upstream generator returned for a
{"content", "metaSeoTitle", "metaDescription"} request and always produces
a clean record, even when the JSON is fenced, wrapped in commentary,
truncated or missing entirely.

Quick Start:
    from decoding import decode, DecodeLimits

    record = decode(raw_text, DecodeLimits(title_max=60))
    record.body     # normalized HTML
    record.title    # <= 60 chars
    record.summary  # <= 160 chars
"""

__version__ = "1.0.0"

from .clamp import LengthClamper
from .config import DecoderConfig
from .decoder import ResponseDecoder, decode
from .exceptions import (
    DecodeError,
    ParseFailure,
    PatternLibraryError,
    ValidationFailure,
)
from .models import Candidate, DecodeLimits, ExtractedRecord, FieldNames
from .normalizer import ContentNormalizer, normalize
from .patterns import DEFAULT_FOOTERS, DEFAULT_PREAMBLES, PatternLibrary
from .strategies import (
    BoundaryScanner,
    FieldSalvager,
    PatternMatcher,
    Strategy,
    StructuredExtractor,
    default_strategies,
)

__all__ = [
    "__version__",
    "decode",
    "normalize",
    "ResponseDecoder",
    "DecoderConfig",
    "DecodeLimits",
    "ExtractedRecord",
    "FieldNames",
    "Candidate",
    "PatternLibrary",
    "DEFAULT_PREAMBLES",
    "DEFAULT_FOOTERS",
    "ContentNormalizer",
    "LengthClamper",
    "Strategy",
    "StructuredExtractor",
    "BoundaryScanner",
    "PatternMatcher",
    "FieldSalvager",
    "default_strategies",
    "DecodeError",
    "ParseFailure",
    "ValidationFailure",
    "PatternLibraryError",
]
