"""
Pytest fixtures for decoding tests.
"""

import json

import pytest

from decoding import (
    ContentNormalizer,
    DecodeLimits,
    FieldSalvager,
    PatternLibrary,
    ResponseDecoder,
)


@pytest.fixture
def patterns():
    """Default pattern tables."""
    return PatternLibrary()


@pytest.fixture
def normalizer(patterns):
    return ContentNormalizer(patterns)


@pytest.fixture
def salvager(patterns):
    return FieldSalvager(patterns)


@pytest.fixture
def decoder(patterns):
    return ResponseDecoder(patterns=patterns)


@pytest.fixture
def small_limits():
    return DecodeLimits(title_max=10, summary_max=20)


@pytest.fixture
def well_formed():
    """A clean payload as the generator is asked to produce it."""
    return json.dumps(
        {
            "content": "<h1>Cold Email Guide</h1>\n<p>Write short emails.</p>",
            "metaSeoTitle": "Cold Email Guide for Sales Teams",
            "metaDescription": "Learn how to write cold emails that get replies.",
        }
    )


@pytest.fixture
def pattern_file(tmp_path):
    """Factory writing a pattern table file and returning its path."""

    def _write(data) -> str:
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write
