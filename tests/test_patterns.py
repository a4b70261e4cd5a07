"""
Tests for PatternLibrary and its phrase tables.
"""

import re

import pytest

from decoding import (
    DEFAULT_FOOTERS,
    DEFAULT_PREAMBLES,
    FieldNames,
    PatternLibrary,
    PatternLibraryError,
)


class TestDefaults:
    def test_default_tables_compile(self, patterns):
        assert len(patterns.preamble_patterns) == len(DEFAULT_PREAMBLES)
        assert len(patterns.footer_patterns) == len(DEFAULT_FOOTERS)
        assert all(isinstance(p, re.Pattern) for p in patterns.leak_patterns)

    @pytest.mark.parametrize("phrase", DEFAULT_PREAMBLES)
    def test_preamble_phrases_compile_alone(self, phrase):
        re.compile(phrase, re.IGNORECASE)

    def test_body_end_needs_following_field(self, patterns):
        text = '"content": "Hi", "metaSeoTitle": "T"'
        start = patterns.body_key.search(text).end()
        assert patterns.body_end.search(text, start).start() == text.index('", "meta')
        assert patterns.body_end.search('"content": "Hi", "other": "T"') is None

    def test_unescaped_quote(self, patterns):
        assert patterns.unescaped_quote.search(r'a\"b"').end() == 5
        assert patterns.unescaped_quote.search(r'a\\"b').end() == 4

    @pytest.mark.parametrize("tail", ["", " ,", "}", "\n```", " \n"])
    def test_value_end(self, patterns, tail):
        assert patterns.value_end.match(tail)

    def test_value_end_rejects_text(self, patterns):
        assert patterns.value_end.match(" more words") is None

    def test_title_and_summary_patterns(self, patterns):
        text = '"metaSeoTitle" : "T1" , "metaDescription":"D1"'
        assert patterns.title_pattern.search(text).group(1) == "T1"
        assert patterns.summary_pattern.search(text).group(1) == "D1"


class TestFieldNames:
    def test_keys_are_escaped(self):
        patterns = PatternLibrary(fields=FieldNames(body="a.b", title="t+", summary="s(1)"))
        assert patterns.title_pattern.search('"t+": "x"').group(1) == "x"
        assert patterns.body_key.search('"aXb": "x"') is None
        text = '"a.b": "x", "s(1)": "y"'
        assert patterns.body_end.search(text).start() == text.index('", "s')

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            FieldNames(body="")


class TestInvalidPatterns:
    def test_bad_preamble(self):
        with pytest.raises(PatternLibraryError) as exc_info:
            PatternLibrary(preambles=("[unclosed",))
        assert exc_info.value.pattern is not None

    def test_bad_footer(self):
        with pytest.raises(PatternLibraryError):
            PatternLibrary(footers=("(",))


class TestFromFile:
    def test_appends_to_defaults(self, pattern_file):
        library = PatternLibrary.from_file(pattern_file({"preambles": ["as requested"]}))
        assert library.preambles == DEFAULT_PREAMBLES + ("as requested",)
        assert library.footers == DEFAULT_FOOTERS

    def test_replace(self, pattern_file):
        library = PatternLibrary.from_file(
            pattern_file({"footers": ["end of draft"], "replace": True})
        )
        assert library.preambles == ()
        assert library.footers == ("end of draft",)

    def test_custom_fields(self, pattern_file):
        fields = FieldNames(body="body")
        library = PatternLibrary.from_file(pattern_file({}), fields=fields)
        assert library.fields == fields

    def test_missing_file(self, tmp_path):
        with pytest.raises(PatternLibraryError) as exc_info:
            PatternLibrary.from_file(tmp_path / "nope.json")
        assert exc_info.value.path.endswith("nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PatternLibraryError):
            PatternLibrary.from_file(path)

    def test_not_an_object(self, pattern_file):
        with pytest.raises(PatternLibraryError):
            PatternLibrary.from_file(pattern_file(["a"]))

    def test_phrases_must_be_strings(self, pattern_file):
        with pytest.raises(PatternLibraryError):
            PatternLibrary.from_file(pattern_file({"footers": [1, 2]}))


def test_with_phrases(patterns):
    extended = patterns.with_phrases(footers=["end of draft"])

    assert extended.footers[-1] == "end of draft"
    assert patterns.footers == DEFAULT_FOOTERS
    assert len(extended.footer_patterns) == len(DEFAULT_FOOTERS) + 1
