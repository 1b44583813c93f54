# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-29
# Description: test_text_utils_and_validation.py
# -----------------------------------------------------------------------------
import pytest

import settings
from errors import KBError, ValidationError
from utility.text_utils import clean_text_for_embedding, count_words, preview
from utility.validation import (
    validate_content,
    validate_content_type,
    validate_distance,
    validate_language,
    validate_limit,
    validate_metadata,
)


def test_clean_text_collapses_whitespace_and_trims():
    assert clean_text_for_embedding("  a\n\n b\t\tc  ") == "a b c"


def test_clean_text_caps_length():
    long_text = "x" * (settings.MAX_EMBED_CHARS + 500)
    assert len(clean_text_for_embedding(long_text)) == settings.MAX_EMBED_CHARS
    assert clean_text_for_embedding("abc def", max_chars=4) == "abc"


def test_count_words_and_preview():
    assert count_words("one  two\nthree") == 3
    assert count_words("") == 0
    assert preview("a" * 60, n=10) == "a" * 10 + "..."


def test_validation_error_is_value_error_and_kb_error():
    with pytest.raises(ValueError):
        validate_content("   ")
    assert issubclass(ValidationError, KBError)


def test_validate_content_limit():
    assert validate_content("hello") == "hello"
    with pytest.raises(ValidationError):
        validate_content("x" * 11, max_chars=10)
    with pytest.raises(ValidationError):
        validate_content(None)


def test_validate_content_type():
    for ct in ("prompt", "source_code", "template", "documentation"):
        assert validate_content_type(ct) == ct
    assert validate_content_type(None, optional=True) is None
    with pytest.raises(ValidationError):
        validate_content_type("blog_post")
    with pytest.raises(ValidationError):
        validate_content_type(None)


@pytest.mark.parametrize("lang", ["en", "pt", "pt-BR", "auto", "AUTO", "zh_CN"])
def test_validate_language_accepts(lang):
    assert validate_language(lang) == lang


@pytest.mark.parametrize("lang", ["e", "english", "12", "p!", 5])
def test_validate_language_rejects(lang):
    with pytest.raises(ValidationError):
        validate_language(lang)


def test_validate_limit_bounds():
    assert validate_limit(1) == 1
    assert validate_limit(settings.SEARCH_MAX_LIMIT) == settings.SEARCH_MAX_LIMIT
    for bad in (0, settings.SEARCH_MAX_LIMIT + 1, True, "10", 2.5):
        with pytest.raises(ValidationError):
            validate_limit(bad)


def test_validate_distance_bounds():
    assert validate_distance(0, field="threshold", upper=3.0) == 0.0
    assert validate_distance(3, field="threshold", upper=3.0) == 3.0
    with pytest.raises(ValidationError):
        validate_distance(3.01, field="threshold", upper=3.0)
    with pytest.raises(ValidationError):
        validate_distance(-0.1, field="max_distance")


def test_validate_metadata():
    assert validate_metadata(None) == {}
    src = {"a": 1}
    out = validate_metadata(src)
    out["b"] = 2
    assert "b" not in src
    with pytest.raises(ValidationError):
        validate_metadata(["not", "a", "dict"])
