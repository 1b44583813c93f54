# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-15
# Description: validation.py
# -----------------------------------------------------------------------------
import re
from typing import Any, Dict, Optional

import settings
from errors import ValidationError

_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,4})?$")


def validate_content(content: Any, *, max_chars: Optional[int] = None, field: str = "content") -> str:
    limit = settings.MAX_CONTENT_CHARS if max_chars is None else max_chars
    if not isinstance(content, str) or not content.strip():
        raise ValidationError(f"{field} must be a non-empty string")
    if len(content) > limit:
        raise ValidationError(f"{field} is {len(content)} chars, limit is {limit}")
    return content


def validate_content_type(content_type: Any, *, optional: bool = False) -> Optional[str]:
    if content_type is None and optional:
        return None
    if content_type not in settings.CONTENT_TYPES:
        raise ValidationError(
            f"content_type must be one of {list(settings.CONTENT_TYPES)}, got {content_type!r}"
        )
    return content_type


def validate_language(language: Any) -> str:
    """
    Accepts "auto" or a 2-5 char language tag ("en", "pt", "pt-BR").
    Returns the tag unchanged; normalisation happens in the translator.
    """
    if language is None:
        return "en"
    if not isinstance(language, str) or not (2 <= len(language.strip()) <= 5):
        raise ValidationError(f"language must be 2-5 chars or 'auto', got {language!r}")
    language = language.strip()
    if language.lower() != "auto" and not _LANGUAGE_RE.match(language):
        raise ValidationError(f"language must be a language code or 'auto', got {language!r}")
    return language


def validate_metadata(metadata: Any) -> Dict[str, Any]:
    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise ValidationError(f"metadata must be a dict, got {type(metadata).__name__}")
    return dict(metadata)


def validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(f"limit must be an int, got {limit!r}")
    if not (1 <= limit <= settings.SEARCH_MAX_LIMIT):
        raise ValidationError(f"limit must be between 1 and {settings.SEARCH_MAX_LIMIT}, got {limit}")
    return limit


def validate_distance(value: Any, *, field: str, upper: Optional[float] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    value = float(value)
    if value < 0 or (upper is not None and value > upper):
        bound = f"between 0 and {upper}" if upper is not None else ">= 0"
        raise ValidationError(f"{field} must be {bound}, got {value}")
    return value


def validate_chunk_params(max_units: Any, overlap_units: Any) -> None:
    for name, v in (("max_units", max_units), ("overlap_units", overlap_units)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValidationError(f"{name} must be an int, got {v!r}")
    if max_units < 1:
        raise ValidationError(f"max_units must be >= 1, got {max_units}")
    if overlap_units < 0:
        raise ValidationError(f"overlap_units must be >= 0, got {overlap_units}")
    # guard against bad config that can cause infinite loops
    if overlap_units >= max_units:
        raise ValidationError(
            f"overlap_units ({overlap_units}) must be < max_units ({max_units})"
        )
