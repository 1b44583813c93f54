# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-14
# Updated: 2026-10-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import List


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


def _env_float_list(name: str, default: List[float]) -> List[float]:
    v = _env(name, "")
    if v == "":
        return list(default)
    try:
        return [float(part) for part in v.split(",") if part.strip()]
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a comma separated list of floats, got {v!r}") from e


def _env_str_list(name: str, default: List[str]) -> List[str]:
    v = _env(name, "")
    if v == "":
        return list(default)
    return [part.strip() for part in v.split(",") if part.strip()]


# -----------------------------------------------------------------------------
# Content
# -----------------------------------------------------------------------------
CONTENT_TYPES = ("prompt", "source_code", "template", "documentation")

# Upper bound for a single ingested snippet (chars, before cleaning)
MAX_CONTENT_CHARS = _env_int("KB_MAX_CONTENT_CHARS", 8000)

# Embedding input cap (chars, after whitespace cleaning)
MAX_EMBED_CHARS = _env_int("KB_MAX_EMBED_CHARS", 8000)

# Upper bound for a full document handed to ingest_document()
MAX_DOCUMENT_CHARS = _env_int("KB_MAX_DOCUMENT_CHARS", 10 * 1024 * 1024)


# -----------------------------------------------------------------------------
# Chunking (word based)
# -----------------------------------------------------------------------------
CHUNK_MAX_WORDS = _env_int("KB_CHUNK_MAX_WORDS", 50)
CHUNK_OVERLAP_WORDS = _env_int("KB_CHUNK_OVERLAP_WORDS", 25)


# -----------------------------------------------------------------------------
# Embeddings
# -----------------------------------------------------------------------------
# text-embedding-3-small -> 1536, text-embedding-3-large -> 3072
EMBEDDING_DIM = _env_int("KB_EMBEDDING_DIM", 1536)
EMBED_BATCH_SIZE = _env_int("KB_EMBED_BATCH_SIZE", 64)
EMBED_NORMALIZE = _env_bool("KB_EMBED_NORMALIZE", False)


# -----------------------------------------------------------------------------
# Translation
# -----------------------------------------------------------------------------
TRANSLATION_TEMPERATURE = _env_float("KB_TRANSLATION_TEMPERATURE", 0.0)
TRANSLATION_MAX_TOKENS = _env_int("KB_TRANSLATION_MAX_TOKENS", 4096)

# "auto" queries detected as English above this confidence skip the model call
AUTO_DETECT_MIN_CONFIDENCE = _env_float("KB_AUTO_DETECT_MIN_CONFIDENCE", 0.90)

# Domain glossary that is always kept verbatim, on top of the detected identifiers
PROTECTED_TERMS = _env_str_list("KB_PROTECTED_TERMS", ["SAP", "SAPUI5", "OpenUI5", "Fiori", "OData"])


# -----------------------------------------------------------------------------
# Search
# -----------------------------------------------------------------------------
# "cosine" -> pgvector <=>, "l2" -> pgvector <->
DISTANCE_METRIC = _env("KB_DISTANCE_METRIC", "cosine").lower()

SEARCH_DEFAULT_LIMIT = _env_int("KB_SEARCH_DEFAULT_LIMIT", 10)
SEARCH_MAX_LIMIT = _env_int("KB_SEARCH_MAX_LIMIT", 50)
SEARCH_MAX_QUERY_CHARS = _env_int("KB_SEARCH_MAX_QUERY_CHARS", 1000)
SEARCH_DEFAULT_THRESHOLD = _env_float("KB_SEARCH_DEFAULT_THRESHOLD", 1.5)
SEARCH_MAX_THRESHOLD = _env_float("KB_SEARCH_MAX_THRESHOLD", 3.0)

PROGRESSIVE_THRESHOLDS = _env_float_list("KB_PROGRESSIVE_THRESHOLDS", [1.0, 1.5, 2.0, 2.5])
PROGRESSIVE_MAX_DISTANCE = _env_float("KB_MAX_DISTANCE", 0.8)

DEBUG_DISTANCE_LIMIT = _env_int("KB_DEBUG_DISTANCE_LIMIT", 10)


# -----------------------------------------------------------------------------
# Ingestion / persistence
# -----------------------------------------------------------------------------
INGEST_MAX_WORKERS = _env_int("KB_INGEST_MAX_WORKERS", 8)
CREATE_SCHEMA_ON_START = _env_bool("KB_CREATE_SCHEMA_ON_START", False)
DB_POOL_SIZE = _env_int("KB_DB_POOL_SIZE", 20)
DB_POOL_TIMEOUT = _env_int("KB_DB_POOL_TIMEOUT", 2)


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if CHUNK_OVERLAP_WORDS >= CHUNK_MAX_WORDS:
    raise RuntimeError(
        f"KB_CHUNK_OVERLAP_WORDS ({CHUNK_OVERLAP_WORDS}) must be < KB_CHUNK_MAX_WORDS ({CHUNK_MAX_WORDS})"
    )

if DISTANCE_METRIC not in ("cosine", "l2"):
    raise RuntimeError(f"KB_DISTANCE_METRIC must be 'cosine' or 'l2', got {DISTANCE_METRIC!r}")

if not PROGRESSIVE_THRESHOLDS:
    raise RuntimeError("KB_PROGRESSIVE_THRESHOLDS resolved to an empty list")

if EMBEDDING_DIM <= 0:
    raise RuntimeError(f"KB_EMBEDDING_DIM must be positive, got {EMBEDDING_DIM}")
