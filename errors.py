# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-15
# Description: errors.py
# -----------------------------------------------------------------------------


class KBError(Exception):
    """Base class for knowledge-base indexing and search errors."""


class ValidationError(KBError, ValueError):
    """Input rejected before any external call was made."""


class UpstreamServiceError(KBError):
    """An external model service failed or returned something unusable."""


class EmbeddingError(UpstreamServiceError):
    pass


class TranslationError(UpstreamServiceError):
    """Raised inside the translator only; callers receive an untranslated result instead."""


class PersistenceError(KBError):
    """The store failed; the enclosing transaction has already been rolled back."""
