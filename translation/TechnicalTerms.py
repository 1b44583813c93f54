# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-18
# Description: TechnicalTerms
# -----------------------------------------------------------------------------
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import settings

_PLACEHOLDER_FMT = "⟦T{n}⟧"  # ⟦T0⟧
_PLACEHOLDER_RE = re.compile("⟦T(\\d+)⟧")

# Order matters: earlier alternatives win where matches overlap.
_TERM_PATTERNS = [
    "⟦T\\d+⟧",                                               # already masked
    r"`[^`\n]+`",                                            # inline code
    r"\b[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*\(\)",        # foo(), this.getView()
    r"\b[A-Za-z_$][\w$]+(?:\.[A-Za-z_$][\w$]*){1,}\b",       # sap.m.Button, oModel.setData
    r"\b[A-Z][A-Z0-9]*(?:[_/-][A-Z0-9]+)+\b",                # SAP_MM, /IWBEP/ERROR-CODE
    r"\b[A-Z]{1,}[0-9]+[A-Z0-9]*\b",                         # ME21N, VA01, S4
    r"\b[A-Z][A-Z0-9]{1,}\b",                                # BAPI, RFC, JSON
    r"\b[a-z][a-z0-9]*(?:_[a-z0-9]+)+\b",                    # doc_title, user_session
    r"\b[a-z]+[0-9]*(?:[A-Z][a-z0-9]*)+\b",                  # onInit, getView
    r"\b[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]*)+\b",                # BaseController
]
_TERM_RE = re.compile("|".join(f"(?:{p})" for p in _TERM_PATTERNS))


@dataclass
class ProtectedText:
    """Text with technical terms swapped for stable placeholders."""

    masked: str
    terms: Dict[str, str] = field(default_factory=dict)  # placeholder -> original term

    @property
    def term_list(self) -> List[str]:
        return list(dict.fromkeys(self.terms.values()))


class TechnicalTermProtector:
    """
    Finds identifiers that must survive translation untouched (domain codes,
    module/function names, table/field names) and masks them as ⟦Tn⟧.
    """

    def __init__(self, extra_terms: Optional[Iterable[str]] = None):
        glossary = settings.PROTECTED_TERMS if extra_terms is None else extra_terms
        self.extra_terms = sorted({t for t in glossary if t}, key=len, reverse=True)
        self._glossary_re = (
            re.compile("|".join(rf"(?<![\w.]){re.escape(t)}(?![\w])" for t in self.extra_terms))
            if self.extra_terms
            else None
        )

    def find_terms(self, text: str) -> List[str]:
        """Return unique technical terms in order of first appearance."""
        return self.protect(text).term_list

    def protect(self, text: str) -> ProtectedText:
        if not text:
            return ProtectedText(masked=text or "")

        by_term: Dict[str, str] = {}
        terms: Dict[str, str] = {}

        def _swap(match: re.Match) -> str:
            term = match.group(0)
            if _PLACEHOLDER_RE.fullmatch(term):
                return term
            placeholder = by_term.get(term)
            if placeholder is None:
                placeholder = _PLACEHOLDER_FMT.format(n=len(by_term))
                by_term[term] = placeholder
                terms[placeholder] = term
            return placeholder

        masked = text
        if self._glossary_re is not None:
            masked = self._glossary_re.sub(_swap, masked)
        masked = _TERM_RE.sub(_swap, masked)

        return ProtectedText(masked=masked, terms=terms)

    @staticmethod
    def restore(text: str, protected: ProtectedText) -> str:
        """Put the original terms back. Unknown placeholders are left as-is."""
        if not protected.terms:
            return text
        return _PLACEHOLDER_RE.sub(
            lambda m: protected.terms.get(m.group(0), m.group(0)),
            text,
        )

    @staticmethod
    def missing_placeholders(text: str, protected: ProtectedText) -> List[str]:
        present = set(_PLACEHOLDER_RE.findall(text or ""))
        return [
            term
            for placeholder, term in protected.terms.items()
            if _PLACEHOLDER_RE.fullmatch(placeholder).group(1) not in present
        ]
