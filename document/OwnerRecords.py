# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-21
# Description: OwnerRecords
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol


@dataclass
class PromptRecord:
    """A user prompt; references exactly one embedding and keeps the untranslated text."""

    embedding_id: int
    user_session: str
    prompt_text: str
    project_id: Optional[str] = None
    response_summary: Optional[str] = None

    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class DocumentationEntry:
    """A single official documentation passage stored as one embedding."""

    embedding_id: int
    doc_title: str
    content_text: str
    doc_url: Optional[str] = None
    doc_section: Optional[str] = None
    component: Optional[str] = None
    doc_type: str = "official"

    id: Optional[int] = None
    created_at: Optional[datetime] = None


class OwnerFields(Protocol):
    """
    Describes the specialised row written next to an embedding by
    save_unit_with_owner(). `write` runs inside the same transaction.
    """

    content_type: str

    def metadata(self) -> Dict[str, Any]:
        ...

    def write(self, tx: Any, embedding_id: int, original_text: str) -> int:
        ...


@dataclass
class PromptOwner:
    user_session: str
    project_id: Optional[str] = None
    response_summary: Optional[str] = None

    content_type: str = "prompt"

    def metadata(self) -> Dict[str, Any]:
        return {"userSession": self.user_session, "projectId": self.project_id}

    def write(self, tx: Any, embedding_id: int, original_text: str) -> int:
        return tx.insert_prompt(
            PromptRecord(
                embedding_id=embedding_id,
                user_session=self.user_session,
                prompt_text=original_text,
                project_id=self.project_id,
                response_summary=self.response_summary,
            )
        )


@dataclass
class DocumentationOwner:
    doc_title: str
    doc_url: Optional[str] = None
    component: Optional[str] = None
    doc_section: Optional[str] = None

    content_type: str = "documentation"

    def metadata(self) -> Dict[str, Any]:
        return {
            "docTitle": self.doc_title,
            "docUrl": self.doc_url,
            "component": self.component,
            "docSection": self.doc_section,
        }

    def write(self, tx: Any, embedding_id: int, original_text: str) -> int:
        return tx.insert_documentation_entry(
            DocumentationEntry(
                embedding_id=embedding_id,
                doc_title=self.doc_title,
                content_text=original_text,
                doc_url=self.doc_url,
                doc_section=self.doc_section,
                component=self.component,
            )
        )
