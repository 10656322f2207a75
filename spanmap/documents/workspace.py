"""In-memory registry of documents by identifier."""
from __future__ import annotations

import logging
from typing import Iterator

from spanmap.documents.models import Document
from spanmap.errors import InputValidationError
from spanmap.text import BufferSnapshot

logger = logging.getLogger("spanmap.documents.workspace")


class Workspace:
    """Tracks the documents that mapping and excerpt requests refer to."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def __iter__(self) -> Iterator[Document]:
        return iter(tuple(self._documents.values()))

    def __len__(self) -> int:
        return len(self._documents)

    def add_document(self, document: Document) -> Document:
        existing = self._documents.get(document.document_id)
        if existing is not None and existing is not document:
            raise InputValidationError(
                message=f"Document id '{document.document_id}' is already registered for {existing.file_path}.",
                remediation="Remove the existing document before registering a replacement.",
            )
        self._documents[document.document_id] = document
        logger.debug(
            "Registered document",
            extra={
                "document_id": document.document_id,
                "file_path": document.file_path,
                "is_generated": document.is_generated,
            },
        )
        return document

    def get_document(self, document_id: str) -> Document | None:
        return self._documents.get(document_id)

    def remove_document(self, document_id: str) -> Document | None:
        return self._documents.pop(document_id, None)

    async def get_text(self, document_id: str) -> BufferSnapshot:
        """Capture the current snapshot of a registered document."""

        document = self._documents.get(document_id)
        if document is None:
            raise InputValidationError(
                message=f"Unknown document id '{document_id}'.",
                remediation="Register the document with the workspace before requesting its text.",
            )
        return await document.get_text()


__all__ = ["Workspace"]
