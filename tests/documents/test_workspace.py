from __future__ import annotations

import asyncio

import pytest

from spanmap.documents import Document, Workspace
from spanmap.errors import InputValidationError
from spanmap.text import TextBuffer, TextSpan


def _document(document_id: str, file_path: str, text: str = "body") -> Document:
    return Document(document_id=document_id, file_path=file_path, buffer=TextBuffer(text))


def test_documents_are_registered_by_id() -> None:
    workspace = Workspace()
    first = workspace.add_document(_document("a", "src/a.py"))
    workspace.add_document(_document("b", "src/b.py"))

    assert len(workspace) == 2
    assert workspace.get_document("a") is first
    assert [document.document_id for document in workspace] == ["a", "b"]
    assert workspace.get_document("missing") is None


def test_registering_same_document_twice_is_idempotent() -> None:
    workspace = Workspace()
    document = _document("a", "src/a.py")

    workspace.add_document(document)
    workspace.add_document(document)

    assert len(workspace) == 1


def test_conflicting_id_is_rejected() -> None:
    workspace = Workspace()
    workspace.add_document(_document("a", "src/a.py"))

    with pytest.raises(InputValidationError) as excinfo:
        workspace.add_document(_document("a", "src/other.py"))

    assert "src/a.py" in excinfo.value.message


def test_removed_document_is_no_longer_known() -> None:
    workspace = Workspace()
    document = workspace.add_document(_document("a", "src/a.py"))

    assert workspace.remove_document("a") is document
    assert workspace.remove_document("a") is None
    assert len(workspace) == 0


def test_get_text_returns_current_snapshot() -> None:
    workspace = Workspace()
    document = workspace.add_document(_document("a", "src/a.py", "one"))
    document.buffer.replace(TextSpan(0, 3), "two")

    snapshot = asyncio.run(workspace.get_text("a"))

    assert snapshot.text == "two"
    assert snapshot.version == 1

    with pytest.raises(InputValidationError):
        asyncio.run(workspace.get_text("missing"))


def test_document_name_falls_back_to_path() -> None:
    assert _document("a", "src/pages/index.tmpl").name == "index.tmpl"
    assert _document("b", "").name == ""
    assert _document("c", "/").name == "/"
