import logging

import pytest

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.domain.errors import OpenError
from pdf_combine.services.document_manager import DocumentReferenceManager


@pytest.mark.unit
def test_load_assigns_sequential_ids_with_zero_references(doc_a, doc_b) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())

    first = manager.load("a.pdf", doc_a)
    second = manager.load("b.pdf", doc_b)

    assert (first, second) == ("doc_0", "doc_1")
    assert manager.reference_count(first) == 0
    entry = manager.get_document(second)
    assert entry is not None
    assert entry.name == "b.pdf"
    assert entry.page_count == 2
    assert [item.document_id for item in manager.documents()] == ["doc_0", "doc_1"]
    manager.dispose_all()


@pytest.mark.unit
def test_load_bytes_registers_document(synthetic_pdf_bytes: bytes) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())

    document_id = manager.load_bytes("upload.pdf", synthetic_pdf_bytes)

    assert document_id in manager
    assert manager.get_document(document_id).page_count == 3
    manager.dispose_all()


@pytest.mark.unit
def test_load_unparsable_file_raises_open_error(tmp_path) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"this is not a pdf at all")

    with pytest.raises(OpenError):
        manager.load("broken.pdf", broken)
    with pytest.raises(OpenError):
        manager.load("missing.pdf", tmp_path / "missing.pdf")
    assert len(manager) == 0


@pytest.mark.unit
def test_ids_are_not_reused_after_failed_or_disposed_loads(doc_a, tmp_path) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    first = manager.load("a.pdf", doc_a)
    manager.release_if_unreferenced(first)
    with pytest.raises(OpenError):
        manager.load("missing.pdf", tmp_path / "missing.pdf")

    assert manager.load("a.pdf", doc_a) == "doc_1"
    manager.dispose_all()


@pytest.mark.unit
def test_document_released_when_count_reaches_zero(doc_b) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    document_id = manager.load("b.pdf", doc_b)
    handle = manager.get_document(document_id).handle

    manager.add_reference(document_id)
    manager.add_reference(document_id)
    manager.remove_reference(document_id)

    assert manager.reference_count(document_id) == 1
    assert not handle.is_closed

    manager.remove_reference(document_id)

    assert manager.get_document(document_id) is None
    assert manager.reference_count(document_id) == 0
    assert handle.is_closed


@pytest.mark.unit
def test_unknown_ids_are_logged_no_ops(caplog: pytest.LogCaptureFixture) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())

    with caplog.at_level(logging.WARNING):
        manager.add_reference("doc_99")
        manager.remove_reference("doc_99")

    assert len(manager) == 0
    assert "doc_99" in caplog.text


@pytest.mark.unit
def test_dispose_listener_receives_released_ids(doc_a, doc_b) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    released: list[str] = []
    manager.add_dispose_listener(released.append)
    first = manager.load("a.pdf", doc_a)
    second = manager.load("b.pdf", doc_b)
    manager.add_reference(first)

    manager.remove_reference(first)
    manager.dispose_all()

    assert released == [first, second]


@pytest.mark.unit
def test_dispose_all_ignores_reference_counts(doc_a, doc_b) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    first = manager.load("a.pdf", doc_a)
    second = manager.load("b.pdf", doc_b)
    manager.add_reference(first)
    manager.add_reference(second)
    handles = [entry.handle for entry in manager.documents()]

    manager.dispose_all()

    assert len(manager) == 0
    assert all(handle.is_closed for handle in handles)


@pytest.mark.unit
def test_release_if_unreferenced_keeps_referenced_documents(doc_a, doc_b) -> None:
    manager = DocumentReferenceManager(PyMuPdfAdapter())
    kept = manager.load("a.pdf", doc_a)
    idle = manager.load("b.pdf", doc_b)
    manager.add_reference(kept)

    assert manager.release_if_unreferenced(kept) is False
    assert manager.release_if_unreferenced(idle) is True
    assert manager.release_if_unreferenced(idle) is False
    assert kept in manager
    assert idle not in manager
    manager.dispose_all()
