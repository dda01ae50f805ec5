import io
from pathlib import Path

import pytest

from app.errors import UploadError, UploadErrorKind, DocumentNotFoundError, PDFExtractionError
from app.models import PDFRecord
from app.services import PDFProcessor
from app.store import PDFStore
import app.services.document_service as document_service_module


def test_store_save_and_get():
    store = PDFStore()
    record = PDFRecord(id="abc", filename="a.pdf", file_path="a.pdf", text="hi")
    store.save(record)
    assert "abc" in store
    assert len(store) == 1
    assert store.get("abc") is record
    assert store.get("nope") is None


def test_pdf_processor_reads_pages(sample_pdf):
    text, pages = PDFProcessor().extract_text(sample_pdf, "report.pdf")
    assert pages == 2
    assert "Quarterly revenue" in text
    assert "Outlook" in text


def test_pdf_processor_rejects_garbage():
    with pytest.raises(PDFExtractionError):
        PDFProcessor().extract_text(b"garbage bytes", "broken.pdf")


def test_ingest_missing_file(service, tmp_path):
    with pytest.raises(UploadError) as exc_info:
        service.ingest("doc-1", tmp_path / "gone.pdf", "gone.pdf")
    assert exc_info.value.kind is UploadErrorKind.FILE_MISSING
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Uploaded file not found"


def test_ingest_empty_file(service, tmp_path):
    path = tmp_path / "empty.pdf"
    path.write_bytes(b"")
    with pytest.raises(UploadError) as exc_info:
        service.ingest("doc-1", path, "empty.pdf")
    assert exc_info.value.kind is UploadErrorKind.EMPTY_FILE


def test_ingest_keeps_record_when_extraction_fails(service, tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf")
    record = service.ingest("doc-1", path, "broken.pdf")
    assert record.extraction_failed
    assert record.pages == 1
    assert service.get_record("doc-1") is record


def test_save_upload_names_file_after_id(service, upload_dir):
    document_id, path = service.save_upload("my report.pdf", io.BytesIO(b"%PDF-1.4 data"))
    assert path.parent == upload_dir
    assert path.name == f"{document_id}-my report.pdf"
    assert path.read_bytes() == b"%PDF-1.4 data"


def test_save_upload_sanitizes_filename(service):
    _, path = service.save_upload("../../etc/passwd.pdf", io.BytesIO(b"x"))
    assert "/" not in path.name[36:]
    assert path.name.endswith(".._.._etc_passwd.pdf")


def test_get_record_unknown(service):
    with pytest.raises(DocumentNotFoundError):
        service.get_record("unknown")


@pytest.mark.parametrize("kind,status", [
    (UploadErrorKind.INVALID_TYPE, 400),
    (UploadErrorKind.TOO_LARGE, 413),
    (UploadErrorKind.PERMISSION_DENIED, 500),
    (UploadErrorKind.FILESYSTEM, 500),
])
def test_upload_error_status(kind, status):
    assert UploadError(kind).status_code == status


@pytest.mark.parametrize("error,kind,message", [
    (PermissionError("denied"), UploadErrorKind.PERMISSION_DENIED, "Permission denied. Please check file permissions."),
    (FileNotFoundError("vanished"), UploadErrorKind.FILE_MISSING, "Uploaded file not found"),
    (OSError("disk error"), UploadErrorKind.FILESYSTEM, "File system error. Please try again."),
])
def test_ingest_read_failures(service, tmp_path, monkeypatch, error, kind, message):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")

    def fail_read(self):
        raise error

    monkeypatch.setattr(Path, "read_bytes", fail_read)
    with pytest.raises(UploadError) as exc_info:
        service.ingest("doc-1", path, "report.pdf")
    assert exc_info.value.kind is kind
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == message
    assert len(service.store) == 0


@pytest.mark.parametrize("error,kind", [
    (PermissionError("denied"), UploadErrorKind.PERMISSION_DENIED),
    (OSError("no space left on device"), UploadErrorKind.FILESYSTEM),
])
def test_save_upload_write_failures(service, monkeypatch, error, kind):
    def fail_open(*args, **kwargs):
        raise error

    monkeypatch.setattr(document_service_module, "open", fail_open, raising=False)
    with pytest.raises(UploadError) as exc_info:
        service.save_upload("report.pdf", io.BytesIO(b"%PDF-1.4"))
    assert exc_info.value.kind is kind
    assert exc_info.value.status_code == 500
