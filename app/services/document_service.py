"""
Main document service that orchestrates upload storage, PDF processing, search and chat.
"""

import os
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

from .pdf_processor import PDFProcessor
from .chat_service import ChatService
from ..config import settings
from ..errors import UploadError, UploadErrorKind, DocumentNotFoundError
from ..models import PDFRecord, SearchResult, ChatResponse, EXTRACTION_FAILED_TEXT
from ..store import PDFStore
from ..utils import (
    generate_document_id,
    sanitize_filename,
    max_upload_bytes,
    split_lines,
    estimate_page,
    lines_per_page,
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


class DocumentService:
    """Main service for document processing and chat functionality."""

    def __init__(
        self,
        store: Optional[PDFStore] = None,
        upload_dir: Optional[str] = None,
        pdf_processor: Optional[PDFProcessor] = None,
        chat_service: Optional[ChatService] = None
    ):
        """Initialize the document service."""
        self.store = store if store is not None else PDFStore()
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.chat_service = chat_service or ChatService()

    def save_upload(self, filename: str, stream: BinaryIO) -> Tuple[str, Path]:
        """
        Write an uploaded file to the upload directory.

        Args:
            filename: Original filename from the client
            stream: Readable binary stream with the file content

        Returns:
            Tuple of (document id, path of the stored file named "<id>-<filename>")

        Raises:
            UploadError: If the file is too large or cannot be written
        """
        document_id = generate_document_id()
        target = self.upload_dir / f"{document_id}-{sanitize_filename(filename or 'upload.pdf')}"
        limit = max_upload_bytes()
        written = 0

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                while True:
                    chunk = stream.read(COPY_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > limit:
                        break
                    out.write(chunk)
        except PermissionError as e:
            handle_processing_error("upload_write", e, {"filename": filename})
            raise UploadError(UploadErrorKind.PERMISSION_DENIED, str(e)) from e
        except OSError as e:
            handle_processing_error("upload_write", e, {"filename": filename})
            raise UploadError(UploadErrorKind.FILESYSTEM, str(e)) from e

        if written > limit:
            target.unlink(missing_ok=True)
            raise UploadError(
                UploadErrorKind.TOO_LARGE,
                f"File {filename} exceeds the maximum size of {settings.max_file_size_mb}MB"
            )

        log_processing_info("Upload stored", {
            "filename": filename,
            "path": str(target),
            "size": written
        })
        return document_id, target

    @measure_time
    def ingest(self, document_id: str, file_path: Path, filename: str) -> PDFRecord:
        """
        Read a stored upload, extract its text and keep the record.

        Extraction failures do not fail the upload: the record gets the
        placeholder text and a single page.

        Raises:
            UploadError: If the stored file is missing, unreadable or empty
        """
        file_path = Path(file_path)

        if not file_path.exists():
            logger.error(f"File not found at path: {file_path}")
            raise UploadError(UploadErrorKind.FILE_MISSING, str(file_path))

        try:
            data = file_path.read_bytes()
        except PermissionError as e:
            handle_processing_error("upload_read", e, {"path": str(file_path)})
            raise UploadError(UploadErrorKind.PERMISSION_DENIED, str(e)) from e
        except FileNotFoundError as e:
            handle_processing_error("upload_read", e, {"path": str(file_path)})
            raise UploadError(UploadErrorKind.FILE_MISSING, str(e)) from e
        except OSError as e:
            handle_processing_error("upload_read", e, {"path": str(file_path)})
            raise UploadError(UploadErrorKind.FILESYSTEM, str(e)) from e

        if not data:
            raise UploadError(UploadErrorKind.EMPTY_FILE, str(file_path))

        try:
            text, pages = self.pdf_processor.extract_text(data, filename)
        except Exception as e:
            logger.warning(f"PDF parsing failed, but continuing with upload: {e}")
            text, pages = EXTRACTION_FAILED_TEXT, 1

        record = self.store.save(PDFRecord(
            id=document_id,
            filename=filename,
            file_path=os.fspath(file_path),
            text=text,
            pages=pages
        ))

        log_processing_info("PDF stored", {
            "id": record.id,
            "filename": filename,
            "pages": pages,
            "extraction_failed": record.extraction_failed,
            "total_documents": len(self.store)
        })
        return record

    def upload(self, filename: str, stream: BinaryIO) -> PDFRecord:
        """Store an uploaded PDF on disk and ingest it."""
        document_id, path = self.save_upload(filename, stream)
        return self.ingest(document_id, path, filename)

    def get_record(self, document_id: str) -> PDFRecord:
        """Look up a stored record or raise DocumentNotFoundError."""
        record = self.store.get(document_id)
        if record is None:
            raise DocumentNotFoundError(document_id)
        return record

    def get_file_path(self, document_id: str) -> Optional[Path]:
        """Path of the stored PDF, or None if it is no longer on disk."""
        path = Path(self.get_record(document_id).file_path)
        return path if path.is_file() else None

    def get_text(self, document_id: str) -> str:
        return self.get_record(document_id).text

    def search(self, document_id: str, query: str) -> List[SearchResult]:
        """
        Case-insensitive substring search over the lines of a document.

        Returns at most `search_result_limit` matches in document order.
        """
        record = self.get_record(document_id)
        needle = query.lower()

        results: List[SearchResult] = []
        for index, line in enumerate(split_lines(record.text)):
            if needle in line.lower():
                results.append(SearchResult(
                    line=line.strip(),
                    line_number=index + 1,
                    page=estimate_page(index)
                ))
                if len(results) >= settings.search_result_limit:
                    break

        log_processing_info("Search completed", {
            "id": document_id,
            "query_length": len(query),
            "results": len(results)
        })
        return results

    def get_page(self, document_id: str, page_number: int) -> str:
        """
        Text of one page, approximated by dividing the lines evenly over the declared pages.

        Pages past the end return an empty string.
        """
        record = self.get_record(document_id)
        lines = split_lines(record.text)
        size = lines_per_page(len(lines), record.pages)
        start = (page_number - 1) * size
        end = min(start + size, len(lines))
        return "\n".join(lines[start:end])

    def chat(self, message: str, pdf_id: Optional[str] = None) -> ChatResponse:
        """Answer a message, using the PDF's text as context when pdf_id is known."""
        record = self.store.get(pdf_id) if pdf_id else None
        if pdf_id and record is None:
            logger.info(f"Chat requested for unknown PDF {pdf_id}; answering without context")
        return self.chat_service.generate_response(message, record)
