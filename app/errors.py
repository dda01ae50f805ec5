"""
Error types raised by the services and translated to HTTP responses in main.
"""

from enum import Enum


class UploadErrorKind(str, Enum):
    """Why an upload could not be accepted, decided where the failure happens."""

    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"
    FILE_MISSING = "file_missing"
    EMPTY_FILE = "empty_file"
    PERMISSION_DENIED = "permission_denied"
    FILESYSTEM = "filesystem"


_UPLOAD_ERRORS = {
    UploadErrorKind.INVALID_TYPE: (400, "Only PDF files are allowed"),
    UploadErrorKind.TOO_LARGE: (413, "PDF file is too large"),
    UploadErrorKind.FILE_MISSING: (500, "Uploaded file not found"),
    UploadErrorKind.EMPTY_FILE: (500, "PDF file is empty"),
    UploadErrorKind.PERMISSION_DENIED: (500, "Permission denied. Please check file permissions."),
    UploadErrorKind.FILESYSTEM: (500, "File system error. Please try again."),
}


class UploadError(Exception):
    """Upload rejected or unreadable."""

    def __init__(self, kind: UploadErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or self.message)

    @property
    def status_code(self) -> int:
        return _UPLOAD_ERRORS[self.kind][0]

    @property
    def message(self) -> str:
        return _UPLOAD_ERRORS[self.kind][1]


class DocumentNotFoundError(Exception):
    """No record is stored under the requested id."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"PDF not found: {document_id}")


class PDFExtractionError(Exception):
    """The parser could not read the document."""


class ChatGenerationError(Exception):
    """The completion request failed."""
