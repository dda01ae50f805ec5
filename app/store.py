"""
In-memory storage for uploaded PDF records.

Records live for the lifetime of the process; restart loses them. Swap
PDFStore for a durable key-value store behind the same methods if that
ever matters.
"""

from typing import Dict, Optional

from .models import PDFRecord


class PDFStore:
    """Process-wide mapping of document id to record."""

    def __init__(self):
        self._records: Dict[str, PDFRecord] = {}

    def save(self, record: PDFRecord) -> PDFRecord:
        self._records[record.id] = record
        return record

    def get(self, document_id: str) -> Optional[PDFRecord]:
        return self._records.get(document_id)

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._records

    def __len__(self) -> int:
        return len(self._records)
