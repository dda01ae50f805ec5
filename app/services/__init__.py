"""
Services package for the PDF Chat API.
"""

from .pdf_processor import PDFProcessor
from .chat_service import ChatService
from .document_service import DocumentService

__all__ = [
    "PDFProcessor",
    "ChatService",
    "DocumentService"
]
