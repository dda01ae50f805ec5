"""
PDF processing service for extracting text from PDF files.
"""

import PyPDF2
from io import BytesIO
from typing import List, Tuple

from ..errors import PDFExtractionError
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Service for processing PDF files and extracting text."""

    @measure_time
    def extract_text(self, file_content: bytes, filename: str) -> Tuple[str, int]:
        """
        Extract text from PDF file content.

        Args:
            file_content: PDF file content as bytes
            filename: Name of the PDF file

        Returns:
            Tuple of (text, page count). Pages are separated by a blank line.

        Raises:
            PDFExtractionError: If the document cannot be read at all
        """
        try:
            pdf_reader = PyPDF2.PdfReader(BytesIO(file_content))
            total_pages = len(pdf_reader.pages)
        except Exception as e:
            error_info = handle_processing_error(
                "pdf_extraction",
                e,
                {"filename": filename, "file_size": len(file_content)}
            )
            raise PDFExtractionError(f"Failed to read PDF {filename}: {error_info['error_message']}") from e

        log_processing_info("PDF extraction started", {
            "filename": filename,
            "total_pages": total_pages,
            "file_size": len(file_content)
        })

        page_texts: List[str] = []
        for page_num, page in enumerate(pdf_reader.pages):
            try:
                page_texts.append(page.extract_text() or "")
            except Exception as page_error:
                error_info = handle_processing_error(
                    "page_extraction",
                    page_error,
                    {"filename": filename, "page": page_num + 1}
                )
                logger.warning(f"Skipping page {page_num + 1}: {error_info}")
                continue

        text = "\n\n".join(page_texts)
        if not text.strip():
            logger.warning(f"PDF {filename} contains no extractable text")

        log_processing_info("PDF extraction completed", {
            "filename": filename,
            "total_pages": total_pages,
            "text_length": len(text)
        })

        return text, total_pages or 1
