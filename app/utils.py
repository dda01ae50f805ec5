"""
Utility functions for the PDF Chat API.
"""

import math
import time
import uuid
from typing import Dict, Any, List
from datetime import datetime, timezone
import logging

from .config import settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def generate_document_id() -> str:
    """Generate a unique document ID."""
    return str(uuid.uuid4())


def validate_mime_type(content_type: str) -> bool:
    """Validate if the uploaded content type is allowed."""
    if not content_type:
        return False
    return content_type in settings.allowed_mime_types


def max_upload_bytes() -> int:
    """Maximum accepted upload size in bytes."""
    return settings.max_file_size_mb * 1024 * 1024


def format_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def measure_time(func):
    """Decorator to measure function execution time."""
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        execution_time = end_time - start_time

        logger.info(f"{func.__name__} executed in {execution_time:.2f} seconds")
        return result
    return wrapper


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage."""
    # Remove or replace dangerous characters
    dangerous_chars = ['/', '\\', ':', '*', '?', '"', '<', '>', '|']
    sanitized = filename

    for char in dangerous_chars:
        sanitized = sanitized.replace(char, '_')

    # Limit length
    if len(sanitized) > 200:
        name, ext = sanitized.rsplit('.', 1) if '.' in sanitized else (sanitized, '')
        sanitized = name[:200-len(ext)-1] + ('.' + ext if ext else '')

    return sanitized


def split_lines(text: str) -> List[str]:
    """Split stored text into lines the same way for search, paging and chat."""
    return text.split("\n")


def estimate_page(line_index: int) -> int:
    """Rough page number of a zero-based line index."""
    return line_index // settings.lines_per_page_estimate + 1


def lines_per_page(total_lines: int, pages: int) -> int:
    """Lines in each page slice when the text is divided over the declared pages."""
    return math.ceil(total_lines / max(pages, 1))


def log_processing_info(operation: str, details: Dict[str, Any]) -> None:
    """Log processing information."""
    logger.info(f"{operation}: {details}")


def handle_processing_error(operation: str, error: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
    """Handle and log processing errors."""
    error_info = {
        'operation': operation,
        'error_type': type(error).__name__,
        'error_message': str(error),
        'timestamp': format_timestamp()
    }

    if context:
        error_info.update(context)

    logger.error(f"Processing error: {error_info}")
    return error_info
