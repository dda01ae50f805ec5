"""
PDF Chat API

Upload PDF documents, read back their text, search them and ask an AI
assistant questions about them.

Features:
- PDF upload with text extraction (uploads survive extraction failures)
- Line search and approximate page views over extracted text
- Google Gemini chat with document lines as context
- In-memory document store
"""

__version__ = "1.0.0"
__description__ = "A RESTful API for uploading, processing, and chatting with PDF documents using AI"
