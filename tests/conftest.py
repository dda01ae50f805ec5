import os
from typing import List

import pytest

# Settings are read at import time and main refuses to start without a key
os.environ.setdefault("GOOGLE_API_KEY", "test-key")

from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from app.main import app, get_document_service
from app.services import ChatService, DocumentService
from app.store import PDFStore


class FakeChatModel:
    """Stands in for the Gemini chat model; records what it was sent."""

    def __init__(self, answer: str = "Here is what the document says.", total_tokens: int = 42, error: Exception = None):
        self.answer = answer
        self.total_tokens = total_tokens
        self.error = error
        self.calls = []

    def invoke(self, messages, **kwargs):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(
            content=self.answer,
            usage_metadata={
                "input_tokens": self.total_tokens - 10,
                "output_tokens": 10,
                "total_tokens": self.total_tokens,
            },
        )

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][-1].content


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: List[List[str]]) -> bytes:
    """Minimal PDF with one text line per entry, Helvetica, one content stream per page."""
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        2: f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    for pid, lines in zip(page_ids, pages):
        ops = ["BT", "/F1 12 Tf", "72 720 Td"]
        for i, line in enumerate(lines):
            if i:
                ops.append("0 -14 Td")
            ops.append(f"({_escape(line)}) Tj")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        objects[pid] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>"
        ).encode()
        objects[pid + 1] = b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for num in sorted(objects):
        offsets[num] = len(out)
        out += f"{num} 0 obj\n".encode() + objects[num] + b"\nendobj\n"

    xref_at = len(out)
    size = max(objects) + 1
    out += f"xref\n0 {size}\n".encode()
    out += b"0000000000 65535 f \n"
    for num in range(1, size):
        out += f"{offsets[num]:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {size} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def sample_pdf() -> bytes:
    return build_pdf([
        ["Quarterly revenue grew by ten percent", "Operating costs were flat"],
        ["Outlook for next year remains positive"],
    ])


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def service(upload_dir, fake_llm) -> DocumentService:
    return DocumentService(
        store=PDFStore(),
        upload_dir=str(upload_dir),
        chat_service=ChatService(llm=fake_llm),
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_document_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
