"""
Chat service for generating responses using LLM.
"""

from typing import List, Optional, Tuple
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from ..config import settings
from ..errors import ChatGenerationError
from ..models import PDFRecord, Citation, ChatResponse
from ..utils import (
    measure_time,
    split_lines,
    estimate_page,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are a helpful AI assistant that answers questions about PDF documents. "
    "Provide concise, accurate answers and cite specific pages when referencing content from the PDF. "
    "If text extraction failed for a PDF, inform the user that you cannot answer questions about "
    "that specific document's content."
)

EXTRACTION_FAILED_CONTEXT = (
    "I'm sorry, but I couldn't extract text from this PDF file. This might be because the PDF is "
    "password-protected, corrupted, or contains only images. You can still view the PDF, but I "
    "won't be able to answer questions about its content."
)


class ChatService:
    """Service for generating chat responses using LLM."""

    def __init__(self, llm: Optional[BaseChatModel] = None):
        """Initialize the chat service. The model is created on first use unless given."""
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self._initialize_llm()
        return self._llm

    def _initialize_llm(self) -> ChatGoogleGenerativeAI:
        """Initialize the language model."""
        try:
            llm = ChatGoogleGenerativeAI(
                model=settings.google_chat_model,
                api_key=settings.google_api_key,
                temperature=settings.google_temperature,
                max_output_tokens=settings.google_max_tokens
            )

            log_processing_info("LLM initialized", {
                "model": settings.google_chat_model,
                "temperature": settings.google_temperature
            })

            return llm

        except Exception as e:
            error_info = handle_processing_error("llm_init", e)
            raise ChatGenerationError(f"Failed to initialize LLM: {error_info['error_message']}") from e

    def build_context(self, message: str, record: Optional[PDFRecord]) -> Tuple[str, List[Citation], bool]:
        """
        Select the document lines to send along with the question.

        Args:
            message: User's question, matched as a case-insensitive substring
            record: Stored PDF, or None when the chat is not about a document

        Returns:
            Tuple of (context, citations, extraction_failed)
        """
        if record is None:
            return "", [], False

        if not record.text or record.extraction_failed:
            return EXTRACTION_FAILED_CONTEXT, [], True

        needle = message.lower()
        matches = [
            (index, line)
            for index, line in enumerate(split_lines(record.text))
            if needle in line.lower()
        ][:settings.chat_context_lines]

        context = "\n".join(line for _, line in matches)
        citations = [
            Citation(
                page=estimate_page(index),
                text=line.strip(),
                confidence=settings.citation_confidence
            )
            for index, line in matches
        ]
        return context, citations, False

    def _create_prompt(self, message: str, context: str, extraction_failed: bool) -> str:
        prompt = "You are a helpful AI assistant. "

        if extraction_failed:
            prompt += (
                "The user is asking about a PDF document, but text extraction failed for this PDF. "
                "Please inform them that you cannot answer questions about the content of this specific "
                f"PDF, but they can still view the document.\n\nContext:\n{context}\n\nUser question: {message}"
            )
        elif context:
            prompt += (
                "Based on the following context from a PDF document, please answer the user's question. "
                f"If the information is not in the context, say so.\n\nContext:\n{context}\n\nUser question: {message}"
            )
        else:
            prompt += f"Please answer the following question: {message}"

        return prompt

    @staticmethod
    def _token_usage(response) -> int:
        usage = getattr(response, "usage_metadata", None) or {}
        return int(usage.get("total_tokens", 0) or 0)

    @measure_time
    def generate_response(self, message: str, record: Optional[PDFRecord] = None) -> ChatResponse:
        """
        Generate a response to the user's message.

        Args:
            message: User's question
            record: Optional PDF whose text is used as context

        Returns:
            ChatResponse with the answer, citations and token usage
        """
        context, citations, extraction_failed = self.build_context(message, record)
        prompt = self._create_prompt(message, context, extraction_failed)

        try:
            response = self.llm.invoke([
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=prompt),
            ])
        except ChatGenerationError:
            raise
        except Exception as e:
            error_info = handle_processing_error(
                "response_generation",
                e,
                {
                    "message_length": len(message),
                    "pdf_id": record.id if record else None
                }
            )
            raise ChatGenerationError(f"Failed to generate response: {error_info['error_message']}") from e

        answer = response.content if isinstance(response.content, str) else str(response.content)
        token_usage = self._token_usage(response)

        log_processing_info("Response generated", {
            "message_length": len(message),
            "context_length": len(context),
            "answer_length": len(answer),
            "citations_count": len(citations),
            "token_usage": token_usage
        })

        return ChatResponse(message=answer, citations=citations, token_usage=token_usage)
