"""
Attachment preprocessing for incoming chat requests.

PDFs are downloaded and their text is appended to the current user turn.
Images are passed to the model by URL as a vision content part.  Failures
never abort the request: the message list is simply left as it was.
"""

from __future__ import annotations

import io
import logging

import httpx
from pypdf import PdfReader

from agentrelay.config import DocumentsConfig
from agentrelay.errors import PreprocessingError
from agentrelay.llm.token_counter import TokenCounter
from agentrelay.types import ChatRequest

logger = logging.getLogger(__name__)

FILE_TYPE_PDF = "pdf"
FILE_TYPE_IMAGE = "image"


class AttachmentProcessor:
    """
    Parameters
    ----------
    config:
        Download timeout and token-counting model.
    transport:
        Optional ``httpx`` transport; tests pass ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: DocumentsConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or DocumentsConfig()
        self._transport = transport
        self._counter = TokenCounter(self.config.token_model)

    async def apply(self, request: ChatRequest, messages: list[dict]) -> list[dict]:
        """Enrich the last user message of *messages* in place and return it."""
        if not request.file_url or not messages or messages[-1].get("role") != "user":
            return messages

        if request.file_type == FILE_TYPE_PDF:
            logger.info("PDF detected: %s", request.file_url)
            try:
                text = await self.fetch_pdf_text(request.file_url)
            except Exception:
                logger.exception("Error processing PDF: %s", request.file_url)
                return messages
            messages[-1]["content"] = f"{request.message}\n\nPDF Content:\n{text}"
            try:
                tokens = self._counter.count_text(text)
            except Exception as e:
                logger.warning("PDF content added to request; token count unavailable: %s", e)
            else:
                logger.info("PDF content added to request. Total tokens: %d", tokens)

        elif request.file_type == FILE_TYPE_IMAGE:
            logger.info("Image detected: %s", request.file_url)
            messages[-1]["content"] = [
                {"type": "text", "text": messages[-1]["content"]},
                {"type": "image_url", "image_url": {"url": request.file_url}},
            ]

        return messages

    async def fetch_pdf_text(self, url: str) -> str:
        """Download *url* and return the extracted text of every page."""
        try:
            async with httpx.AsyncClient(
                timeout=float(self.config.download_timeout_seconds),
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise PreprocessingError(f"download failed: {e}") from e

        try:
            reader = PdfReader(io.BytesIO(response.content))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise PreprocessingError(f"text extraction failed: {e}") from e

        text = "\n".join(pages)
        logger.info("PDF text extracted. Length: %d characters", len(text))
        return text
