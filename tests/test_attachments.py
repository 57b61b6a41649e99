"""Tests for attachment preprocessing (PDF text, image parts) and token counting."""

from __future__ import annotations

import io

import httpx
import pytest
import tiktoken
from pypdf import PdfWriter

from agentrelay import attachments
from agentrelay.attachments import AttachmentProcessor
from agentrelay.errors import PreprocessingError
from agentrelay.llm.token_counter import TokenCounter
from agentrelay.types import ChatRequest


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def _transport(status: int = 200, content: bytes = b"") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=content)

    return httpx.MockTransport(handler)


def _messages(text: str = "summarize this") -> list[dict]:
    return [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": text},
    ]


def _request(**kw) -> ChatRequest:
    return ChatRequest(thread_id="t", message="summarize this", **kw)


class TestFetchPdfText:
    async def test_blank_pdf_extracts_empty_text(self):
        proc = AttachmentProcessor(transport=_transport(content=_blank_pdf()))
        assert await proc.fetch_pdf_text("https://files.example/doc.pdf") == ""

    async def test_http_error_raises_preprocessing_error(self):
        proc = AttachmentProcessor(transport=_transport(status=404))
        with pytest.raises(PreprocessingError, match="download failed"):
            await proc.fetch_pdf_text("https://files.example/missing.pdf")

    async def test_garbage_bytes_raise_preprocessing_error(self):
        proc = AttachmentProcessor(transport=_transport(content=b"definitely not a pdf"))
        with pytest.raises(PreprocessingError, match="extraction failed"):
            await proc.fetch_pdf_text("https://files.example/bad.pdf")

    async def test_any_reader_error_becomes_preprocessing_error(self, monkeypatch):
        def broken_reader(stream):
            raise KeyError("/Root")

        monkeypatch.setattr(attachments, "PdfReader", broken_reader)
        proc = AttachmentProcessor(transport=_transport(content=b"%PDF-1.7 truncated"))
        with pytest.raises(PreprocessingError, match="extraction failed"):
            await proc.fetch_pdf_text("https://files.example/odd.pdf")


class TestApply:
    async def test_pdf_text_appended_to_user_turn(self, monkeypatch):
        proc = AttachmentProcessor()

        async def fake_fetch(url: str) -> str:
            assert url == "https://files.example/doc.pdf"
            return "Quarterly revenue grew."

        monkeypatch.setattr(proc, "fetch_pdf_text", fake_fetch)
        monkeypatch.setattr(proc._counter, "count_text", lambda text: len(text.split()))
        messages = await proc.apply(
            _request(file_type="pdf", file_url="https://files.example/doc.pdf"), _messages()
        )
        assert messages[-1]["content"] == (
            "summarize this\n\nPDF Content:\nQuarterly revenue grew."
        )
        assert messages[0]["content"] == "sys"

    async def test_token_count_failure_keeps_pdf_text(self, monkeypatch):
        proc = AttachmentProcessor()

        async def fake_fetch(url: str) -> str:
            return "Quarterly revenue grew."

        def no_encoder(text: str) -> int:
            raise OSError("tiktoken data unavailable")

        monkeypatch.setattr(proc, "fetch_pdf_text", fake_fetch)
        monkeypatch.setattr(proc._counter, "count_text", no_encoder)

        messages = await proc.apply(
            _request(file_type="pdf", file_url="https://files.example/doc.pdf"), _messages()
        )
        assert messages[-1]["content"] == (
            "summarize this\n\nPDF Content:\nQuarterly revenue grew."
        )

    async def test_unexpected_fetch_error_leaves_messages_unchanged(self, monkeypatch):
        proc = AttachmentProcessor()

        async def broken_fetch(url: str) -> str:
            raise RuntimeError("socket closed")

        monkeypatch.setattr(proc, "fetch_pdf_text", broken_fetch)
        messages = await proc.apply(
            _request(file_type="pdf", file_url="https://files.example/doc.pdf"), _messages()
        )
        assert messages == _messages()

    async def test_pdf_failure_leaves_messages_unchanged(self):
        proc = AttachmentProcessor(transport=_transport(status=500))
        messages = await proc.apply(
            _request(file_type="pdf", file_url="https://files.example/doc.pdf"), _messages()
        )
        assert messages == _messages()

    async def test_image_becomes_content_parts(self):
        proc = AttachmentProcessor()
        messages = await proc.apply(
            _request(file_type="image", file_url="https://files.example/cat.png"), _messages()
        )
        assert messages[-1]["content"] == [
            {"type": "text", "text": "summarize this"},
            {"type": "image_url", "image_url": {"url": "https://files.example/cat.png"}},
        ]

    async def test_no_url_is_noop(self):
        proc = AttachmentProcessor()
        messages = await proc.apply(_request(file_type="pdf"), _messages())
        assert messages == _messages()

    async def test_unknown_file_type_is_noop(self):
        proc = AttachmentProcessor()
        messages = await proc.apply(
            _request(file_type="spreadsheet", file_url="https://files.example/a.xlsx"),
            _messages(),
        )
        assert messages == _messages()

    async def test_last_message_not_user_is_noop(self):
        proc = AttachmentProcessor()
        messages = [{"role": "system", "content": "sys"}]
        result = await proc.apply(
            _request(file_type="image", file_url="https://files.example/cat.png"), messages
        )
        assert result == [{"role": "system", "content": "sys"}]


class FakeEncoding:
    def encode(self, text):
        return text.split()


class TestTokenCounter:
    def test_encoder_resolved_lazily(self):
        counter = TokenCounter("gpt-4")
        assert counter._encoding is None
        assert counter.count_text("") == 0
        assert counter._encoding is None

    def test_unknown_model_uses_fallback_encoding(self, monkeypatch):
        requested = []

        def unknown_model(name):
            raise KeyError(name)

        def get_encoding(name):
            requested.append(name)
            return FakeEncoding()

        monkeypatch.setattr(tiktoken, "encoding_for_model", unknown_model)
        monkeypatch.setattr(tiktoken, "get_encoding", get_encoding)

        assert TokenCounter("house-model").count_text("three small words") == 3
        assert requested == ["cl100k_base"]
