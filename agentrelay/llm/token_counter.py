"""
Token counting backed by tiktoken.

The encoder is resolved on first use.  Models tiktoken does not know fall
back to the ``cl100k_base`` encoding.
"""

from __future__ import annotations

import logging
from typing import Any

import tiktoken

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "cl100k_base"


class TokenCounter:
    """
    Count tokens in text the way the target model's tokenizer would.

    Parameters
    ----------
    model:
        Model name passed to ``tiktoken.encoding_for_model``.
    """

    def __init__(self, model: str | None = None) -> None:
        self.model = model or "gpt-4"
        self._encoding: Any = None

    @property
    def encoding(self) -> Any:
        if self._encoding is None:
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                logger.debug("No tiktoken mapping for %s, using %s", self.model, FALLBACK_ENCODING)
                self._encoding = tiktoken.get_encoding(FALLBACK_ENCODING)
        return self._encoding

    def count_text(self, text: str) -> int:
        """Return the token count for a plain string."""
        if not text:
            return 0
        return len(self.encoding.encode(text))
