# storefront_support/llm_client.py
"""
LLM Client

Single-shot text completion over the OpenAI Responses API.

We keep this layer separate so you can:
- Swap models
- Unit-test the reply pipeline with a fake backend
"""

from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """The completion backend failed or produced no text."""


class OpenAICompletionClient:
    """
    complete(prompt) -> text. Raises CompletionError on any backend error
    and on empty output.
    """

    def __init__(self, api_key: str, model: str, client: Optional[AsyncOpenAI] = None) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so the app can start without credentials.
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key or None)
        return self._client

    async def complete(self, prompt: str) -> str:
        try:
            resp = await self.client.responses.create(model=self.model, input=prompt)
        except Exception as exc:
            raise CompletionError(f"completion request failed: {exc}") from exc

        text = (getattr(resp, "output_text", None) or "").strip()
        if not text:
            raise CompletionError("completion returned empty text")
        return text

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
