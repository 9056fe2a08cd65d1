# storefront_support/media_interpreter.py
"""
Media Interpreter

Turns non-text inbound messages into plain text before they are buffered:
- audio / ptt -> transcription
- image       -> one short, polite description
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

from openai import AsyncOpenAI

from .models import InboundMessage

logger = logging.getLogger(__name__)

AUDIO_TYPES = {"audio", "ptt"}
IMAGE_TYPES = {"image"}

IMAGE_PROMPT = """
You are {agent_name}, a support attendant at {store_name}.
Briefly and politely describe what appears in this image.
If it is a product photo, say whether it looks like an item from the store.
Do not make anything up. Answer with one natural sentence in Brazilian Portuguese.
""".strip()


class MediaInterpreter:
    def __init__(
        self,
        api_key: str,
        *,
        image_model: str,
        transcription_model: str,
        agent_name: str,
        store_name: str,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.api_key = api_key
        self.image_model = image_model
        self.transcription_model = transcription_model
        self.image_prompt = IMAGE_PROMPT.format(agent_name=agent_name, store_name=store_name)
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key or None)
        return self._client

    def handles(self, event: InboundMessage) -> bool:
        return (event.media_type or "") in AUDIO_TYPES | IMAGE_TYPES

    async def to_text(self, event: InboundMessage) -> str:
        """
        Text for this event: the interpreted media when there is any,
        otherwise the message body.
        """
        if not self.handles(event):
            return (event.body_text or "").strip()
        if not event.media_data:
            return ""

        if event.media_type in AUDIO_TYPES:
            text = await self._transcribe(event)
        else:
            text = await self._describe(event)
        logger.info("Interpreted %s from %s: %s", event.media_type, event.conversation_id, text)
        return text.strip()

    async def _transcribe(self, event: InboundMessage) -> str:
        audio = base64.b64decode(event.media_data)
        result = await self.client.audio.transcriptions.create(
            model=self.transcription_model,
            file=("audio.ogg", audio, event.media_mime or "audio/ogg"),
        )
        return result.text or ""

    async def _describe(self, event: InboundMessage) -> str:
        mime = event.media_mime or "image/jpeg"
        resp = await self.client.responses.create(
            model=self.image_model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": self.image_prompt},
                        {
                            "type": "input_image",
                            "image_url": f"data:{mime};base64,{event.media_data}",
                        },
                    ],
                }
            ],
        )
        return getattr(resp, "output_text", None) or ""

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
