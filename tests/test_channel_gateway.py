"""
Channel Gateway Tests
=====================

Purpose
-------
Validates the outbound bridge calls (send / typing) and that failures are
reported as ChannelSendError. Also checks that plain-text events pass
through the media interpreter untouched.
"""

# -----------------------------------------------------------------------------
# Libraries
# -----------------------------------------------------------------------------

# Standard libraries
import asyncio
import json

# Third-party libraries
import httpx
import pytest

# Local modules
from storefront_support.channel_gateway import ChannelSendError, HttpChannelGateway
from storefront_support.media_interpreter import MediaInterpreter
from storefront_support.models import InboundMessage


# ----------------------------
# Unit Test: Bridge Calls
# ----------------------------
def test_send_and_typing_payloads():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"ok": True})

    gateway = HttpChannelGateway("http://bridge.local/", transport=httpx.MockTransport(handler))

    async def scenario():
        await gateway.set_typing("chat-1", True)
        await gateway.send_text("chat-1", "Olá!")

    asyncio.run(scenario())
    assert seen == [
        ("/typing", {"conversation_id": "chat-1", "typing": True}),
        ("/send", {"conversation_id": "chat-1", "text": "Olá!"}),
    ]


def test_error_status_raises_channel_send_error():
    gateway = HttpChannelGateway(
        "http://bridge.local", transport=httpx.MockTransport(lambda request: httpx.Response(503))
    )
    with pytest.raises(ChannelSendError):
        asyncio.run(gateway.send_text("chat-1", "Olá!"))


def test_unconfigured_bridge_raises():
    with pytest.raises(ChannelSendError):
        asyncio.run(HttpChannelGateway("").send_text("chat-1", "Olá!"))


# ----------------------------
# Unit Test: Media Interpreter
# ----------------------------
def test_text_events_pass_through_media_interpreter():
    interpreter = MediaInterpreter(
        "",
        image_model="gpt-4o-mini",
        transcription_model="whisper-1",
        agent_name="Fernanda",
        store_name="AquaFit Brasil",
    )
    event = InboundMessage(conversation_id="chat-1", body_text="  Oi  ", media_type="chat")

    assert interpreter.handles(event) is False
    assert asyncio.run(interpreter.to_text(event)) == "Oi"
    assert interpreter.handles(InboundMessage(conversation_id="chat-1", media_type="ptt")) is True
    audio_without_data = InboundMessage(conversation_id="chat-1", media_type="audio")
    assert asyncio.run(interpreter.to_text(audio_without_data)) == ""
