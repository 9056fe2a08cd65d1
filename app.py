# app.py
"""
FastAPI entrypoint for the storefront support agent.

Exposes:
- POST /inbound                      → inbound message events from the channel bridge
- GET  /sessions/{conversation_id}   → debug snapshot of one conversation
- GET  /health                       → simple health check

Designed to be:
- Railway-friendly (Procfile: web: uvicorn app:app --host 0.0.0.0 --port $PORT)
- Single process; conversation state lives in MemoryStore and is lost on restart
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from storefront_support.agent_core import AgentCore
from storefront_support.channel_gateway import HttpChannelGateway
from storefront_support.commerce_gateway import ShopifyGateway
from storefront_support.config import settings
from storefront_support.llm_client import OpenAICompletionClient
from storefront_support.media_interpreter import MediaInterpreter
from storefront_support.memory_store import MemoryStore
from storefront_support.models import InboundAck, InboundMessage, SessionSnapshot
from storefront_support.order_lookup import OrderLookup
from storefront_support.response_composer import ResponseComposer

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("storefront_support")

# ---------------------------------------------------------------------------
# Dependencies wiring
# ---------------------------------------------------------------------------

# Shared in-process singletons
memory_store = MemoryStore()
shopify_gateway = ShopifyGateway(
    settings.SHOPIFY_STORE_URL,
    settings.SHOPIFY_API_TOKEN,
    settings.SHOPIFY_API_VERSION,
)
order_lookup = OrderLookup(shopify_gateway, settings.TRACKING_URL_TEMPLATE)
completion_client = OpenAICompletionClient(settings.OPENAI_API_KEY, settings.LLM_MODEL)
composer = ResponseComposer(
    completion_client,
    agent_name=settings.AGENT_NAME,
    store_name=settings.STORE_NAME,
    support_email=settings.SUPPORT_EMAIL,
    max_turns=settings.MAX_TURNS,
    chunk_limit=settings.REPLY_CHUNK_LIMIT,
)
channel_gateway = HttpChannelGateway(settings.CHANNEL_BRIDGE_URL)
media_interpreter = MediaInterpreter(
    settings.OPENAI_API_KEY,
    image_model=settings.MEDIA_MODEL,
    transcription_model=settings.TRANSCRIPTION_MODEL,
    agent_name=settings.AGENT_NAME,
    store_name=settings.STORE_NAME,
)

agent_core = AgentCore(
    memory_store=memory_store,
    order_lookup=order_lookup,
    composer=composer,
    channel=channel_gateway,
    media_interpreter=media_interpreter,
    first_window=settings.FIRST_TURN_WINDOW_SECONDS,
    followup_window=settings.FOLLOWUP_WINDOW_SECONDS,
    typing_delay=settings.TYPING_DELAY_SECONDS,
    chunk_delay=settings.CHUNK_DELAY_SECONDS,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    memory_store.start_reaper(settings.SWEEP_INTERVAL_MINUTES, settings.SESSION_IDLE_MINUTES)
    logger.info("Support agent ready (model=%s)", settings.LLM_MODEL)
    try:
        yield
    finally:
        await memory_store.stop_reaper()
        await agent_core.shutdown()
        await shopify_gateway.aclose()
        await channel_gateway.aclose()
        await completion_client.aclose()
        await media_interpreter.aclose()


app = FastAPI(title="Storefront Support Agent", version="1.0.0", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """
    Simple health endpoint for uptime checks.
    """
    return {"status": "ok", "service": "storefront_support"}


@app.post("/inbound", response_model=InboundAck)
async def inbound(event: InboundMessage) -> InboundAck:
    """
    The channel bridge posts every received message here:
    {
      "conversation_id": "5511999999999@c.us",
      "sender_display_name": "Maria Silva",
      "body_text": "Oi, cadê meu pedido 17545?"
    }
    """
    return await agent_core.handle_inbound(event)


@app.get("/sessions/{conversation_id}", response_model=SessionSnapshot)
async def get_session(conversation_id: str) -> SessionSnapshot:
    session = memory_store.get(conversation_id)
    if session is None:
        raise HTTPException(status_code=404, detail="unknown conversation")
    return SessionSnapshot.from_session(session)


# For local dev convenience:
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )
