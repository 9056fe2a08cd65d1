# storefront_support/config.py
"""
Runtime configuration.

Values come from the environment (optionally a local .env file) and are
exposed on a single `settings` object, e.g. `settings.OPENAI_API_KEY`.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class Settings:
    """
    Snapshot of the environment taken at construction time.
    """

    def __init__(self) -> None:
        # LLM backend
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
        self.MEDIA_MODEL = os.getenv("MEDIA_MODEL", "gpt-4o-mini")
        self.TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")

        # Commerce backend
        self.SHOPIFY_STORE_URL = os.getenv("SHOPIFY_STORE_URL", "").rstrip("/")
        self.SHOPIFY_API_TOKEN = os.getenv("SHOPIFY_API_TOKEN", "")
        self.SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-10")
        self.TRACKING_URL_TEMPLATE = os.getenv(
            "TRACKING_URL_TEMPLATE",
            "https://aquafitbrasil.com/pages/rastreamento?codigo={tracking_number}",
        )

        # Messaging channel bridge
        self.CHANNEL_BRIDGE_URL = os.getenv("CHANNEL_BRIDGE_URL", "").rstrip("/")

        # Persona
        self.AGENT_NAME = os.getenv("AGENT_NAME", "Fernanda")
        self.STORE_NAME = os.getenv("STORE_NAME", "AquaFit Brasil")
        self.SUPPORT_EMAIL = os.getenv("SUPPORT_EMAIL", "suporte@aquafitbrasil.com")

        # Conversation behaviour
        self.MAX_TURNS = _int("MAX_TURNS", 12)
        self.FIRST_TURN_WINDOW_SECONDS = _float("FIRST_TURN_WINDOW_SECONDS", 25.0)
        self.FOLLOWUP_WINDOW_SECONDS = _float("FOLLOWUP_WINDOW_SECONDS", 10.0)
        self.TYPING_DELAY_SECONDS = _float("TYPING_DELAY_SECONDS", 1.5)
        self.CHUNK_DELAY_SECONDS = _float("CHUNK_DELAY_SECONDS", 1.0)
        self.REPLY_CHUNK_LIMIT = _int("REPLY_CHUNK_LIMIT", 300)

        # Session reaping
        self.SESSION_IDLE_MINUTES = _float("SESSION_IDLE_MINUTES", 25.0)
        self.SWEEP_INTERVAL_MINUTES = _float("SWEEP_INTERVAL_MINUTES", 10.0)

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
