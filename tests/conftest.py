"""
Shared test fixtures
====================

Offline fakes for the three external collaborators of the agent:
the messaging channel, the completion backend and the commerce backend.
No network calls are made anywhere in the suite.
"""

# -----------------------------------------------------------------------------
# Libraries
# -----------------------------------------------------------------------------

# Standard libraries
from typing import Callable, Dict, List, Optional, Tuple

# Third-party libraries
import pytest

# Local modules
from storefront_support.agent_core import AgentCore
from storefront_support.memory_store import MemoryStore
from storefront_support.order_lookup import OrderLookup
from storefront_support.response_composer import ResponseComposer

TRACKING_TEMPLATE = "https://aquafitbrasil.com/pages/rastreamento?codigo={tracking_number}"


# -----------------------------------------------------------------------------
# Fakes
# -----------------------------------------------------------------------------

class FakeChannel:
    """Records every outbound call; optionally fails sends."""

    def __init__(self, fail_sends: bool = False):
        self.sent: List[Tuple[str, str]] = []
        self.typing: List[Tuple[str, bool]] = []
        self.fail_sends = fail_sends

    async def send_text(self, conversation_id: str, text: str) -> None:
        if self.fail_sends:
            raise RuntimeError("channel down")
        self.sent.append((conversation_id, text))

    async def set_typing(self, conversation_id: str, typing: bool) -> None:
        self.typing.append((conversation_id, typing))

    def texts(self, conversation_id: Optional[str] = None) -> List[str]:
        return [t for c, t in self.sent if conversation_id is None or c == conversation_id]


class FakeCompletion:
    """Returns `responder(prompt)`; keeps every prompt it saw."""

    def __init__(self, responder: Optional[Callable[[str], str]] = None):
        self.prompts: List[str] = []
        self.responder = responder or (lambda prompt: "Claro, posso ajudar!")

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.responder(prompt)


class FakeCommerce:
    """In-memory commerce backend keyed by order number / email / tax ID."""

    def __init__(self, orders: Optional[Dict[str, dict]] = None, error: Optional[Exception] = None):
        self.orders = orders or {}
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def find_by_order_number(self, number: str):
        self.calls.append(("order_number", number))
        if self.error:
            raise self.error
        return self.orders.get(number)

    async def find_by_email(self, email: str):
        self.calls.append(("email", email))
        if self.error:
            raise self.error
        order = self.orders.get(email)
        return [order] if order else []

    async def find_by_tax_id(self, tax_id: str):
        self.calls.append(("tax_id", tax_id))
        if self.error:
            raise self.error
        return self.orders.get(tax_id)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def shipped_order() -> dict:
    return {
        "id": 9001,
        "name": "#17545",
        "email": "maria@example.com",
        "created_at": "2025-01-10T10:00:00-03:00",
        "financial_status": "paid",
        "fulfillment_status": "fulfilled",
        "fulfillments": [
            {
                "created_at": "2025-01-11T09:00:00-03:00",
                "tracking_number": "BR123456789",
                "tracking_company": "Correios",
            }
        ],
    }


@pytest.fixture
def build_core():
    """
    Factory for a fully wired AgentCore over fakes, with millisecond
    debounce windows and no pacing delays.
    """

    def _build(
        completion: Optional[FakeCompletion] = None,
        commerce: Optional[FakeCommerce] = None,
        channel: Optional[FakeChannel] = None,
        first_window: float = 0.05,
        followup_window: float = 0.02,
        max_turns: int = 12,
        chunk_limit: int = 300,
    ) -> AgentCore:
        composer = ResponseComposer(
            completion or FakeCompletion(),
            agent_name="Fernanda",
            store_name="AquaFit Brasil",
            support_email="suporte@aquafitbrasil.com",
            max_turns=max_turns,
            chunk_limit=chunk_limit,
        )
        return AgentCore(
            memory_store=MemoryStore(),
            order_lookup=OrderLookup(commerce or FakeCommerce(), TRACKING_TEMPLATE),
            composer=composer,
            channel=channel or FakeChannel(),
            first_window=first_window,
            followup_window=followup_window,
            typing_delay=0,
            chunk_delay=0,
        )

    return _build
