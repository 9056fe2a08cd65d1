# storefront_support/response_composer.py
"""
Response Composer

Builds the reply prompt (persona + optional introduction + service rules +
optional order block + history + new turn), calls the completion backend
and splits the answer into channel-sized chunks.

Backend failures never escape: they become a single apology chunk.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from . import prompts
from .models import OrderSummary
from .session_context import Session

logger = logging.getLogger(__name__)


def split_message(text: str, limit: int) -> List[str]:
    """
    Split text into chunks of at most `limit` characters, cutting at the
    last whitespace at or before the limit. The whitespace run at each cut
    is dropped. A single word longer than the limit is cut hard.
    """
    rest = text.strip()
    if not rest:
        return []

    chunks: List[str] = []
    while len(rest) > limit:
        cut = next((i for i in range(limit, 0, -1) if rest[i].isspace()), 0)
        if cut == 0:
            chunks.append(rest[:limit])
            rest = rest[limit:]
        else:
            chunks.append(rest[:cut].rstrip())
            rest = rest[cut:].lstrip()
    if rest:
        chunks.append(rest)
    return chunks


class ResponseComposer:
    def __init__(
        self,
        completion,
        *,
        agent_name: str,
        store_name: str,
        support_email: str,
        max_turns: int = 12,
        chunk_limit: int = 300,
    ) -> None:
        self.completion = completion
        self.agent_name = agent_name
        self.store_name = store_name
        self.support_email = support_email
        self.max_turns = max_turns
        self.chunk_limit = chunk_limit

    def build_prompt(
        self,
        session: Session,
        turn_text: str,
        order_summary: Optional[OrderSummary],
        is_first_turn: bool,
    ) -> str:
        sections = [prompts.persona(self.agent_name, self.store_name, session.display_name)]
        if is_first_turn and not session.greeted:
            sections.append(
                prompts.introduction(self.agent_name, self.store_name, session.display_name)
            )
        sections.append(prompts.service_rules(self.store_name, self.support_email))
        if order_summary is not None:
            sections.append(prompts.order_block(order_summary))

        recent = session.history[-self.max_turns * 2:]
        sections.append("History:\n" + prompts.history_lines(recent, self.agent_name))
        sections.append(f'New message:\n"{turn_text}"')
        sections.append(prompts.closing(self.agent_name))
        return "\n\n".join(sections)

    async def compose(
        self,
        session: Session,
        turn_text: str,
        order_summary: Optional[OrderSummary] = None,
        is_first_turn: bool = False,
    ) -> List[str]:
        prompt = self.build_prompt(session, turn_text, order_summary, is_first_turn)
        try:
            answer = (await self.completion.complete(prompt) or "").strip()
            if not answer:
                raise ValueError("empty completion")
        except Exception:
            logger.exception("Reply generation failed for %s", session.conversation_id)
            return [prompts.COMPLETION_FALLBACK]

        session.append_exchange(turn_text, answer, self.max_turns)
        if len(answer) > self.chunk_limit:
            return split_message(answer, self.chunk_limit)
        return [answer]
