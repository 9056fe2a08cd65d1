# storefront_support/identifier_extractor.py
"""
Identifier Extractor

Pulls at most one order-lookup key out of free text, by fixed priority:

1. order number : any standalone 3-8 digit token
2. email        : any token containing '@'
3. tax ID       : a CNPJ-shaped (14 digits) or CPF-shaped (11 digits) sequence,
                  with optional . / - separators

The order-number rule is a plain length heuristic and will also match
quantities or parts of phone numbers; deciding whether a number really is
an order number is left to the commerce lookup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional

IdentifierKind = Literal["order_number", "email", "tax_id"]

ORDER_NUMBER_RE = re.compile(r"\b(\d{3,8})\b")
EMAIL_RE = re.compile(r"[^\s]+@[^\s]+")
CNPJ_RE = re.compile(r"\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}")
CPF_RE = re.compile(r"\d{3}\.?\d{3}\.?\d{3}-?\d{2}")

_EMAIL_TRAILING = ".,;:!?)\"'"


@dataclass(frozen=True)
class IdentifierCandidate:
    kind: IdentifierKind
    value: str


def only_digits(text: str) -> str:
    return re.sub(r"\D+", "", text or "")


def extract_identifier(text: str) -> Optional[IdentifierCandidate]:
    if not text:
        return None

    match = ORDER_NUMBER_RE.search(text)
    if match:
        return IdentifierCandidate(kind="order_number", value=match.group(1))

    match = EMAIL_RE.search(text)
    if match:
        return IdentifierCandidate(kind="email", value=match.group(0).rstrip(_EMAIL_TRAILING))

    for pattern in (CNPJ_RE, CPF_RE):
        match = pattern.search(text)
        if match:
            return IdentifierCandidate(kind="tax_id", value=only_digits(match.group(0)))

    return None
