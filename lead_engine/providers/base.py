"""Interfaces shared by search model and contact lookup providers."""
from __future__ import annotations

from typing import Optional, Protocol

from ..models import LookupContacts, SearchResponse


class SearchModel(Protocol):
    """A text-completion service that can ground its answers in web search."""

    name: str

    async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:  # pragma: no cover - runtime protocol
        """Return the completion text and any citations for ``prompt``."""


class ContactLookup(Protocol):
    """A third-party service returning raw emails and phones for a person."""

    async def lookup(self, name: str, role: Optional[str], company: Optional[str]) -> Optional[LookupContacts]:  # pragma: no cover - runtime protocol
        """Return the contacts found for the person, or ``None`` when nothing was found."""
