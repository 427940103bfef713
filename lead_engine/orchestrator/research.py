"""Company research orchestrator."""
from __future__ import annotations

import logging
from typing import Any, List

from ..errors import ResearchFailed
from ..models import GroundingChunk, ResearchResult, clean_field
from ..normalise import normalise_contacts
from ..parsing import extract_json
from ..prompts import research_prompt
from ..providers.base import SearchModel

LOGGER = logging.getLogger(__name__)

DEFAULT_OVERVIEW = "No overview provided."


class ResearchOrchestrator:
    """Asks the search model about a company and assembles overview, leads and sources."""

    def __init__(self, model: SearchModel, *, prefer_fenced: bool = False) -> None:
        self._model = model
        self._prefer_fenced = prefer_fenced

    async def research(self, company: str, location: str = "") -> ResearchResult:
        """Run one research pass.

        Raises :class:`ResearchFailed` for transport and parse errors; nothing
        is returned unless every step succeeded.
        """

        company = (company or "").strip()
        if not company:
            raise ValueError("Please enter a company name or website.")

        prompt = research_prompt(company, location)
        LOGGER.info("Researching company %r (location=%r)", company, location or "")
        try:
            response = await self._model.generate(prompt, grounded=True)
            payload = extract_json(response.text, prefer_fenced=self._prefer_fenced)
        except Exception as exc:
            LOGGER.exception("Research failed for company %r", company)
            raise ResearchFailed(f"Research for '{company}' failed: {exc}") from exc

        leads = normalise_contacts(_contact_records(payload))
        overview = clean_field(payload.get("overview")) or DEFAULT_OVERVIEW
        sources: List[GroundingChunk] = list(response.sources or [])
        LOGGER.info("Research for %r produced %s leads and %s sources", company, len(leads), len(sources))
        return ResearchResult(overview=overview, leads=tuple(leads), sources=tuple(sources))


def _contact_records(payload: dict) -> List[Any]:
    contacts = payload.get("contacts")
    if isinstance(contacts, list):
        return contacts
    if contacts is not None:
        LOGGER.warning("Ignoring non-list 'contacts' field of type %s", type(contacts).__name__)
    return []
