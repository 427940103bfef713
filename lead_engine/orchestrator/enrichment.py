"""Per-contact enrichment orchestrator."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Iterable, List, Optional

from ..errors import EnrichmentFailed
from ..models import Confidence, EnrichedContactInfo, EnrichedData, LookupContacts, clean_field
from ..parsing import extract_json
from ..prompts import enrichment_prompt
from ..providers.base import ContactLookup, SearchModel
from ..reconcile import EMAIL, PHONE, merge_contact_values

LOGGER = logging.getLogger(__name__)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def coerce_enriched_data(payload: Any, lookup: Optional[LookupContacts] = None) -> EnrichedData:
    """Turn a parsed enrichment payload into :class:`EnrichedData` with safe defaults.

    Lookup service values count as directly observed and join the model's
    values at ``high`` confidence before reconciliation.
    """

    if not isinstance(payload, dict):
        payload = {}

    email_candidates: List[Any] = _as_list(payload.get("emails"))
    phone_candidates: List[Any] = _as_list(payload.get("phones"))
    if lookup is not None:
        email_candidates = _observed(lookup.emails) + email_candidates
        phone_candidates = _observed(lookup.phones) + phone_candidates

    summary = payload.get("summary")
    return EnrichedData(
        summary=summary.strip() if isinstance(summary, str) else "",
        linkedin_url=clean_field(payload.get("linkedinUrl")),
        emails=tuple(merge_contact_values(email_candidates, EMAIL)),
        phones=tuple(merge_contact_values(phone_candidates, PHONE)),
    )


def _observed(values: Iterable[str]) -> List[EnrichedContactInfo]:
    return [EnrichedContactInfo(value=value, confidence=Confidence.HIGH) for value in values]


async def _gather_or_cancel(*calls: Awaitable[Any]) -> List[Any]:
    """Await ``calls`` concurrently; the first failure cancels the rest."""

    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class EnrichmentOrchestrator:
    """Runs the enrichment search for one contact and reconciles the results."""

    def __init__(
        self,
        model: SearchModel,
        *,
        lookup: Optional[ContactLookup] = None,
        prefer_fenced: bool = False,
    ) -> None:
        self._model = model
        self._lookup = lookup
        self._prefer_fenced = prefer_fenced

    async def enrich(self, name: str, role: Optional[str], company: str) -> EnrichedData:
        if not name:
            raise EnrichmentFailed("A contact name is required for enrichment.")

        prompt = enrichment_prompt(name, role or "", company)
        LOGGER.info("Enriching contact %r at %r", name, company)
        try:
            if self._lookup is None:
                response = await self._model.generate(prompt, grounded=True)
                lookup_contacts = None
            else:
                response, lookup_contacts = await _gather_or_cancel(
                    self._model.generate(prompt, grounded=True),
                    self._lookup.lookup(name, role, company),
                )
            payload = extract_json(response.text, prefer_fenced=self._prefer_fenced)
        except EnrichmentFailed:
            raise
        except Exception as exc:
            LOGGER.exception("Enrichment failed for contact %r", name)
            raise EnrichmentFailed(str(exc) or exc.__class__.__name__) from exc

        data = coerce_enriched_data(payload, lookup_contacts)
        LOGGER.info(
            "Enrichment for %r produced %s emails and %s phones",
            name,
            len(data.emails),
            len(data.phones),
        )
        return data
