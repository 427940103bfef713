"""Tests for :class:`lead_engine.orchestrator.EnrichmentOrchestrator`."""
from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import httpx
import pytest

from lead_engine.errors import EnrichmentFailed, LookupServiceError
from lead_engine.models import Confidence, EnrichedContactInfo, EnrichedData, LookupContacts, SearchResponse
from lead_engine.orchestrator import EnrichmentOrchestrator, coerce_enriched_data
from lead_engine.providers.sample import StaticSearchModel

ENRICHMENT_RESPONSE = json.dumps(
    {
        "summary": "Jane runs the national fleet programme.",
        "linkedinUrl": "https://www.linkedin.com/in/janedoe",
        "emails": [
            {"value": "j.doe@walmart.com", "confidence": "medium"},
            {"value": "jane.doe@walmart.com", "confidence": "high"},
        ],
        "phones": [{"value": "+1 479-273-4000", "confidence": "low"}],
    }
)


class RecordingLookup:
    def __init__(self, result: Optional[LookupContacts] = None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[tuple] = []

    async def lookup(self, name, role, company):
        self.calls.append((name, role, company))
        if self.error is not None:
            raise self.error
        return self.result


def test_enrich_builds_prompt_and_sorts_contacts() -> None:
    model = StaticSearchModel([ENRICHMENT_RESPONSE])

    data = asyncio.run(EnrichmentOrchestrator(model).enrich("Jane Doe", "Fleet Manager", "Walmart"))

    assert data.summary == "Jane runs the national fleet programme."
    assert data.linkedin_url == "https://www.linkedin.com/in/janedoe"
    assert [item.value for item in data.emails] == ["jane.doe@walmart.com", "j.doe@walmart.com"]
    assert data.phones == (EnrichedContactInfo("+1 479-273-4000", Confidence.LOW),)

    prompt = model.prompts[0]
    assert '"Jane Doe" "Walmart" email' in prompt
    assert '"Jane Doe" "Fleet Manager" "Walmart" contact' in prompt
    assert 'site:linkedin.com/in "Jane Doe" "Walmart"' in prompt
    assert "snippet" in prompt


def test_coerce_applies_defensive_defaults() -> None:
    data = coerce_enriched_data({"linkedinUrl": "Not Found", "emails": "none", "phones": {"value": "1"}})

    assert data == EnrichedData(summary="", linkedin_url=None, emails=(), phones=())


def test_coerce_handles_non_object_payload() -> None:
    assert coerce_enriched_data(["unexpected"]) == EnrichedData()


def test_lookup_values_join_at_high_confidence() -> None:
    model = StaticSearchModel([ENRICHMENT_RESPONSE])
    lookup = RecordingLookup(LookupContacts(emails=["j.doe@walmart.com"], phones=["+14792734000"]))

    data = asyncio.run(EnrichmentOrchestrator(model, lookup=lookup).enrich("Jane Doe", None, "Walmart"))

    assert lookup.calls == [("Jane Doe", None, "Walmart")]
    assert data.emails[:2] == (
        EnrichedContactInfo("j.doe@walmart.com", Confidence.HIGH),
        EnrichedContactInfo("jane.doe@walmart.com", Confidence.HIGH),
    )
    assert data.phones == (EnrichedContactInfo("+14792734000", Confidence.HIGH),)


def test_lookup_error_becomes_enrichment_failure() -> None:
    model = StaticSearchModel([ENRICHMENT_RESPONSE])
    lookup = RecordingLookup(error=LookupServiceError(401, "bad token"))

    with pytest.raises(EnrichmentFailed) as excinfo:
        asyncio.run(EnrichmentOrchestrator(model, lookup=lookup).enrich("Jane Doe", "Buyer", "Walmart"))

    assert "bad token" in str(excinfo.value)


def test_parse_failure_preserves_message() -> None:
    model = StaticSearchModel(["Sorry, nothing found."])

    with pytest.raises(EnrichmentFailed) as excinfo:
        asyncio.run(EnrichmentOrchestrator(model).enrich("Jane Doe", "Buyer", "Walmart"))

    assert str(excinfo.value) == "No JSON object found in the response."


def test_transport_failure_keeps_cause() -> None:
    class OfflineModel:
        name = "offline"

        async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
            raise httpx.ConnectError("Failed to establish a connection")

    with pytest.raises(EnrichmentFailed) as excinfo:
        asyncio.run(EnrichmentOrchestrator(OfflineModel()).enrich("Jane Doe", "Buyer", "Walmart"))

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_missing_name_is_rejected() -> None:
    model = StaticSearchModel([ENRICHMENT_RESPONSE])

    with pytest.raises(EnrichmentFailed):
        asyncio.run(EnrichmentOrchestrator(model).enrich("", "Buyer", "Walmart"))

    assert model.prompts == []


def test_lookup_failure_cancels_pending_model_call() -> None:
    class HangingModel:
        name = "hanging"

        def __init__(self) -> None:
            self.cancelled = False

        async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise

    model = HangingModel()
    lookup = RecordingLookup(error=LookupServiceError(500, "lookup down"))

    with pytest.raises(EnrichmentFailed):
        asyncio.run(EnrichmentOrchestrator(model, lookup=lookup).enrich("Jane Doe", "Buyer", "Walmart"))

    assert model.cancelled is True
