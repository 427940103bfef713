from __future__ import annotations

import httpx

from lead_engine.errors import EnrichmentFailed
from lead_engine.models import Confidence, EnrichedContactInfo, EnrichedData, EnrichmentStatus, Lead
from lead_engine.state import (
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    EnrichmentStateMachine,
    LeadStore,
    describe_failure,
)


def _store() -> LeadStore:
    return LeadStore(
        [
            Lead(name="Jane Doe", role="Fleet Manager", is_primary_target=True),
            Lead(name="John Roe", role="Buyer"),
        ]
    )


def test_begin_marks_pending_and_ignores_second_trigger() -> None:
    store = _store()
    machine = EnrichmentStateMachine(store)

    generation = machine.begin(0)

    assert generation == store.generation
    assert store[0].enrichment_status is EnrichmentStatus.PENDING
    assert machine.begin(0) is None
    assert store[1].enrichment_status is EnrichmentStatus.UNSET


def test_complete_with_data_and_without() -> None:
    store = _store()
    machine = EnrichmentStateMachine(store)
    data = EnrichedData(emails=(EnrichedContactInfo("jane@walmart.com", Confidence.HIGH),))

    machine.begin(0)
    machine.complete(0, data)
    machine.begin(1)
    machine.complete(1, EnrichedData())

    assert store[0].enrichment_status is EnrichmentStatus.ENRICHED
    assert store[0].enriched_data == data
    assert store[1].enrichment_status is EnrichmentStatus.NOT_FOUND
    assert store[1].enriched_data is None


def test_retry_clears_previous_error() -> None:
    store = _store()
    machine = EnrichmentStateMachine(store)

    machine.begin(0)
    machine.fail(0, EnrichmentFailed("Rate limit exceeded"))
    assert store[0].enrichment_error == "Rate limit exceeded"

    machine.begin(0)

    assert store[0].enrichment_status is EnrichmentStatus.PENDING
    assert store[0].enrichment_error is None


def test_interleaved_updates_do_not_clobber_each_other() -> None:
    store = _store()
    machine = EnrichmentStateMachine(store)
    first = machine.begin(0)
    second = machine.begin(1)

    # The second lead resolves before the first one.
    machine.fail(1, EnrichmentFailed("boom"), second)
    machine.complete(0, EnrichedData(summary="Runs the fleet."), first)

    assert store[0].enrichment_status is EnrichmentStatus.ENRICHED
    assert store[1].enrichment_status is EnrichmentStatus.FAILED
    assert store[1].enrichment_error == "boom"


def test_stale_generation_is_discarded() -> None:
    store = _store()
    machine = EnrichmentStateMachine(store)
    generation = machine.begin(0)

    store.replace_all([Lead(name="Someone Else", role="CEO")])

    assert machine.complete(0, EnrichedData(summary="old result"), generation) is False
    assert store[0] == Lead(name="Someone Else", role="CEO")


def test_network_failures_get_cors_guidance() -> None:
    wrapped = EnrichmentFailed("connection refused")
    wrapped.__cause__ = httpx.ConnectError("connection refused")

    assert describe_failure(wrapped) == NETWORK_ERROR_MESSAGE
    assert "cross-origin" in describe_failure(TypeError("Failed to fetch"))


def test_other_failures_keep_their_message() -> None:
    assert describe_failure(EnrichmentFailed("AI response was not in a valid JSON format.")) == (
        "AI response was not in a valid JSON format."
    )
    assert describe_failure(KeyError("x")) == GENERIC_ERROR_MESSAGE
