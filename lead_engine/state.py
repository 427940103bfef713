"""Per-lead enrichment lifecycle tracking.

The lead collection is held in a :class:`LeadStore` and only ever replaced
wholesale. Every change is expressed as a function applied to the *latest*
stored lead at one index, so concurrent enrichment callbacks for different
leads cannot overwrite each other with stale snapshots.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Callable, Iterable, Optional, Tuple

import httpx

from .errors import EnrichmentFailed
from .models import EnrichedData, EnrichmentStatus, Lead
from .reconcile import has_data

LOGGER = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = (
    "A network error occurred. This may be due to cross-origin (CORS) or firewall policies blocking "
    "the request from this host. The standard solution is to route the request through a backend proxy."
)
GENERIC_ERROR_MESSAGE = "An unexpected error occurred during enrichment."

_NETWORK_ERRORS = (httpx.TransportError, ConnectionError, asyncio.TimeoutError)


class LeadStore:
    """Copy-on-write store of the current lead list, addressed by stable index."""

    def __init__(self, leads: Iterable[Lead] = ()) -> None:
        self._leads: Tuple[Lead, ...] = tuple(leads)
        self._generation = 0

    @property
    def generation(self) -> int:
        """Counter bumped whenever the whole list is replaced by a new research result."""

        return self._generation

    @property
    def leads(self) -> Tuple[Lead, ...]:
        return self._leads

    def __len__(self) -> int:
        return len(self._leads)

    def __getitem__(self, index: int) -> Lead:
        return self._leads[index]

    def replace_all(self, leads: Iterable[Lead]) -> int:
        self._leads = tuple(leads)
        self._generation += 1
        return self._generation

    def update(
        self,
        index: int,
        change: Callable[[Lead], Lead],
        *,
        generation: Optional[int] = None,
    ) -> bool:
        """Apply ``change`` to the latest lead at ``index``.

        Returns ``False`` without touching anything when ``generation`` no
        longer matches, i.e. the list was replaced while the caller waited.
        """

        if generation is not None and generation != self._generation:
            LOGGER.info(
                "Discarding update for lead %s from generation %s (current generation %s)",
                index,
                generation,
                self._generation,
            )
            return False
        leads = list(self._leads)
        leads[index] = change(leads[index])
        self._leads = tuple(leads)
        return True


def describe_failure(exc: BaseException) -> str:
    """Return the user-facing message for an enrichment failure."""

    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, _NETWORK_ERRORS) or "failed to fetch" in str(current).lower():
            return NETWORK_ERROR_MESSAGE
        current = current.__cause__
    if isinstance(exc, EnrichmentFailed) and str(exc):
        return str(exc)
    return GENERIC_ERROR_MESSAGE


class EnrichmentStateMachine:
    """Drives ``unset -> pending -> enriched | not_found | failed`` transitions on a store."""

    def __init__(self, store: LeadStore) -> None:
        self._store = store

    def begin(self, index: int) -> Optional[int]:
        """Mark a lead as pending.

        Returns the store generation to pass to :meth:`complete`/:meth:`fail`,
        or ``None`` when the lead is already pending and the trigger is ignored.
        """

        lead = self._store[index]
        if lead.enrichment_status is EnrichmentStatus.PENDING:
            LOGGER.debug("Ignoring enrichment trigger for pending lead %s (%s)", index, lead.display_name())
            return None
        self._store.update(
            index,
            lambda current: dataclasses.replace(
                current, enrichment_status=EnrichmentStatus.PENDING, enrichment_error=None
            ),
        )
        return self._store.generation

    def complete(self, index: int, data: Optional[EnrichedData], generation: Optional[int] = None) -> bool:
        if has_data(data):
            change = lambda current: dataclasses.replace(  # noqa: E731
                current, enriched_data=data, enrichment_status=EnrichmentStatus.ENRICHED, enrichment_error=None
            )
        else:
            change = lambda current: dataclasses.replace(  # noqa: E731
                current, enriched_data=None, enrichment_status=EnrichmentStatus.NOT_FOUND, enrichment_error=None
            )
        return self._store.update(index, change, generation=generation)

    def fail(self, index: int, exc: BaseException, generation: Optional[int] = None) -> bool:
        message = describe_failure(exc)
        return self._store.update(
            index,
            lambda current: dataclasses.replace(
                current, enrichment_status=EnrichmentStatus.FAILED, enrichment_error=message
            ),
            generation=generation,
        )


__all__ = [
    "EnrichmentStateMachine",
    "GENERIC_ERROR_MESSAGE",
    "LeadStore",
    "NETWORK_ERROR_MESSAGE",
    "describe_failure",
]
