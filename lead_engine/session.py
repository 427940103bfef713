"""Session state behind the three user intents: research, enrich and dispatch."""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional, Tuple

from .dispatch import CrmDispatcher
from .errors import DispatchFailed, ResearchFailed
from .models import EnrichmentStatus, GroundingChunk, Lead
from .orchestrator import EnrichmentOrchestrator, ResearchOrchestrator
from .state import EnrichmentStateMachine, LeadStore

LOGGER = logging.getLogger(__name__)

EMPTY_COMPANY_MESSAGE = "Please enter a company name or website."
RESEARCH_ERROR_MESSAGE = (
    "Failed to fetch or parse research data. The AI may have returned an unexpected format. "
    "Please try refining your query."
)
DISPATCH_NOT_CONFIGURED_MESSAGE = "No CRM webhook is configured."


class DispatchStatus(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    ERROR = "error"


class LeadSession:
    """Holds the current research results and applies user intents to them.

    A new research query replaces the lead list and bumps the store
    generation; enrichment results that arrive for an older generation are
    discarded instead of being written onto the new leads.
    """

    def __init__(
        self,
        research: ResearchOrchestrator,
        enrichment: EnrichmentOrchestrator,
        dispatcher: Optional[CrmDispatcher] = None,
        *,
        success_reset_seconds: float = 3.0,
    ) -> None:
        self._research = research
        self._enrichment = enrichment
        self._dispatcher = dispatcher
        self._success_reset_seconds = success_reset_seconds
        self._reset_handle: Optional[asyncio.TimerHandle] = None

        self.store = LeadStore()
        self.machine = EnrichmentStateMachine(self.store)
        self.company = ""
        self.location = ""
        self.overview = ""
        self.sources: Tuple[GroundingChunk, ...] = ()
        self.error: Optional[str] = None
        self.is_loading = False
        self.dispatch_status = DispatchStatus.IDLE
        self.dispatch_error: Optional[str] = None

    @property
    def leads(self) -> Tuple[Lead, ...]:
        return self.store.leads

    # ------------------------------------------------------------------
    # Research
    # ------------------------------------------------------------------
    async def research(self, company: str, location: str = "") -> bool:
        """Run a research query; only one may be in flight at a time."""

        if self.is_loading:
            LOGGER.info("Ignoring research for %r while another query is running", company)
            return False
        company = (company or "").strip()
        if not company:
            self.error = EMPTY_COMPANY_MESSAGE
            return False

        self.is_loading = True
        self.error = None
        self.company = company
        self.location = (location or "").strip()
        self.overview = ""
        self.sources = ()
        self.store.replace_all(())

        try:
            result = await self._research.research(company, self.location)
        except ResearchFailed:
            LOGGER.warning("Research for %r failed; no results applied", company)
            self.error = RESEARCH_ERROR_MESSAGE
            return False
        finally:
            self.is_loading = False

        self.overview = result.overview
        self.store.replace_all(result.leads)
        self.sources = result.sources
        return True

    # ------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------
    async def enrich(self, index: int) -> Optional[EnrichmentStatus]:
        """Enrich one lead; returns its new status, or ``None`` if the trigger was ignored."""

        generation = self.machine.begin(index)
        if generation is None:
            return None

        lead = self.store[index]
        try:
            data = await self._enrichment.enrich(lead.name or "", lead.role, self.company)
        except Exception as exc:
            LOGGER.warning("Enrichment failed for lead %s (%s): %s", index, lead.display_name(), exc)
            applied = self.machine.fail(index, exc, generation)
        else:
            applied = self.machine.complete(index, data, generation)

        if not applied:
            return None
        return self.store[index].enrichment_status

    async def enrich_all(self) -> List[Optional[EnrichmentStatus]]:
        indices = [
            index
            for index, lead in enumerate(self.store.leads)
            if lead.enrichment_status is not EnrichmentStatus.PENDING
        ]
        return list(await asyncio.gather(*(self.enrich(index) for index in indices)))

    # ------------------------------------------------------------------
    # CRM dispatch
    # ------------------------------------------------------------------
    async def dispatch_to_crm(self) -> bool:
        if self.dispatch_status is DispatchStatus.SENDING:
            return False
        if self._dispatcher is None:
            self.dispatch_status = DispatchStatus.ERROR
            self.dispatch_error = DISPATCH_NOT_CONFIGURED_MESSAGE
            return False

        self._cancel_reset()
        self.dispatch_status = DispatchStatus.SENDING
        self.dispatch_error = None
        try:
            await self._dispatcher.dispatch(self.store.leads, self.company, self.overview)
        except DispatchFailed as exc:
            self.dispatch_status = DispatchStatus.ERROR
            self.dispatch_error = str(exc)
            return False
        except Exception as exc:
            LOGGER.exception("CRM dispatch for %r failed unexpectedly", self.company)
            self.dispatch_status = DispatchStatus.ERROR
            self.dispatch_error = str(exc) or exc.__class__.__name__
            return False

        self.dispatch_status = DispatchStatus.SUCCESS
        self._reset_handle = asyncio.get_running_loop().call_later(
            self._success_reset_seconds, self._reset_dispatch_status
        )
        return True

    def _reset_dispatch_status(self) -> None:
        self._reset_handle = None
        if self.dispatch_status is DispatchStatus.SUCCESS:
            self.dispatch_status = DispatchStatus.IDLE

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None


__all__ = [
    "DispatchStatus",
    "LeadSession",
    "RESEARCH_ERROR_MESSAGE",
]
