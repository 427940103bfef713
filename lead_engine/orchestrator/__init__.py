"""Workflow orchestration for company research and contact enrichment."""

from .enrichment import EnrichmentOrchestrator, coerce_enriched_data
from .research import DEFAULT_OVERVIEW, ResearchOrchestrator

__all__ = ["DEFAULT_OVERVIEW", "EnrichmentOrchestrator", "ResearchOrchestrator", "coerce_enriched_data"]
