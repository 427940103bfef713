"""Top-level package for the AI-assisted lead research engine."""

from . import models  # noqa: F401
from .errors import (
    ConfigurationError,
    DispatchFailed,
    EnrichmentFailed,
    LeadEngineError,
    LookupServiceError,
    MalformedResponse,
    ResearchFailed,
)
from .models import (
    Confidence,
    EnrichedContactInfo,
    EnrichedData,
    EnrichmentStatus,
    GroundingChunk,
    Lead,
    ResearchResult,
)
from .session import LeadSession  # noqa: F401

__all__ = [
    "Confidence",
    "ConfigurationError",
    "DispatchFailed",
    "EnrichedContactInfo",
    "EnrichedData",
    "EnrichmentFailed",
    "EnrichmentStatus",
    "GroundingChunk",
    "Lead",
    "LeadEngineError",
    "LeadSession",
    "LookupServiceError",
    "MalformedResponse",
    "ResearchFailed",
    "ResearchResult",
    "orchestrator",
    "providers",
]
