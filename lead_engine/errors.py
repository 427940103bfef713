"""Exception hierarchy for the lead engine."""
from __future__ import annotations

from typing import Optional


class LeadEngineError(RuntimeError):
    """Base class for all errors raised by the lead engine."""


class ConfigurationError(LeadEngineError):
    """Raised when configuration files or environment settings are missing or malformed."""


class MalformedResponse(LeadEngineError):
    """Raised when model output does not contain a parseable JSON object."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ResearchFailed(LeadEngineError):
    """Raised when company research fails; no partial results are committed."""


class EnrichmentFailed(LeadEngineError):
    """Raised when enriching a single contact fails."""


class LookupServiceError(LeadEngineError):
    """Raised when the contact lookup service answers with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Contact lookup request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DispatchFailed(LeadEngineError):
    """Raised when any webhook request in a CRM dispatch batch fails."""

    def __init__(self, lead_name: str, detail: str, status_code: Optional[int] = None) -> None:
        prefix = f"status {status_code}" if status_code is not None else "request error"
        super().__init__(f"Failed to send lead '{lead_name}' ({prefix}): {detail}")
        self.lead_name = lead_name
        self.detail = detail
        self.status_code = status_code


__all__ = [
    "ConfigurationError",
    "DispatchFailed",
    "EnrichmentFailed",
    "LeadEngineError",
    "LookupServiceError",
    "MalformedResponse",
    "ResearchFailed",
]
