"""Data models shared by the research, enrichment and dispatch pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

NOT_FOUND = "Not Found"


def clean_field(value: object) -> Optional[str]:
    """Return a stripped string, or ``None`` for blanks and the "Not Found" sentinel."""

    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == NOT_FOUND.lower():
        return None
    return text


class EnrichmentStatus(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    ENRICHED = "enriched"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class Confidence(str, Enum):
    """Ordinal quality label attached to a reconciled contact value."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return CONFIDENCE_RANK[self]

    @classmethod
    def parse(cls, value: object, default: Optional["Confidence"] = None) -> "Confidence":
        if isinstance(value, Confidence):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return default if default is not None else cls.LOW


CONFIDENCE_RANK = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


# --- Enrichment ---

@dataclass(frozen=True)
class EnrichedContactInfo:
    """A single email address or phone number with its confidence label."""

    value: str
    confidence: Confidence = Confidence.LOW

    def to_dict(self) -> Dict[str, str]:
        return {"value": self.value, "confidence": self.confidence.value}


@dataclass(frozen=True)
class EnrichedData:
    """Result of the per-contact enrichment pass."""

    summary: str = ""
    linkedin_url: Optional[str] = None
    emails: Tuple[EnrichedContactInfo, ...] = ()
    phones: Tuple[EnrichedContactInfo, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "linkedinUrl": self.linkedin_url,
            "emails": [item.to_dict() for item in self.emails],
            "phones": [item.to_dict() for item in self.phones],
        }


# --- Leads ---

@dataclass(frozen=True)
class Lead:
    """One contact identified during company research.

    Absent scalar fields are ``None``; the "Not Found" sentinel only exists on
    the wire and is restored by :meth:`to_dict`.
    """

    name: Optional[str]
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_primary_target: bool = False
    enriched_data: Optional[EnrichedData] = None
    enrichment_status: EnrichmentStatus = EnrichmentStatus.UNSET
    enrichment_error: Optional[str] = None

    @property
    def has_secondary_field(self) -> bool:
        return any((self.role, self.email, self.phone))

    def display_name(self) -> str:
        return self.name or "(Unnamed Lead)"

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "name": self.name or NOT_FOUND,
            "role": self.role or NOT_FOUND,
            "email": self.email or NOT_FOUND,
            "phone": self.phone or NOT_FOUND,
            "isPrimaryTarget": self.is_primary_target,
            "enrichmentStatus": self.enrichment_status.value,
        }
        if self.enriched_data is not None:
            row["enrichedData"] = self.enriched_data.to_dict()
        if self.enrichment_error:
            row["enrichmentError"] = self.enrichment_error
        return row


# --- Citations ---

@dataclass(frozen=True)
class WebSource:
    uri: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class GroundingChunk:
    """Citation returned alongside a grounded search response."""

    web: Optional[WebSource] = None

    @property
    def uri(self) -> Optional[str]:
        return self.web.uri if self.web else None

    @property
    def title(self) -> Optional[str]:
        return self.web.title if self.web else None

    def label(self) -> str:
        """Return the best printable label, or an empty string when nothing is known."""

        return self.title or self.uri or ""

    def to_dict(self) -> Dict[str, Any]:
        if self.web is None:
            return {}
        return {"web": {key: value for key, value in {"uri": self.uri, "title": self.title}.items() if value}}


# --- Pipeline results ---

@dataclass(frozen=True)
class SearchResponse:
    """Text and citations returned by a search model call."""

    text: str
    sources: List[GroundingChunk] = field(default_factory=list)


@dataclass(frozen=True)
class ResearchResult:
    overview: str
    leads: Tuple[Lead, ...] = ()
    sources: Tuple[GroundingChunk, ...] = ()


@dataclass
class LookupContacts:
    """Emails and phones unioned across every profile returned by a lookup."""

    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
