"""Reconciliation of confidence-scored contact values from multiple sources.

Confidence policy for reconciled values:

* ``high``   - observed complete and unmasked in a single source.
* ``medium`` - inferred from a pattern (e.g. ``first.last@domain``) rather than observed.
* ``low``    - reconstructed by combining partially masked values.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .models import Confidence, EnrichedContactInfo, EnrichedData, Lead, clean_field

LOGGER = logging.getLogger(__name__)

EMAIL = "email"
PHONE = "phone"

_MASK_CHARS = {"*", "•", "#"}
# Phone numbers are also masked with runs of "x"; a single "x" is an extension marker.
_PHONE_X_RUN = re.compile(r"[xX]{2,}")

CandidateLike = Union[EnrichedContactInfo, Mapping[str, Any], str]


def has_data(data: Optional[EnrichedData]) -> bool:
    """Return ``True`` when enrichment produced anything worth showing."""

    if data is None:
        return False
    return bool(data.summary or data.linkedin_url or data.emails or data.phones)


def sort_by_confidence(items: Iterable[EnrichedContactInfo]) -> List[EnrichedContactInfo]:
    return sorted(items, key=lambda item: item.confidence.rank)


def _best_value(enriched: Sequence[EnrichedContactInfo], fallback: Optional[str]) -> str:
    if enriched:
        return sort_by_confidence(enriched)[0].value
    return fallback or ""


def best_email(lead: Lead) -> str:
    """Top-ranked enriched email, else the lead's own email, else an empty string."""

    enriched = lead.enriched_data.emails if lead.enriched_data else ()
    return _best_value(enriched, lead.email)


def best_phone(lead: Lead) -> str:
    enriched = lead.enriched_data.phones if lead.enriched_data else ()
    return _best_value(enriched, lead.phone)


# ---------------------------------------------------------------------------
# Masked value reconstruction
# ---------------------------------------------------------------------------

def _shape(value: str, kind: str) -> str:
    """Reduce a value to the characters that take part in reconstruction."""

    if kind == PHONE:
        value = _PHONE_X_RUN.sub(lambda match: "*" * len(match.group(0)), value)
        return "".join(char for char in value if char.isdigit() or char in _MASK_CHARS or char == "+")
    return value.strip().lower()


def is_masked(value: str, kind: str = EMAIL) -> bool:
    return any(char in _MASK_CHARS for char in _shape(value, kind))


def _combine(values: Sequence[str]) -> Optional[str]:
    resolved: List[str] = []
    for position in range(len(values[0])):
        observed = {value[position] for value in values if value[position] not in _MASK_CHARS}
        if len(observed) != 1:
            # Either every source hides this position or the sources disagree.
            return None
        resolved.append(observed.pop())
    return "".join(resolved)


def reconstruct_masked(values: Iterable[str], kind: str = EMAIL) -> Optional[str]:
    """Combine partially masked values into one complete value.

    Values are grouped by shape length and merged position by position. A
    result is returned only when every position is revealed by some source,
    no two sources disagree, and exactly one distinct value comes out.
    """

    groups: Dict[int, List[str]] = {}
    for value in values:
        shaped = _shape(value, kind)
        if shaped:
            groups.setdefault(len(shaped), []).append(shaped)

    results = set()
    for group in groups.values():
        if len(group) < 2:
            continue
        combined = _combine(group)
        if combined is not None:
            results.add(combined)

    if len(results) != 1:
        if len(results) > 1:
            LOGGER.debug("Masked %s values reconstruct ambiguously: %s", kind, sorted(results))
        return None
    return results.pop()


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------

def normalise_key(value: str, kind: str) -> str:
    value = value.strip()
    if kind == PHONE:
        return "".join(char for char in value if char.isdigit())
    return value.lower()


def _coerce_candidate(candidate: CandidateLike, default: Confidence) -> Optional[EnrichedContactInfo]:
    if isinstance(candidate, EnrichedContactInfo):
        return candidate
    if isinstance(candidate, Mapping):
        value = clean_field(candidate.get("value"))
        confidence = Confidence.parse(candidate.get("confidence"), default)
    else:
        value = clean_field(candidate)
        confidence = default
    if value is None:
        return None
    return EnrichedContactInfo(value=value, confidence=confidence)


def merge_contact_values(
    candidates: Iterable[CandidateLike],
    kind: str = EMAIL,
    *,
    default_confidence: Confidence = Confidence.LOW,
) -> List[EnrichedContactInfo]:
    """Deduplicate candidate values and return them ordered by confidence.

    Complete values are keyed case-insensitively (emails) or by digits
    (phones); the strongest confidence seen for a key wins. Masked values are
    never returned as-is: they are reconstructed when unambiguous and added
    at ``low`` confidence, otherwise dropped.
    """

    merged: Dict[str, EnrichedContactInfo] = {}
    ordered_keys: List[str] = []
    masked: List[str] = []

    for candidate in candidates:
        info = _coerce_candidate(candidate, default_confidence)
        if info is None:
            continue
        if is_masked(info.value, kind):
            masked.append(info.value)
            continue
        key = normalise_key(info.value, kind)
        if not key:
            continue
        current = merged.get(key)
        if current is None:
            merged[key] = info
            ordered_keys.append(key)
        elif info.confidence.rank < current.confidence.rank:
            merged[key] = EnrichedContactInfo(value=current.value, confidence=info.confidence)

    if masked:
        reconstructed = reconstruct_masked(masked, kind)
        if reconstructed is None:
            LOGGER.debug("Dropping %s masked %s values that could not be reconstructed", len(masked), kind)
        else:
            key = normalise_key(reconstructed, kind)
            if key and key not in merged:
                merged[key] = EnrichedContactInfo(value=reconstructed, confidence=Confidence.LOW)
                ordered_keys.append(key)

    return sort_by_confidence(merged[key] for key in ordered_keys)


__all__ = [
    "EMAIL",
    "PHONE",
    "best_email",
    "best_phone",
    "has_data",
    "is_masked",
    "merge_contact_values",
    "normalise_key",
    "reconstruct_masked",
    "sort_by_confidence",
]
