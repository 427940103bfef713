"""Filtering and ordering of raw contact records returned by company research."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Union

from .models import Lead, clean_field

LOGGER = logging.getLogger(__name__)

RecordLike = Union[Mapping[str, Any], Lead]

_TRUE_STRINGS = {"true", "yes", "1"}


def _coerce_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


def record_to_lead(record: RecordLike) -> Lead:
    """Convert one loosely typed contact record into a :class:`Lead`."""

    if isinstance(record, Lead):
        return record
    return Lead(
        name=clean_field(record.get("name")),
        role=clean_field(record.get("role")),
        email=clean_field(record.get("email")),
        phone=clean_field(record.get("phone")),
        is_primary_target=_coerce_flag(record.get("isPrimaryTarget", record.get("is_primary_target"))),
    )


def is_usable(lead: Lead) -> bool:
    return bool(lead.name) and lead.has_secondary_field


def normalise_contacts(records: Iterable[RecordLike]) -> List[Lead]:
    """Return usable leads with primary targets first.

    Records without a name, or with a name but no role, email or phone, are
    dropped. Ordering inside the primary and non-primary groups follows the
    input; duplicates are kept.
    """

    primary: List[Lead] = []
    others: List[Lead] = []
    dropped = 0
    for record in records:
        if not isinstance(record, (Mapping, Lead)):
            dropped += 1
            continue
        lead = record_to_lead(record)
        if not is_usable(lead):
            dropped += 1
            continue
        (primary if lead.is_primary_target else others).append(lead)

    if dropped:
        LOGGER.debug("Dropped %s contact records without a name and at least one contact field", dropped)
    return primary + others


__all__ = ["is_usable", "normalise_contacts", "record_to_lead"]
