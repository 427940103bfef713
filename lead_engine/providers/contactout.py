"""ContactOut people search client used as a secondary contact source."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import DEFAULT_CONTACTOUT_URL
from ..errors import LookupServiceError
from ..models import LookupContacts, clean_field

LOGGER = logging.getLogger(__name__)

_EMAIL_KEYS = ("emails", "personal_emails", "work_emails")
_DATA_TYPES = ["personal_email", "work_email", "phone"]


def build_lookup_payload(name: str, role: Optional[str], company: Optional[str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": name,
        "match_experience": "both",
        "data_types": list(_DATA_TYPES),
        "reveal_info": True,
    }
    role = clean_field(role)
    if role:
        payload["job_title"] = [role]
    company = clean_field(company)
    if company:
        payload["company"] = [company]
    return payload


def _add_unique(target: List[str], values: Any) -> None:
    if not isinstance(values, list):
        return
    for value in values:
        text = clean_field(value)
        if text and text not in target:
            target.append(text)


def contacts_from_response(data: Any) -> Optional[LookupContacts]:
    """Union every email and phone across all returned profiles.

    An empty list in place of the ``profiles`` mapping means no match.
    """

    profiles = data.get("profiles") if isinstance(data, dict) else None
    if not isinstance(profiles, dict) or not profiles:
        return None

    contacts = LookupContacts()
    for profile in profiles.values():
        info = (profile or {}).get("contact_info") or {}
        for key in _EMAIL_KEYS:
            _add_unique(contacts.emails, info.get(key))
        _add_unique(contacts.phones, info.get("phones"))

    if not contacts.emails and not contacts.phones:
        return None
    return contacts


class ContactOutClient:
    """Async client for the ContactOut people search endpoint."""

    name = "contactout"

    def __init__(
        self,
        token: str,
        *,
        url: str = DEFAULT_CONTACTOUT_URL,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._token = token
        self._url = url
        self._timeout = timeout
        self._client = client

    async def lookup(self, name: str, role: Optional[str], company: Optional[str]) -> Optional[LookupContacts]:
        payload = build_lookup_payload(name, role, company)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "token": self._token,
        }
        if self._client is not None:
            response = await self._client.post(self._url, json=payload, headers=headers, timeout=self._timeout)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=payload, headers=headers)

        if not response.is_success:
            LOGGER.error("ContactOut API error: %s %s", response.status_code, response.text)
            raise LookupServiceError(response.status_code, response.text)

        contacts = contacts_from_response(response.json())
        if contacts is None:
            LOGGER.info("ContactOut returned no contact details for %s", name)
        return contacts


__all__ = ["ContactOutClient", "build_lookup_payload", "contacts_from_response"]
