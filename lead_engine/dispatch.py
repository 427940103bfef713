"""Forwarding of researched leads to a CRM ingestion webhook."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

import httpx

from .errors import DispatchFailed
from .models import Lead
from .reconcile import best_email, best_phone

LOGGER = logging.getLogger(__name__)


def build_payload(lead: Lead, overview: str, tenant_subdomain: str) -> Dict[str, Any]:
    """Map a lead and its best reconciled fields onto the webhook body."""

    enriched = lead.enriched_data
    return {
        "name": lead.name or "",
        "email": best_email(lead),
        "phone": best_phone(lead),
        "job_title": lead.role or "",
        "custom_field1": (enriched.linkedin_url if enriched else None) or "",
        "custom_field2": (enriched.summary if enriched else None) or "",
        "company_overview": overview or "",
        "tenant_subdomain": tenant_subdomain,
    }


def company_header(company: str) -> str:
    """Return ``company`` as a header value; non-ASCII names are percent-encoded."""

    company = company or ""
    if company.isascii():
        return company
    return quote(company, safe=" ")


class CrmDispatcher:
    """Posts one webhook request per lead concurrently; the batch fails if any request fails."""

    def __init__(
        self,
        endpoint: str,
        tenant_subdomain: str,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._endpoint = endpoint
        self._tenant_subdomain = tenant_subdomain
        self._timeout = timeout
        self._client = client

    async def dispatch(self, leads: Sequence[Lead], company: str, overview: str) -> int:
        """Send every lead and return the number of requests made.

        Every request is allowed to settle; :class:`DispatchFailed` is then
        raised for the first failed lead in list order.
        """

        if not leads:
            LOGGER.info("No leads to dispatch for %r", company)
            return 0

        headers = {"Content-Type": "application/json", "x-company-name": company_header(company)}
        if self._client is not None:
            await self._send_all(self._client, leads, overview, headers)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                await self._send_all(client, leads, overview, headers)
        LOGGER.info("Dispatched %s leads for %r to %s", len(leads), company, self._endpoint)
        return len(leads)

    async def _send_all(
        self,
        client: httpx.AsyncClient,
        leads: Sequence[Lead],
        overview: str,
        headers: Dict[str, str],
    ) -> None:
        results = await asyncio.gather(
            *(self._send(client, lead, overview, headers) for lead in leads),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            LOGGER.error("%s of %s webhook requests failed", len(failures), len(results))
            raise failures[0]

    async def _send(
        self,
        client: httpx.AsyncClient,
        lead: Lead,
        overview: str,
        headers: Dict[str, str],
    ) -> None:
        payload = build_payload(lead, overview, self._tenant_subdomain)
        name = lead.display_name()
        try:
            response = await client.post(self._endpoint, json=payload, headers=headers, timeout=self._timeout)
        except Exception as exc:
            LOGGER.error("Webhook request for lead %r failed: %s", name, exc)
            raise DispatchFailed(name, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            LOGGER.error("Webhook rejected lead %r with status %s: %s", name, response.status_code, response.text)
            raise DispatchFailed(name, response.text, status_code=response.status_code)


__all__ = ["CrmDispatcher", "build_payload", "company_header"]
