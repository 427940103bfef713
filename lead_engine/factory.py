"""Factory helpers for constructing pipeline components from :class:`Settings`."""
from __future__ import annotations

import importlib
from typing import Any, Dict, Optional

from .config import ConfigurationError, Settings
from .dispatch import CrmDispatcher
from .orchestrator import EnrichmentOrchestrator, ResearchOrchestrator
from .providers.contactout import ContactOutClient
from .rate_limit import RateLimitedSearchModel, RateLimiter
from .session import LeadSession


def _load_class(path: str):
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Invalid search backend class path '{path}'")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module '{module_name}' does not define '{attr}'") from exc


def build_search_model(settings: Settings, options: Optional[Dict[str, Any]] = None) -> RateLimitedSearchModel:
    """Instantiate the configured search backend wrapped with pacing and a timeout.

    Without explicit ``options`` the backend receives the API key and model
    name from ``settings``.
    """

    backend_cls = _load_class(settings.search_backend)
    if options is None:
        options = {"api_key": settings.gemini_api_key, "model": settings.model}
    model = backend_cls(**options)
    return RateLimitedSearchModel(
        model,
        rate_limiter=RateLimiter(settings.rate_limit_per_minute),
        timeout=settings.request_timeout,
    )


def build_lookup(settings: Settings) -> Optional[ContactOutClient]:
    if not settings.lookup_enabled:
        return None
    return ContactOutClient(
        settings.contactout_token,
        url=settings.contactout_url,
        timeout=settings.request_timeout,
    )


def build_dispatcher(settings: Settings) -> Optional[CrmDispatcher]:
    if not settings.crm_endpoint:
        return None
    if not settings.tenant_subdomain:
        raise ConfigurationError("tenant_subdomain is required when crm_endpoint is configured")
    return CrmDispatcher(
        settings.crm_endpoint,
        settings.tenant_subdomain,
        timeout=settings.request_timeout,
    )


def build_session(settings: Settings, *, search_options: Optional[Dict[str, Any]] = None) -> LeadSession:
    """Wire a :class:`LeadSession` from validated settings."""

    settings.validate()
    model = build_search_model(settings, search_options)
    return LeadSession(
        ResearchOrchestrator(model, prefer_fenced=settings.prefer_fenced_json),
        EnrichmentOrchestrator(model, lookup=build_lookup(settings), prefer_fenced=settings.prefer_fenced_json),
        build_dispatcher(settings),
        success_reset_seconds=settings.success_reset_seconds,
    )


__all__ = ["build_dispatcher", "build_lookup", "build_search_model", "build_session"]
