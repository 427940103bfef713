"""Utilities for applying rate limiting and timeouts to search model calls."""
from __future__ import annotations

import asyncio
import time
from typing import Optional

from .models import SearchResponse


class RateLimiter:
    """Enforces a minimum interval between calls sharing one event loop."""

    def __init__(self, calls_per_minute: Optional[float]) -> None:
        self._interval = 60.0 / float(calls_per_minute) if calls_per_minute else 0.0
        self._lock = asyncio.Lock()
        self._next_available = 0.0

    @property
    def interval(self) -> float:
        return self._interval

    async def acquire(self) -> None:
        if self._interval <= 0:
            return
        async with self._lock:
            now = time.monotonic()
            if now < self._next_available:
                await asyncio.sleep(self._next_available - now)
                now = time.monotonic()
            self._next_available = now + self._interval


class RateLimitedSearchModel:
    """Wrapper that paces and bounds calls to an underlying search model."""

    def __init__(
        self,
        model,
        *,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._model = model
        self._rate_limiter = rate_limiter or RateLimiter(None)
        self._timeout = timeout

    @property
    def name(self) -> str:  # pragma: no cover - delegation
        return getattr(self._model, "name", self._model.__class__.__name__)

    async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
        await self._rate_limiter.acquire()
        call = self._model.generate(prompt, grounded=grounded)
        if self._timeout:
            return await asyncio.wait_for(call, timeout=self._timeout)
        return await call

    def __getattr__(self, item):  # pragma: no cover - simple delegation
        return getattr(self._model, item)


__all__ = ["RateLimitedSearchModel", "RateLimiter"]
