import asyncio
import time

import pytest

from lead_engine.models import SearchResponse
from lead_engine.rate_limit import RateLimitedSearchModel, RateLimiter


class DummyModel:
    name = "dummy"

    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay
        self.last_prompt = None
        self.last_grounded = None

    async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
        self.calls += 1
        self.last_prompt = prompt
        self.last_grounded = grounded
        if self.delay:
            await asyncio.sleep(self.delay)
        return SearchResponse(text="{}")


def test_rate_limited_model_delegates_call() -> None:
    model = DummyModel()
    wrapper = RateLimitedSearchModel(model)

    result = asyncio.run(wrapper.generate("hello", grounded=False))

    assert result.text == "{}"
    assert model.calls == 1
    assert model.last_prompt == "hello"
    assert model.last_grounded is False


def test_rate_limiter_spaces_out_concurrent_calls() -> None:
    limiter = RateLimiter(calls_per_minute=1200)  # one call every 50ms
    model = DummyModel()
    wrapper = RateLimitedSearchModel(model, rate_limiter=limiter)

    async def run() -> float:
        started = time.monotonic()
        await asyncio.gather(*(wrapper.generate(f"prompt {index}") for index in range(3)))
        return time.monotonic() - started

    elapsed = asyncio.run(run())

    assert limiter.interval == pytest.approx(0.05)
    assert model.calls == 3
    assert elapsed >= 0.09


def test_unlimited_rate_limiter_does_not_wait() -> None:
    assert RateLimiter(None).interval == 0.0


def test_timeout_bounds_slow_calls() -> None:
    wrapper = RateLimitedSearchModel(DummyModel(delay=1.0), timeout=0.01)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(wrapper.generate("slow"))
