"""Google Gemini search model with Google Search grounding.

Prerequisites
-------------
* Requires the :mod:`google-genai` package and a Gemini API key.
* Grounded calls are billed per request by Google; the rate limiter in
  :mod:`lead_engine.rate_limit` can be configured to pace them.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from ..config import DEFAULT_MODEL
from ..models import GroundingChunk, SearchResponse, WebSource

LOGGER = logging.getLogger(__name__)


def grounding_chunks_from_response(response: Any) -> List[GroundingChunk]:
    """Collect citation chunks from the first candidate's grounding metadata.

    Every level of the response may be missing; a missing level yields no
    citations rather than an error.
    """

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    raw_chunks = getattr(metadata, "grounding_chunks", None) or []

    chunks: List[GroundingChunk] = []
    for raw_chunk in raw_chunks:
        web = getattr(raw_chunk, "web", None)
        if web is None:
            chunks.append(GroundingChunk())
            continue
        chunks.append(
            GroundingChunk(web=WebSource(uri=getattr(web, "uri", None), title=getattr(web, "title", None)))
        )
    return chunks


class GeminiSearchModel:
    """Search model backed by the Gemini ``generate_content`` API."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = DEFAULT_MODEL,
        client: Optional[genai.Client] = None,
    ) -> None:
        if client is None and not api_key:
            raise ValueError("GeminiSearchModel requires an API key or a configured client")
        self._client = client or genai.Client(api_key=api_key)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    def _build_config(self, grounded: bool) -> Optional[types.GenerateContentConfig]:
        if not grounded:
            return None
        return types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())])

    async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
        LOGGER.debug("Calling %s (grounded=%s) with a %s character prompt", self._model, grounded, len(prompt))
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=self._build_config(grounded),
        )
        text = response.text or ""
        sources = grounding_chunks_from_response(response)
        LOGGER.debug("Received %s characters and %s citations from %s", len(text), len(sources), self._model)
        return SearchResponse(text=text, sources=sources)


__all__ = ["GeminiSearchModel", "grounding_chunks_from_response"]
