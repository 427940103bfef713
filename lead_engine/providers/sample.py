"""Example search model that replays canned responses instead of calling an API."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..models import GroundingChunk, SearchResponse

ResponseLike = Union[str, SearchResponse]


class StaticSearchModel:
    """Replays responses in order, repeating the last one once exhausted.

    Useful for demos and tests; prompts received are kept in :attr:`prompts`.
    """

    name = "static"

    def __init__(
        self,
        responses: Optional[Sequence[ResponseLike]] = None,
        *,
        response_file: Optional[str] = None,
        sources: Optional[Sequence[GroundingChunk]] = None,
    ) -> None:
        loaded: List[ResponseLike] = list(responses or [])
        if response_file:
            loaded.extend(json.loads(Path(response_file).read_text(encoding="utf-8")))
        if not loaded:
            raise ValueError("StaticSearchModel requires at least one response")
        self._responses = loaded
        self._sources = list(sources or [])
        self.prompts: List[str] = []

    async def generate(self, prompt: str, *, grounded: bool = True) -> SearchResponse:
        index = min(len(self.prompts), len(self._responses) - 1)
        self.prompts.append(prompt)
        response = self._responses[index]
        if isinstance(response, SearchResponse):
            return response
        if not isinstance(response, str):
            # Response files may hold the JSON payloads themselves.
            response = json.dumps(response)
        return SearchResponse(text=response, sources=list(self._sources))
