"""Extraction of JSON payloads embedded in free-form model output."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .errors import MalformedResponse

LOGGER = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> Optional[str]:
    """Return the body of the first fenced code block, or ``None`` if there is none."""

    match = _FENCE_PATTERN.search(text or "")
    if not match:
        return None
    return match.group(1).strip()


def extract_json(text: str, *, prefer_fenced: bool = False) -> Any:
    """Parse the JSON object spanning the first ``{`` to the last ``}`` in ``text``.

    Prose or markdown fences around the object are tolerated. Literal braces in
    the surrounding prose are not: they widen the slice and the parse fails.
    With ``prefer_fenced`` the body of a fenced block is scanned instead of the
    whole text when one is present.
    """

    raw_text = text or ""
    candidate = raw_text
    if prefer_fenced:
        fenced = strip_code_fences(raw_text)
        if fenced:
            candidate = fenced

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end == -1 or end < start:
        LOGGER.error("No JSON object found in model response. Raw response text: %s", raw_text)
        raise MalformedResponse("No JSON object found in the response.", raw_text=raw_text)

    try:
        return json.loads(candidate[start : end + 1])
    except json.JSONDecodeError as exc:
        LOGGER.error("Failed to parse model response as JSON: %s. Raw response text: %s", exc, raw_text)
        raise MalformedResponse("AI response was not in a valid JSON format.", raw_text=raw_text) from exc


__all__ = ["extract_json", "strip_code_fences"]
