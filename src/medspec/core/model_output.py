"""
Recover JSON from vision-model output.

Even with a response schema, models wrap JSON in Markdown fences or
surround it with prose. This module strips that wrapping before the
document enters the pipeline.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from .errors import ModelOutputError

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)```")
_FIRST_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_text(text: str) -> str:
    """Strip fences and surrounding prose, returning the JSON candidate.

    Fences are only stripped when the response opens with one, so backticks
    inside the string values of a bare document are left alone.
    """
    cleaned = text.strip()

    if cleaned.startswith("```"):
        fence = _FENCED_JSON.match(cleaned) or _FENCED_ANY.match(cleaned)
        if fence:
            return fence.group(1).strip()

    if not cleaned.startswith("{"):
        match = _FIRST_OBJECT.search(cleaned)
        if match:
            logger.debug("Extracted JSON object from text response")
            return match.group(0)

    return cleaned


def parse_model_output(text: str) -> Any:
    """Parse the JSON document in a model response.

    Raises:
        ModelOutputError: If no JSON can be recovered.
    """
    candidate = extract_json_text(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        preview = candidate[:80].replace("\n", " ")
        raise ModelOutputError(f"Model output is not valid JSON ({e.msg}): {preview!r}") from e
