"""Extraction of the lesson JSON object from a free-text LLM reply.

Contract: code-fence markers are removed, then the reply must contain
exactly one top-level JSON object. Text around it is ignored. No object,
or more than one, raises ``GenerationError``.
"""

import json
import re
from typing import Any, Dict, List

from ..errors import GenerationError


PARSE_FAILURE_MESSAGE = "Failed to parse lesson JSON"

_FENCE_RE = re.compile(r"```json|```")

_decoder = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def find_json_objects(text: str) -> List[Dict[str, Any]]:
    """Return every top-level JSON object embedded in ``text``, in order."""
    found: List[Dict[str, Any]] = []
    pos = text.find("{")
    while pos != -1:
        try:
            value, end = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            pos = text.find("{", pos + 1)
            continue
        found.append(value)
        pos = text.find("{", end)
    return found


def extract_json_object(text: str) -> Dict[str, Any]:
    objects = find_json_objects(strip_code_fences(text))
    if not objects:
        raise GenerationError(PARSE_FAILURE_MESSAGE)
    if len(objects) > 1:
        raise GenerationError(f"{PARSE_FAILURE_MESSAGE}: reply contains {len(objects)} JSON objects")
    return objects[0]
