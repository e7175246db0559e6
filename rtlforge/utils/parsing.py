"""Shared parsing utilities for model responses."""

import json
import re
from typing import Iterable

from rtlforge.schema import FILE_FIELDS

_FENCE_RE = re.compile(r"\A\s*```(?:json)?[ \t]*\n?(.*?)\n?\s*```\s*\Z", re.DOTALL)


def strip_fences(text: str) -> str:
    """Strip a markdown code fence wrapping the whole LLM output, if present.

    Fences inside the payload (e.g. in a JSON string value) are left alone.
    """
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def parse_json_object(text: str) -> dict:
    """Parse text as a JSON object.

    Raises ValueError (json.JSONDecodeError is a subclass) when the text is
    not JSON or the top-level value is not an object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}.")
    return data


def clean_output(data: dict, requested: Iterable[str] | None = None) -> dict:
    """Keep only keys whose value is truthy and, if given, that were requested.

    The model sometimes emits null or empty entries for deliverables it was
    told to leave out, or fills keys nobody asked for.
    """
    allowed = set(requested) if requested is not None else None
    return {
        key: value
        for key, value in data.items()
        if value and (allowed is None or key in allowed)
    }


def validate_file_entries(data: dict) -> None:
    """Check every entry is an object with string filename/language/code.

    Raises ValueError naming the first offending key.
    """
    for key, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Deliverable '{key}' is not an object.")
        missing = [f for f in FILE_FIELDS if not isinstance(entry.get(f), str)]
        if missing:
            raise ValueError(f"Deliverable '{key}' missing required fields: {missing}")
