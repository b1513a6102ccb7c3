"""Request body parsing."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

from puantaj_service.errors import MalformedInput

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_json(content_type: str | None) -> bool:
    media_type = _media_type(content_type)
    return media_type == "application/json" or media_type.endswith("+json")


def parse_body(raw: bytes, content_type: str | None) -> dict[str, Any]:
    """Turn raw request content into a key/value record.

    An empty body is an empty record. Content that is declared JSON but
    cannot be parsed, or is not a JSON object, raises MalformedInput.
    Unrecognised content types yield an empty record.
    """
    if is_json(content_type):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInput() from exc
        if not text.strip():
            return {}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedInput() from exc
        if not isinstance(parsed, dict):
            raise MalformedInput("Request body must be a JSON object")
        return parsed

    if _media_type(content_type) == FORM_CONTENT_TYPE:
        try:
            return dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
        except UnicodeDecodeError as exc:
            raise MalformedInput("Invalid form encoding in request body") from exc

    return {}
