"""
Small utilities: data URI handling and JSON extraction from model text.

Rationale:
- Images travel through the pipeline as self-describing data URIs, so the
  model client has to split them into (mime_type, bytes) and back.
- Models sometimes wrap JSON in markdown fences even in JSON mode; extract the
  outermost object instead of trusting the raw text.
"""

import base64
import binascii
import json
import re
from typing import Any, Dict, Tuple

IMAGE_DATA_URI_PREFIX = "data:image/"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[^,;]*)*),(?P<data>.*)$", re.DOTALL)


def is_image_data_uri(value: Any) -> bool:
    """True if value looks like `data:image/<type>...,<payload>` with a non-empty payload."""
    if not isinstance(value, str) or not value.startswith(IMAGE_DATA_URI_PREFIX):
        return False
    _, sep, data = value.partition(",")
    return bool(sep) and bool(data.strip())


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a data URI into (mime_type, raw bytes).
    Raises ValueError if the URI is malformed or the base64 payload is invalid.
    """
    match = _DATA_URI_RE.match(uri)
    if not match:
        raise ValueError("Not a data URI")

    mime_type = match.group("mime").lower()
    params = match.group("params")
    data = match.group("data")

    if ";base64" in params.lower():
        try:
            return mime_type, base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 payload: {e}")
    return mime_type, data.encode("utf-8")


def to_data_uri(mime_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def preview(value: str, limit: int = 50) -> str:
    """Short prefix of a (possibly huge) string, for log lines."""
    if len(value) <= limit:
        return value
    return f"{value[:limit]}... ({len(value)} chars)"


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Extract the outermost JSON object from model text.
    Handles markdown code blocks and raw JSON with nested braces.
    """
    text = text.strip()

    if "```" in text:
        match = re.search(r"```json\s*([\s\S]*?)\s*```", text, re.IGNORECASE)
        if match:
            text = match.group(1).strip()
        else:
            text = re.sub(r"```\w*\s*", "", text)
            text = text.replace("```", "")

    start = text.find("{")
    if start == -1:
        raise json.JSONDecodeError("No JSON object found", text, 0)

    # Count braces outside of string literals to find the matching close
    depth = 0
    in_string = False
    i = start
    end = -1

    while i < len(text):
        char = text[i]

        if in_string:
            if char == "\\" and i + 1 < len(text):
                i += 2
                continue
            elif char == '"':
                in_string = False
        else:
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
        i += 1

    if end == -1:
        raise json.JSONDecodeError("Unmatched braces in JSON", text, start)

    return json.loads(text[start:end + 1])
