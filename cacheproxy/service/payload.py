"""
Cache Proxy - Payload Interpretation

Text bodies pass through untouched. Structured bodies are parsed, but only
when they look structured: a string is decoded as JSON when it starts with
"{" and ends with "}" (or "[" and "]"). Anything else stays opaque text even
under a JSON content type.
"""

import json
import logging
from typing import Any

from ..errors import InvalidRequestError

logger = logging.getLogger(__name__)

_TEXT_TYPES = {"txt", "text", "text/plain"}
_BRACKETS = {"{": "}", "[": "]"}


def _normalize_content_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower()


def looks_structured(content: str) -> bool:
    """True if content starts with an opening bracket and ends with its match."""
    content = content.strip()
    if len(content) < 2:
        return False
    return _BRACKETS.get(content[0]) == content[-1]


def interpret_payload(body: Any, content_type: str | None = None) -> Any:
    """
    Turn a request body into the value to cache.

    Args:
        body: Raw body (str/bytes) or an already-decoded payload
        content_type: Declared content type ("txt", "json", a MIME type, or None)

    Returns:
        The payload value

    Raises:
        InvalidRequestError: If a structured-looking body is not valid JSON
    """
    if body is None:
        return None

    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8")

    if _normalize_content_type(content_type) in _TEXT_TYPES:
        return body

    if not isinstance(body, str):
        return body

    if not looks_structured(body):
        return body

    try:
        return json.loads(body)
    except ValueError as e:
        logger.debug(f"Rejected malformed structured payload: {e}")
        raise InvalidRequestError(
            f"Invalid JSON payload: {e}",
            details={"content_type": content_type},
        ) from e
