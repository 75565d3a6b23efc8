"""
Cache Proxy - Value Codec

JSON serialization for values written to network and file stores.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def encode_value(value: Any) -> str:
    """Serialize value to a compact JSON string."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def decode_value(data: str | bytes) -> Any:
    """
    Deserialize a JSON string.

    Data written by other clients may not be JSON; it is returned as text.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    try:
        return json.loads(data)
    except ValueError as e:
        logger.warning(
            f"Failed to decode JSON from cache, returning raw data: {e}",
            extra={"data_preview": data[:100], "error": str(e)},
        )
        return data
