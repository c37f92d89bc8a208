"""
Host Result Extraction

Pulls the intraday payload out of a host tool-call result.

A tool result is a mapping shaped like:
    {"structuredContent": {...}, "content": [{"type": "text", "text": "..."}]}

Some hosts wrap the JSON text a second time ({"text": "<json>"}); one
level of that wrapping is undone here.
"""

import json
import logging
from typing import Any, Mapping, Optional

from intraday_schemas.market_data import IntradayPayload

logger = logging.getLogger(__name__)


def _first_text_block(result: Mapping[str, Any]) -> Optional[str]:
    for block in result.get("content") or []:
        if isinstance(block, Mapping) and block.get("type") == "text":
            text = block.get("text")
            return text if isinstance(text, str) else None
    return None


def extract_intraday_payload(result: Optional[Mapping[str, Any]]) -> Optional[IntradayPayload]:
    """
    Extract the intraday payload from a tool result.

    Args:
        result: Tool-call result delivered by the host, or None

    Returns:
        Validated IntradayPayload, or None if the result is absent or
        cannot be decoded
    """
    if not result:
        return None

    try:
        structured = result.get("structuredContent")
        if isinstance(structured, Mapping) and isinstance(structured.get("items"), list):
            return IntradayPayload.model_validate(structured)

        text = _first_text_block(result)
        if text is None:
            return None

        parsed = json.loads(text)
        if isinstance(parsed, dict) and isinstance(parsed.get("text"), str) and "items" not in parsed:
            parsed = json.loads(parsed["text"])

        return IntradayPayload.model_validate(parsed)

    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Failed to extract intraday data: {e}")
        return None
