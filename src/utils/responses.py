"""
JSON response encoding shared by every API route
"""

import json
import logging
from typing import Any

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Characters that could break out of an HTML <script> or attribute context
_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def html_safe_dumps(content: Any) -> str:
    """Serialize to compact JSON with HTML-sensitive characters unicode-escaped"""
    text = json.dumps(content, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


class HTMLSafeJSONResponse(JSONResponse):
    """JSONResponse whose body is safe to embed in an HTML page"""

    def render(self, content: Any) -> bytes:
        return html_safe_dumps(content).encode("utf-8")


def respond_json(payload: Any, status_code: int = 200) -> HTMLSafeJSONResponse:
    """
    Encode any route result (models, lists, dicts) as an HTML-safe JSON response.

    The body is rendered here, before anything is sent, so an encoding failure
    becomes a clean 500 instead of a truncated body.
    """
    try:
        return HTMLSafeJSONResponse(content=jsonable_encoder(payload), status_code=status_code)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to encode response payload: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="encode error")
