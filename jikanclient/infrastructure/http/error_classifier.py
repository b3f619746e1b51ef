"""Maps non-2xx HTTP responses to classified ApiErrors."""

import json
import logging
from typing import Any, Optional

import httpx

from jikanclient.domain.errors import ApiError

logger = logging.getLogger(__name__)


def is_retryable_status(status_code: int) -> bool:
    """True for statuses where resending the same request may succeed (429, 5xx)."""
    return status_code == 429 or 500 <= status_code < 600


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def classify_response(response: httpx.Response) -> ApiError:
    """Builds an ApiError from a non-2xx response.

    The API reports failures as ``{"status", "message", "type", "error"}``.
    When the body is not such an object, the message falls back to the
    status line's reason phrase. The status code always comes from the
    response, never from the body.
    """
    status = response.status_code
    message = ""
    error_type = None
    detail = None
    try:
        payload = json.loads(response.content)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = _optional_str(payload.get("message")) or ""
        error_type = _optional_str(payload.get("type"))
        detail = _optional_str(payload.get("error"))
    else:
        logger.debug(f"Error body for HTTP {status} is not a JSON object; using reason phrase.")
    if not message:
        message = httpx.codes.get_reason_phrase(status)
    return ApiError(status=status, message=message, type=error_type, detail=detail)
