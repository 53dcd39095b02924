"""HTTP helpers for registry lookups.

Callers get a ``(status, headers, body)`` tuple instead of exceptions;
status 0 means no response was received. Each call is a single attempt.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _trace(message: str, **fields: Any) -> None:
    if is_debug_enabled(logger):
        logger.debug(message, extra=extra_context(component="http_client", **fields))


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """GET ``url`` with the configured timeout.

    Returns:
        Tuple of (status_code, headers_dict, body_text). On timeout or
        connection failure status_code is 0 and body_text holds the error.
    """
    target = safe_url(url)
    _trace("HTTP request", event="http_request", action="GET", target=target)
    with Timer() as t:
        try:
            response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, headers=headers, **kwargs)
        except requests.Timeout:
            logger.warning("GET %s timed out after %s seconds", target, Constants.REQUEST_TIMEOUT)
            return 0, {}, f"timed out after {Constants.REQUEST_TIMEOUT} seconds"
        except requests.RequestException as exc:
            logger.warning("GET %s failed: %s", target, exc)
            return 0, {}, str(exc)

    _trace(
        "HTTP response",
        event="http_response",
        action="GET",
        outcome="success" if response.status_code < 400 else "http_error",
        status_code=response.status_code,
        duration_ms=t.duration_ms(),
        target=target,
    )
    return response.status_code, dict(response.headers), response.text


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET ``url`` and decode a JSON body.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none). The body is
        only decoded for a 200 response.
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        return status_code, response_headers, json.loads(text)
    except json.JSONDecodeError:
        _trace(
            "JSON decode error",
            event="parse",
            action="get_json",
            outcome="json_decode_error",
            status_code=status_code,
            target=safe_url(url),
        )
        return status_code, response_headers, None
