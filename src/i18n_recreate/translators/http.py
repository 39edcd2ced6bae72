"""
HTTP helpers shared by the provider translators.
"""

from typing import Any

import httpx

from i18n_recreate.exceptions import TranslationFailure


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 60.0),
            read=timeout_config.get('read', 120.0),
            pool=timeout_config.get('pool', 10.0),
        )
    timeout_value = float(timeout_config) if timeout_config else 120.0
    return httpx.Timeout(
        connect=10.0,
        write=60.0,
        read=timeout_value,
        pool=10.0,
    )


def _error_text(response: httpx.Response) -> str:
    try:
        error_json = response.json()
    except ValueError:
        return response.text[:500] or "No details"

    if isinstance(error_json, dict) and "error" in error_json:
        error_detail = error_json["error"]
        if isinstance(error_detail, dict):
            return error_detail.get("message", str(error_detail))
        return str(error_detail)
    return response.text[:500] or "No details"


def http_error_failure(e: httpx.HTTPStatusError, provider: str, text: str, target_language: str) -> TranslationFailure:
    """Build a TranslationFailure carrying the HTTP status of a failed call."""
    status_code = e.response.status_code
    failure = TranslationFailure(
        text,
        target_language,
        f"{provider} API error ({status_code}): {_error_text(e.response)}",
        retryable=status_code not in (400, 401, 403),
    )
    failure.details['status_code'] = status_code
    return failure
