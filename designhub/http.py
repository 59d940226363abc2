from __future__ import annotations

import logging

import httpx

from .constants import BODY_LOG_LIMIT, LOGGER


def bearer_headers(headers=None, token: str | None = None) -> httpx.Headers:
    merged = httpx.Headers(headers or {})
    if token:
        merged["Authorization"] = f"Bearer {token}"
    return merged


def _friendly_error_message(status_code: int) -> str:
    if status_code == 401:
        return "Your session has expired. Please sign in again."
    if status_code == 403:
        return "You don't have permission to perform this action."
    if status_code == 404:
        return "The requested resource was not found."
    if status_code == 429:
        return "Too many requests. Please wait and try again."
    if status_code >= 500:
        return "DesignHub is experiencing issues. Please try again later."
    return f"Request failed with status {status_code}."


def error_message(response: httpx.Response, default: str | None = None) -> str:
    """Pick the message to show for a failed response.

    The server's ``{"error": "..."}`` wins; otherwise ``default``, otherwise a
    generic message for the status code.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    if default:
        return default
    return _friendly_error_message(response.status_code)


def build_event_hooks(debug_enabled: bool, logger: logging.Logger | None = None) -> dict:
    log = logger or LOGGER

    async def log_request(request: httpx.Request) -> None:
        if not debug_enabled:
            return
        log.info("DesignHub request %s %s", request.method, request.url)

    async def log_response(response: httpx.Response) -> None:
        if not debug_enabled:
            return
        log.info(
            "DesignHub response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        if response.status_code >= 400:
            body = await response.aread()
            text = body.decode("utf-8", errors="replace")
            if len(text) > BODY_LOG_LIMIT:
                text = text[:BODY_LOG_LIMIT] + "...<truncated>"
            log.warning("DesignHub error body: %s", text)

    return {"request": [log_request], "response": [log_response]}
