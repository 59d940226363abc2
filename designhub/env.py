from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .constants import DEFAULT_TIMEOUT, DEFAULT_TOKEN_STORE_PATH, LOGGER

API_URL_KEYS = ("DESIGNHUB_API_URL", "DESIGNHUB_API_BASE_URL")

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_float(key: str, default: float | None) -> float | None:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number.")


def load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    from dotenv import load_dotenv

    load_dotenv(env_path, override=False)


def get_api_url() -> str | None:
    for key in API_URL_KEYS:
        value = os.getenv(key, "").strip()
        if value:
            return value
    return None


def validate_api_url(url: str) -> str:
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError:
        raise RuntimeError(
            f"API URL must be a valid http(s) URL (for example: https://api.designhub.example); got {url!r}."
        )
    return url.rstrip("/")


def resolve_api_url() -> str:
    url = get_api_url()
    if url is None:
        raise RuntimeError(
            f"Missing API URL; set one of: {', '.join(API_URL_KEYS)}"
        )
    return validate_api_url(url)


def get_timeout() -> float:
    return _get_env_float("DESIGNHUB_TIMEOUT", DEFAULT_TIMEOUT)


def get_refresh_timeout() -> float | None:
    return _get_env_float("DESIGNHUB_REFRESH_TIMEOUT", None)


def get_token_store_path() -> Path:
    raw = os.getenv("DESIGNHUB_TOKEN_STORE_PATH", "").strip()
    return Path(raw or DEFAULT_TOKEN_STORE_PATH)


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("DESIGNHUB_DEBUG", "0"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
