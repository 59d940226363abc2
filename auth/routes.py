from __future__ import annotations

import httpx

LOGIN_PATH = "/api/auth/login"
SIGNUP_PATH = "/api/auth/signup"
REFRESH_PATH = "/api/auth/refresh"
LOGOUT_PATH = "/api/auth/logout"
ME_PATH = "/api/auth/me"
PASSWORD_CHANGE_PATH = "/api/auth/password/change"

# Plain substring match: "/api/auth/login-audit" counts as an auth route too.
AUTH_ROUTE_MARKERS = (LOGIN_PATH, REFRESH_PATH, LOGOUT_PATH)


def is_auth_route(url: str) -> bool:
    return any(marker in url for marker in AUTH_ROUTE_MARKERS)


def resolve_request_url(target) -> str:
    if isinstance(target, str):
        return target
    if isinstance(target, httpx.URL):
        return str(target)
    url = getattr(target, "url", None)
    if url is None:
        return ""
    return str(url)


def join_url(base_url: str | None, path: str) -> str:
    if not base_url:
        return path
    return f"{base_url.rstrip('/')}{path}"
