import httpx

from auth.routes import is_auth_route, join_url, resolve_request_url


def test_auth_routes_detected() -> None:
    assert is_auth_route("https://api.designhub.test/api/auth/login")
    assert is_auth_route("/api/auth/refresh")
    assert is_auth_route("/api/auth/logout?all=1")


def test_other_routes_not_auth() -> None:
    assert not is_auth_route("/api/tasks")
    assert not is_auth_route("/api/auth/me")
    assert not is_auth_route("/api/auth/signup")
    assert not is_auth_route("")


def test_match_is_textual() -> None:
    assert is_auth_route("/api/auth/login-audit")
    assert is_auth_route("/api/files?next=/api/auth/logout")


def test_resolve_string_and_url() -> None:
    assert resolve_request_url("/api/tasks") == "/api/tasks"
    assert resolve_request_url(httpx.URL("https://api.designhub.test/api/tasks")) == (
        "https://api.designhub.test/api/tasks"
    )


def test_resolve_request_object() -> None:
    request = httpx.Request("POST", "https://api.designhub.test/api/auth/logout")

    assert resolve_request_url(request) == "https://api.designhub.test/api/auth/logout"


def test_resolve_unknown_target_is_empty() -> None:
    assert resolve_request_url(object()) == ""
    assert resolve_request_url(None) == ""


def test_join_url() -> None:
    assert join_url("https://api.designhub.test/", "/api/auth/refresh") == (
        "https://api.designhub.test/api/auth/refresh"
    )
    assert join_url(None, "/api/auth/refresh") == "/api/auth/refresh"
