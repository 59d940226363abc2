import cli
from auth import events, refresh, session
from designhub import client, constants


EXPECTED_CLI_EXPORTS = (
    "create_client",
    "main",
    "login",
    "signup",
    "logout",
    "me",
    "change_password",
    "request",
)


def test_cli_export_surface() -> None:
    missing = [name for name in EXPECTED_CLI_EXPORTS if not hasattr(cli, name)]
    assert missing == []


def test_client_methods() -> None:
    for name in ("request", "refresh_token", "clear_session", "get", "post", "aclose"):
        assert callable(getattr(client.AuthenticatedClient, name))


def test_modules_share_one_logger() -> None:
    for module in (events, refresh, session, client):
        assert module.LOGGER is constants.LOGGER
