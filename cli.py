from __future__ import annotations

import asyncio
import json

import click
import httpx

from auth.events import session_expired
from auth.models import USER_ROLES
from auth.session import SessionManager
from auth.token_store import FileTokenStore
from designhub.client import AuthenticatedClient
from designhub.constants import HTTP_METHODS, LOGGER
from designhub.env import (
    get_refresh_timeout,
    get_timeout,
    get_token_store_path,
    load_env,
    resolve_api_url,
    setup_logging,
)
from designhub.http import build_event_hooks


def create_client() -> AuthenticatedClient:
    load_env()
    debug_enabled = setup_logging()
    base_url = resolve_api_url()
    token_store = FileTokenStore(get_token_store_path())
    return AuthenticatedClient(
        token_store,
        base_url=base_url,
        timeout=get_timeout(),
        refresh_timeout=get_refresh_timeout(),
        event_hooks=build_event_hooks(debug_enabled, LOGGER),
        notifier=session_expired,
    )


def _run(command):
    async def runner():
        client = create_client()
        try:
            return await command(client)
        finally:
            await client.aclose()

    try:
        return asyncio.run(runner())
    except httpx.TransportError as error:
        raise click.ClickException(f"Request failed: {error}")
    except RuntimeError as error:
        raise click.ClickException(str(error))


def _echo_user(user: dict | None) -> None:
    if user is None:
        click.echo("No user returned.")
        return
    click.echo(json.dumps(user, indent=2, sort_keys=True))


@click.group()
def main() -> None:
    """DesignHub API client."""


@main.command()
@click.argument("email")
@click.option("--role", type=click.Choice(USER_ROLES), default="staff", show_default=True)
@click.password_option(confirmation_prompt=False)
def login(email: str, role: str, password: str) -> None:
    """Sign in and store the session token."""

    async def command(client: AuthenticatedClient):
        with SessionManager(client) as manager:
            return await manager.login(email, password, role)

    _echo_user(_run(command))


@main.command()
@click.argument("email")
@click.option("--role", type=click.Choice(USER_ROLES), default="staff", show_default=True)
@click.password_option()
def signup(email: str, role: str, password: str) -> None:
    """Create an account and store the session token."""

    async def command(client: AuthenticatedClient):
        with SessionManager(client) as manager:
            return await manager.signup(email, password, role)

    _echo_user(_run(command))


@main.command()
def logout() -> None:
    """Revoke the session and forget the stored token."""

    async def command(client: AuthenticatedClient):
        with SessionManager(client) as manager:
            await manager.logout()

    _run(command)
    click.echo("Signed out.")


@main.command()
def me() -> None:
    """Show the signed-in user."""

    async def command(client: AuthenticatedClient):
        with SessionManager(client) as manager:
            return await manager.fetch_current_user()

    _echo_user(_run(command))


@main.command("change-password")
@click.option("--current-password", prompt=True, hide_input=True)
@click.option("--new-password", prompt=True, hide_input=True, confirmation_prompt=True)
def change_password(current_password: str, new_password: str) -> None:
    """Change the account password and sign out."""

    async def command(client: AuthenticatedClient):
        with SessionManager(client) as manager:
            await manager.change_password(current_password, new_password)

    _run(command)
    click.echo("Password updated. Please sign in again.")


@main.command()
@click.argument("path")
@click.option(
    "--method",
    "-X",
    type=click.Choice(sorted(method.upper() for method in HTTP_METHODS), case_sensitive=False),
    default="GET",
    show_default=True,
)
@click.option("--json", "json_body", type=str, default=None, help="JSON request body.")
def request(path: str, method: str, json_body: str | None) -> None:
    """Send an authenticated request to PATH and print the response."""
    options = {}
    if json_body is not None:
        try:
            options["json"] = json.loads(json_body)
        except ValueError as error:
            raise click.BadParameter(f"invalid JSON: {error}", param_hint="--json")

    async def command(client: AuthenticatedClient):
        response = await client.request(path, method.upper(), **options)
        return response.status_code, response.text

    status_code, text = _run(command)
    click.echo(f"HTTP {status_code}")
    if text:
        click.echo(text)
    if status_code >= 400:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
