from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from designhub.constants import LOGGER
from designhub.http import error_message

from .models import AuthError, SessionData
from .routes import (
    LOGIN_PATH,
    LOGOUT_PATH,
    ME_PATH,
    PASSWORD_CHANGE_PATH,
    SIGNUP_PATH,
    join_url,
)

if TYPE_CHECKING:
    from designhub.client import AuthenticatedClient


class SessionManager:
    """Login, logout and current-user bookkeeping on top of the client."""

    def __init__(self, client: "AuthenticatedClient") -> None:
        self._client = client
        self._store = client.token_store
        self.current_user: dict | None = None
        self._unsubscribe = client.notifier.subscribe(self._on_session_expired)

    def close(self) -> None:
        self._unsubscribe()

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return join_url(self._client.base_url, path)

    async def login(self, email: str, password: str, role: str) -> dict | None:
        return await self._authenticate(LOGIN_PATH, email, password, role, "Login failed")

    async def signup(self, email: str, password: str, role: str) -> dict | None:
        return await self._authenticate(SIGNUP_PATH, email, password, role, "Signup failed")

    async def _authenticate(
        self, path: str, email: str, password: str, role: str, failure: str
    ) -> dict | None:
        # no stored bearer and no refresh-retry for credential exchange
        response = await self._client.http_client.post(
            self._url(path),
            json={"email": email, "password": password, "role": role},
        )
        if not response.is_success:
            raise AuthError(error_message(response, failure), response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        token = data.get("token")
        user = data.get("user")
        if not token or not isinstance(user, dict):
            LOGGER.warning("%s response carried no session", path)
            return None

        await self._store.set_session(token, user, role)
        self.current_user = user
        LOGGER.info("Signed in as %s", user.get("email", email))
        return user

    async def logout(self) -> None:
        try:
            response = await self._client.post(self._url(LOGOUT_PATH))
        except httpx.TransportError as error:
            LOGGER.warning("Logout request failed: %s", error)
        else:
            if not response.is_success:
                LOGGER.warning("Logout returned status %s", response.status_code)
        await self._store.clear()
        self.current_user = None

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the account password, then drop the local session.

        The server revokes every refresh token on success, so the caller has
        to sign in again with the new password.
        """
        current = current_password.strip()
        new = new_password.strip()
        if not current or not new:
            raise AuthError("Current password and new password are required.")
        if len(new) < 6:
            raise AuthError("New password must be at least 6 characters.")
        if current == new:
            raise AuthError("New password must be different from current password.")

        response = await self._client.post(
            self._url(PASSWORD_CHANGE_PATH),
            json={"currentPassword": current, "newPassword": new},
        )
        if not response.is_success:
            raise AuthError(
                error_message(response, "Failed to update password."), response.status_code
            )

        await self._store.clear()
        self.current_user = None
        LOGGER.info("Password changed; signed out")

    async def fetch_current_user(self) -> dict | None:
        response = await self._client.get(self._url(ME_PATH))
        if not response.is_success:
            raise AuthError("Failed to load user", response.status_code)
        try:
            data = response.json()
        except ValueError:
            data = None
        user = data.get("user") if isinstance(data, dict) else None
        if isinstance(user, dict):
            await self._store.set_user(user)
            self.current_user = user
        return user

    async def restore(self) -> SessionData:
        token = await self._store.get()
        if not token:
            await self._store.clear_user()
            self.current_user = None
            return SessionData(token=None, user=None, role=None)
        user = await self._store.get_user()
        role = await self._store.get_role()
        self.current_user = user
        return SessionData(token=token, user=user, role=role)

    async def switch_role(self, role: str) -> dict | None:
        await self._store.set_role(role)
        return await self.update_user(role=role)

    async def update_user(self, **updates) -> dict | None:
        user = self.current_user or await self._store.get_user()
        if user is None:
            return None
        next_user = {**user, **updates}
        await self._store.set_user(next_user)
        self.current_user = next_user
        return next_user

    def _on_session_expired(self) -> None:
        self.current_user = None
