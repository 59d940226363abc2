from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

AUTH_TOKEN_KEY = "auth_token"
AUTH_USER_KEY = "auth_user"
AUTH_ROLE_KEY = "auth_role"
SESSION_KEYS = (AUTH_TOKEN_KEY, AUTH_USER_KEY, AUTH_ROLE_KEY)


class TokenStore(ABC):
    """Persistent home of the bearer token and the user/role tied to it."""

    @abstractmethod
    async def _read(self, key: str):
        raise NotImplementedError

    @abstractmethod
    async def _write(self, values: dict) -> None:
        raise NotImplementedError

    @abstractmethod
    async def _remove(self, keys: tuple[str, ...]) -> None:
        raise NotImplementedError

    async def get(self) -> str | None:
        token = await self._read(AUTH_TOKEN_KEY)
        if not isinstance(token, str) or not token:
            return None
        return token

    async def set(self, token: str) -> None:
        await self._write({AUTH_TOKEN_KEY: token})

    async def clear(self) -> None:
        await self._remove(SESSION_KEYS)

    async def get_user(self) -> dict | None:
        user = await self._read(AUTH_USER_KEY)
        return user if isinstance(user, dict) else None

    async def get_role(self) -> str | None:
        role = await self._read(AUTH_ROLE_KEY)
        return role if isinstance(role, str) and role else None

    async def set_session(self, token: str, user: dict, role: str | None) -> None:
        values: dict = {AUTH_TOKEN_KEY: token, AUTH_USER_KEY: user}
        if role:
            values[AUTH_ROLE_KEY] = role
        await self._write(values)

    async def set_user(self, user: dict) -> None:
        await self._write({AUTH_USER_KEY: user})

    async def set_role(self, role: str) -> None:
        await self._write({AUTH_ROLE_KEY: role})

    async def clear_user(self) -> None:
        await self._remove((AUTH_USER_KEY, AUTH_ROLE_KEY))


class MemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._values: dict = {}
        if token:
            self._values[AUTH_TOKEN_KEY] = token

    async def _read(self, key: str):
        return self._values.get(key)

    async def _write(self, values: dict) -> None:
        self._values.update(values)

    async def _remove(self, keys: tuple[str, ...]) -> None:
        for key in keys:
            self._values.pop(key, None)


class FileTokenStore(TokenStore):
    def __init__(self, path: str | Path = ".designhub-session.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def _read(self, key: str):
        return self._read_all().get(key)

    async def _write(self, values: dict) -> None:
        payload = self._read_all()
        payload.update(values)
        self._write_all(payload)

    async def _remove(self, keys: tuple[str, ...]) -> None:
        payload = self._read_all()
        if not any(key in payload for key in keys):
            return
        for key in keys:
            payload.pop(key, None)
        self._write_all(payload)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise RuntimeError("Session file is invalid; expected top-level JSON object.")
        return raw

    def _write_all(self, payload: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
