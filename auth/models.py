from __future__ import annotations

from dataclasses import dataclass

USER_ROLES = ("staff", "treasurer", "designer")


class AuthError(RuntimeError):
    def __init__(self, message: str = "Authentication failed.", status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class SessionData:
    token: str | None
    user: dict | None
    role: str | None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None
