from __future__ import annotations

import asyncio
import logging

import httpx

from designhub.constants import LOGGER

from .single_flight import SingleFlight
from .token_store import TokenStore

REFRESH_KEY = "refresh"


def parse_refresh_token(payload) -> str | None:
    if not isinstance(payload, dict):
        return None
    token = payload.get("token")
    if not isinstance(token, str) or not token.strip():
        return None
    return token.strip()


class TokenRefresher:
    """Trade the refresh cookie for a new bearer token, one call at a time.

    Every failure (network error, non-2xx, bad body, empty token, timeout)
    resolves to ``None``.
    """

    def __init__(
        self,
        token_store: TokenStore,
        *,
        http_client: httpx.AsyncClient,
        refresh_url: str,
        single_flight: SingleFlight | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._token_store = token_store
        self._http_client = http_client
        self._refresh_url = refresh_url
        self._flight = single_flight if single_flight is not None else SingleFlight()
        self._timeout = timeout
        self._logger = logger or LOGGER

    @property
    def single_flight(self) -> SingleFlight:
        return self._flight

    async def refresh(self) -> str | None:
        return await self._flight.do(REFRESH_KEY, self._refresh_once)

    async def _refresh_once(self) -> str | None:
        try:
            if self._timeout is None:
                return await self._request_token()
            return await asyncio.wait_for(self._request_token(), self._timeout)
        except asyncio.TimeoutError:
            self._logger.warning("Token refresh timed out after %ss", self._timeout)
            return None
        except Exception:
            self._logger.warning("Token refresh failed", exc_info=True)
            return None

    async def _request_token(self) -> str | None:
        try:
            response = await self._http_client.post(self._refresh_url)
        except httpx.HTTPError as error:
            self._logger.warning("Token refresh request failed: %s", error)
            return None

        if not response.is_success:
            self._logger.info("Token refresh rejected with status %s", response.status_code)
            return None

        try:
            payload = response.json()
        except ValueError:
            self._logger.warning("Token refresh returned a non-JSON body")
            return None

        token = parse_refresh_token(payload)
        if token is None:
            self._logger.warning("Token refresh response carried no token")
            return None

        await self._token_store.set(token)
        self._logger.info("Token refreshed")
        return token
