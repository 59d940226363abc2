from __future__ import annotations

import logging

import httpx

from auth.events import SessionExpiredNotifier, session_expired
from auth.refresh import TokenRefresher
from auth.routes import REFRESH_PATH, is_auth_route, join_url, resolve_request_url
from auth.single_flight import SingleFlight
from auth.token_store import TokenStore

from .constants import DEFAULT_TIMEOUT, LOGGER, USER_AGENT
from .http import bearer_headers


class AuthenticatedClient:
    """Send DesignHub API requests with the stored bearer token.

    A 401 from a non-auth route triggers one shared token refresh and a
    single retry. If that does not recover the session, the token store is
    cleared and the session-expired notifier fires. Callers always get a real
    response back; only transport errors raise.
    """

    def __init__(
        self,
        token_store: TokenStore,
        *,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        refresher: TokenRefresher | None = None,
        notifier: SessionExpiredNotifier | None = None,
        single_flight: SingleFlight | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        refresh_timeout: float | None = None,
        event_hooks: dict | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._token_store = token_store
        self._base_url = base_url.rstrip("/") if base_url else None
        self._owns_http_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(
            base_url=self._base_url or "",
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            event_hooks=event_hooks or {},
        )
        self._notifier = notifier if notifier is not None else session_expired
        self._logger = logger or LOGGER
        if refresher is None:
            refresher = TokenRefresher(
                token_store,
                http_client=self._http,
                refresh_url=join_url(self._base_url, REFRESH_PATH),
                single_flight=single_flight,
                timeout=refresh_timeout,
                logger=self._logger,
            )
        self._refresher = refresher

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    @property
    def notifier(self) -> SessionExpiredNotifier:
        return self._notifier

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http

    @property
    def base_url(self) -> str | None:
        return self._base_url

    async def request(self, target, method: str = "GET", **kwargs) -> httpx.Response:
        request_url = resolve_request_url(target)
        token = await self._token_store.get()
        first_response = await self._send(target, method, token, kwargs)
        if first_response.status_code != 401 or is_auth_route(request_url):
            return first_response

        self._logger.info("Got 401 for %s; refreshing session token", request_url)
        refreshed_token = await self.refresh_token()
        if not refreshed_token:
            await self.clear_session()
            return first_response

        retry_response = await self._send(target, method, refreshed_token, kwargs)
        if retry_response.status_code == 401:
            self._logger.warning("Retry of %s still unauthorized", request_url)
            await self.clear_session()
        return retry_response

    async def refresh_token(self) -> str | None:
        return await self._refresher.refresh()

    async def clear_session(self) -> None:
        self._logger.warning("Session expired; clearing stored credentials")
        await self._token_store.clear()
        self._notifier.emit()

    async def get(self, target, **kwargs) -> httpx.Response:
        return await self.request(target, "GET", **kwargs)

    async def post(self, target, **kwargs) -> httpx.Response:
        return await self.request(target, "POST", **kwargs)

    async def put(self, target, **kwargs) -> httpx.Response:
        return await self.request(target, "PUT", **kwargs)

    async def patch(self, target, **kwargs) -> httpx.Response:
        return await self.request(target, "PATCH", **kwargs)

    async def delete(self, target, **kwargs) -> httpx.Response:
        return await self.request(target, "DELETE", **kwargs)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _send(self, target, method: str, token: str | None, options: dict) -> httpx.Response:
        if isinstance(target, httpx.Request):
            # build_request merges the client's cookies and default headers
            request = self._http.build_request(
                target.method,
                target.url,
                headers=bearer_headers(target.headers, token),
                content=target.content,
                extensions=target.extensions,
            )
            return await self._http.send(request)

        options = dict(options)
        headers = bearer_headers(options.pop("headers", None), token)
        return await self._http.request(method, target, headers=headers, **options)
