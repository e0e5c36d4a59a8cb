# src/admin_dashboard/api.py

import logging
import typing

import httpx

from .credential_store import InMemoryCredentialStore
from .errors import AuthorizationError, InsufficientPrivilegeError, response_detail

logger = logging.getLogger("dashboard.api")


class SessionAuthenticator(typing.Protocol):
    """What the request pipeline needs from the session manager."""

    async def refresh(self) -> typing.Any:
        ...

    async def logout(self) -> None:
        ...


class PendingRequest:
    """An outbound request together with its single retry flag."""

    def __init__(self, request: httpx.Request):
        self.request = request
        self.retried = False
        # Access token the last attempt went out with
        self.sent_token: typing.Optional[str] = None

    def __repr__(self) -> str:
        return f"<PendingRequest {self.request.method} {self.request.url.path} retried={self.retried}>"


class RequestPipeline:
    """
    Shared HTTP client every catalog API call goes through.

    Outbound, it attaches the stored access token as a bearer credential.
    Inbound, a 401 triggers one session refresh followed by one replay of
    the same request; a 401 on the replay is terminal. A 403 signs the
    operator out and surfaces an insufficient privilege error.
    """

    def __init__(
        self,
        authenticator: SessionAuthenticator,
        store: InMemoryCredentialStore,
        base_url: str,
        timeout: float = 10.0,
        transport: typing.Optional[httpx.AsyncBaseTransport] = None,
        notify: typing.Optional[typing.Callable[[str], None]] = None,
    ):
        self._authenticator = authenticator
        self._store = store
        self._notify = notify
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def request(self, method: str, url: str, **kwargs: typing.Any) -> httpx.Response:
        request = self._client.build_request(method, url, **kwargs)
        return await self.send(PendingRequest(request))

    async def get(self, url: str, **kwargs: typing.Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: typing.Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: typing.Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: typing.Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: typing.Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def send(self, pending: PendingRequest) -> httpx.Response:
        pending.sent_token = self._attach_token(pending.request)
        # Transport errors (timeouts included) propagate untouched
        response = await self._client.send(pending.request)
        return await self._handle_response(pending, response)

    def _attach_token(self, request: httpx.Request) -> typing.Optional[str]:
        token = self._store.access_token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return token

    async def _handle_response(self, pending: PendingRequest, response: httpx.Response) -> httpx.Response:
        status_code = response.status_code

        if status_code == 401 and not pending.retried:
            pending.retried = True
            current_token = self._store.access_token
            if current_token and current_token != pending.sent_token:
                # Another request already rotated the token while this one was in flight
                logger.info("401 on %s %s with a superseded token, replaying", pending.request.method, pending.request.url.path)
                return await self.send(pending)
            logger.info("401 on %s %s, refreshing session", pending.request.method, pending.request.url.path)
            # A failed refresh has already signed out, its error ends the chain here
            await self._authenticator.refresh()
            return await self.send(pending)

        if status_code == 401:
            logger.warning("401 after retry on %s %s", pending.request.method, pending.request.url.path)
            raise AuthorizationError.from_response(response, "Not authorized")

        if status_code == 403:
            error = InsufficientPrivilegeError(response_detail(response))
            logger.warning("403 on %s %s, signing out", pending.request.method, pending.request.url.path)
            if self._notify is not None:
                self._notify(str(error))
            await self._authenticator.logout()
            raise error

        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RequestPipeline":
        return self

    async def __aexit__(self, *exc_info: typing.Any) -> None:
        await self.aclose()
