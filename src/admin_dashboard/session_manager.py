# src/admin_dashboard/session_manager.py

import asyncio
import logging
import typing

import httpx

from .credential_store import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, InMemoryCredentialStore
from .errors import ApiError, CredentialError, MissingTokensError
from .session_data import LoginResponse, SessionState, User, VerifyResponse

logger = logging.getLogger("dashboard.session")


def _raise_for_status(response: httpx.Response, message: str) -> None:
    # 4xx means the server rejected the credentials, anything else is a generic failure
    if response.is_success:
        return
    if 400 <= response.status_code < 500:
        raise CredentialError.from_response(response, message)
    raise ApiError.from_response(response, message)


class SessionManager:
    """
    Single source of truth for who is logged in.

    Owns the operator identity and mediates every token transition (login,
    refresh, logout) against the auth endpoints. The Credential Store is only
    written from here.

    `refresh()` is single-flight: callers arriving while a refresh is in
    progress wait for that refresh and share its outcome.
    """

    def __init__(
        self,
        store: InMemoryCredentialStore,
        base_url: str,
        timeout: float = 10.0,
        transport: typing.Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._store = store
        # Auth endpoints are called directly, never through the request pipeline
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.user: typing.Optional[User] = None
        self.transactions: typing.Optional[typing.Any] = None
        self.is_loading = False
        self._refresh_task: typing.Optional[asyncio.Task] = None
        # Bumped whenever the session is replaced or ended, so late refresh results can be discarded
        self._generation = 0

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def state(self, notice: typing.Optional[str] = None) -> SessionState:
        return SessionState(
            user=self.user,
            transactions=self.transactions,
            is_authenticated=self.is_authenticated,
            is_loading=self.is_loading,
            notice=notice,
        )

    async def login(self, email: str, password: str) -> User:
        self.is_loading = True
        try:
            response = await self._client.post("/loginDash", json={"email": email, "password": password})
            _raise_for_status(response, "Login failed")
            try:
                data = LoginResponse.model_validate(response.json())
            except ValueError as e:
                raise ApiError(response.status_code, None, "Malformed login response") from e
        except Exception as e:
            # Payload and credentials stay out of the logs
            logger.warning("Login failed: %s", type(e).__name__)
            raise
        finally:
            self.is_loading = False

        self._generation += 1
        self._store.set(ACCESS_TOKEN_KEY, data.access_token)
        self._store.set(REFRESH_TOKEN_KEY, data.refresh_token)
        self.user = data.loggedinuser
        self.transactions = None
        logger.info("Login succeeded for user id=%s", self.user.id)
        return self.user

    async def logout(self) -> None:
        """Sign out locally, telling the server on a best-effort basis. Never raises."""
        refresh_token = self._store.refresh_token
        self._generation += 1
        try:
            if refresh_token:
                await self._client.post("/auth/logout", json={"refresh_token": refresh_token})
        except Exception as e:
            logger.warning("Logout notification failed: %s", type(e).__name__)
        finally:
            self.user = None
            self.transactions = None
            try:
                self._store.clear()
            except OSError:
                logger.exception("Could not wipe the credential store")
            logger.info("Session cleared")

    async def refresh(self) -> User:
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._refresh())
        else:
            logger.debug("Joining refresh already in flight")
        # A cancelled waiter must not cancel the refresh the others are waiting on
        return await asyncio.shield(self._refresh_task)

    async def _refresh(self) -> User:
        try:
            access_token = self._store.access_token
            refresh_token = self._store.refresh_token
            generation = self._generation
            if not access_token or not refresh_token:
                logger.info("Refresh requested without tokens, signing out")
                await self.logout()
                raise MissingTokensError()

            try:
                response = await self._client.post(
                    "/auth/verify",
                    json={"refresh_token": refresh_token},
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                _raise_for_status(response, "Session refresh rejected")
                try:
                    data = VerifyResponse.model_validate(response.json())
                except ValueError as e:
                    raise ApiError(response.status_code, None, "Malformed verify response") from e
            except Exception as e:
                logger.warning("Session refresh failed: %s", type(e).__name__)
                # A newer session must not be signed out by a stale refresh
                if generation == self._generation:
                    await self.logout()
                raise

            if generation != self._generation:
                logger.info("Session changed while refreshing, discarding the verify response")
                raise CredentialError(401, None, "Session ended during refresh")

            self.user = data.user
            self.transactions = data.transactions
            if data.new_acces_token:
                self._store.set(ACCESS_TOKEN_KEY, data.new_acces_token)
                logger.info("Access token rotated")
            return self.user
        finally:
            self._refresh_task = None

    def start_restore(self) -> typing.Optional[asyncio.Task]:
        """
        Kick off startup restoration in the background.
        `is_loading` is raised before returning so no request observes the
        unauthenticated state while the restoration is pending.
        """
        if not self._store.access_token:
            return None
        self.is_loading = True
        return asyncio.ensure_future(self.restore())

    async def restore(self) -> bool:
        """Restore the persisted session. Returns whether it is authenticated afterwards."""
        if not self._store.access_token:
            return False
        self.is_loading = True
        try:
            await self.refresh()
        except Exception as e:
            # refresh() has already signed out
            logger.info("Session restoration failed: %s", type(e).__name__)
        finally:
            self.is_loading = False
        return self.is_authenticated

    async def forgot_password(self, email: str) -> typing.Optional[str]:
        response = await self._client.post("/forgot-password", json={"email": email})
        if response.is_error:
            raise ApiError.from_response(response, "Password reset request failed")
        try:
            body = response.json()
        except ValueError:
            return None
        return body.get("message") if isinstance(body, dict) else None

    async def aclose(self) -> None:
        await self._client.aclose()
