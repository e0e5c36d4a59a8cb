import asyncio
import json
import typing

import httpx
import pytest

from admin_dashboard.client import DashboardClient
from admin_dashboard.config import Settings
from admin_dashboard.credential_store import InMemoryCredentialStore
from admin_dashboard.session_manager import SessionManager

BASE_URL = "http://testserver/api"

ADMIN_USER = {"id": 7, "name": "Ana Admin", "email": "admin@shop.ro", "telefon": "0712345678"}

PRODUCTS = [
    {"id": 1, "title": "Cafea boabe", "price": 49.9, "stock": 12, "categorie": 3},
    {"id": 2, "title": "Ceai verde", "price": 19.5, "stock": 40, "categorie": 4},
]

ORDERS = [
    {
        "id": 101,
        "products": "[1, 2]",
        "status": "pending",
        "price": 69.4,
        "adress": {
            "city": "Cluj",
            "line1": "Str. Lunga 1",
            "line2": None,
            "postal_code": "400000",
            "state": "CJ",
            "country": "RO",
        },
        "email": "client@example.com",
        "date": "2026-10-01",
        "token": "tok",
        "metaid": "m-1",
    }
]


class FakeCatalogServer:
    """
    In-process stand-in for the shop API.

    Access tokens in `valid_access_tokens` pass the bearer check on catalog
    routes. `/auth/verify` accepts any known access token (expired ones
    included) together with a refresh token from `refresh_tokens`.
    """

    def __init__(self):
        self.requests: typing.List[httpx.Request] = []
        self.credentials = {("admin@shop.ro", "secret"): ADMIN_USER}
        self.known_access_tokens = {"T0", "T1"}
        self.valid_access_tokens = {"T1"}
        self.refresh_tokens = {"R1"}
        self.rotate_to: typing.Optional[str] = None
        self.verify_status: typing.Optional[int] = None
        self.verify_gate: typing.Optional[asyncio.Event] = None
        self.logout_status = 200
        self.admin = True
        self.data: typing.Dict[str, typing.Any] = {
            "/api/products": PRODUCTS,
            "/api/orders": ORDERS,
            "/api/categories2": [{"id": 3, "parentId": None, "name": "Bauturi"}],
            "/api/filters2": [{"id": 5, "categoryId": 3, "name": "Aroma"}],
            "/api/getWeightPrices": [{"id": 1, "firstNumber": 0, "secondNumber": 2, "price": 15}],
            "/api/analytics/stats": {"totalRevenue": 1000, "totalOrders": 10, "totalProducts": 2, "pendingOrders": 1},
        }

    def calls(self, path: str) -> typing.List[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api" + path]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if path == "/api/loginDash":
            user = self.credentials.get((body.get("email"), body.get("password")))
            if user is None:
                return httpx.Response(401)
            return httpx.Response(200, json={"access_token": "T1", "refresh_token": "R1", "loggedinuser": user})

        if path == "/api/auth/verify":
            # The answer is decided on arrival, the gate only delays its delivery
            response = self._verify(request, body)
            if self.verify_gate is not None:
                await self.verify_gate.wait()
            return response

        if path == "/api/auth/logout":
            self.refresh_tokens.discard(body.get("refresh_token"))
            return httpx.Response(self.logout_status)

        if path == "/api/forgot-password":
            return httpx.Response(200, json={"message": "Check your inbox for the reset link"})

        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token not in self.valid_access_tokens:
            return httpx.Response(401, json={"detail": "token_expired"})
        if not self.admin:
            return httpx.Response(403, json={"detail": "admin_required"})
        if path in self.data:
            return httpx.Response(200, json=self.data[path])
        return httpx.Response(404, json={"detail": "not_found"})

    def _verify(self, request: httpx.Request, body: typing.Dict[str, typing.Any]) -> httpx.Response:
        if self.verify_status is not None:
            return httpx.Response(self.verify_status, json={"detail": "verify failed"})
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token not in self.known_access_tokens or body.get("refresh_token") not in self.refresh_tokens:
            return httpx.Response(401, json={"detail": "invalid_refresh_token"})
        payload = {"user": ADMIN_USER, "transactions": {"userTransactions": []}}
        if self.rotate_to:
            self.known_access_tokens.add(self.rotate_to)
            self.valid_access_tokens.add(self.rotate_to)
            payload["new_acces_token"] = self.rotate_to
        return httpx.Response(200, json=payload)


@pytest.fixture
def server():
    return FakeCatalogServer()


@pytest.fixture
def transport(server):
    return httpx.MockTransport(server.handler)


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        API_BASE_URL=BASE_URL,
        CREDENTIAL_STORE_PATH=tmp_path / "credentials.json",
        NOTICE_DISMISS_SECONDS=0.05,
    )


@pytest.fixture
async def session_manager(store, transport):
    manager = SessionManager(store, BASE_URL, transport=transport)
    yield manager
    await manager.aclose()


@pytest.fixture
async def dashboard(test_settings, store, transport):
    client = DashboardClient(test_settings, store=store, transport=transport)
    yield client
    await client.aclose()
