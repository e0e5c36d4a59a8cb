# src/admin_dashboard/client.py

import typing

import httpx

from .api import RequestPipeline
from .config import Settings
from .credential_store import FileCredentialStore, InMemoryCredentialStore
from .endpoints import AnalyticsApi, CategoriesApi, FiltersApi, OrdersApi, ProductsApi, WeightPricesApi
from .notices import NoticeBoard, sticky_messages
from .session_manager import SessionManager


class DashboardClient:
    """
    Wires the credential store, session manager, request pipeline and the
    endpoint groups together. One instance per running dashboard.
    """

    def __init__(
        self,
        settings: Settings,
        store: typing.Optional[InMemoryCredentialStore] = None,
        transport: typing.Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store = store if store is not None else FileCredentialStore(settings.CREDENTIAL_STORE_PATH)
        self.notices = NoticeBoard(
            dismiss_after=settings.NOTICE_DISMISS_SECONDS,
            is_sticky=sticky_messages(settings.STICKY_NOTICES),
        )
        self.session = SessionManager(
            self.store,
            settings.API_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.api = RequestPipeline(
            self.session,
            self.store,
            settings.API_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
            notify=self.notices.post,
        )

        self.products = ProductsApi(self.api)
        self.orders = OrdersApi(self.api)
        self.categories = CategoriesApi(self.api)
        self.filters = FiltersApi(self.api)
        self.weight_prices = WeightPricesApi(self.api)
        self.analytics = AnalyticsApi(self.api)

    async def aclose(self) -> None:
        await self.api.aclose()
        await self.session.aclose()
