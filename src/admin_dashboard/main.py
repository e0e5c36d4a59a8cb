# src/admin_dashboard/main.py

import asyncio
import contextlib
import logging
import typing
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from .client import DashboardClient
from .config import CONFIG_FILE_DIR, settings
from .errors import ApiError, CredentialError
from .logging_setup import configure_logging
from .models import Category, DashboardStats, Filter, Order, Product, WeightPrice
from .session_data import SessionState

logger = logging.getLogger("dashboard.app")

LOGIN_FAILED_NOTICE = "Invalid email or password."
SERVICE_UNAVAILABLE_NOTICE = "The server could not be reached. Please try again."

T = typing.TypeVar("T")


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


templates = Jinja2Templates(directory=str(CONFIG_FILE_DIR / "templates"))


# --- Dependencies ---
def get_dashboard(request: Request) -> DashboardClient:
    return request.app.state.dashboard


async def get_authenticated_dashboard(dashboard: DashboardClient = Depends(get_dashboard)) -> DashboardClient:
    if not dashboard.session.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return dashboard


async def _upstream(call: typing.Awaitable[T]) -> T:
    """Await a catalog API call, turning its failures into HTTP errors for the browser."""
    try:
        return await call
    except ApiError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail or str(e))
    except httpx.RequestError as e:
        logger.warning("Request error calling the catalog API: %s", type(e).__name__)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE_NOTICE)


def create_app(dashboard_factory: typing.Optional[typing.Callable[[], DashboardClient]] = None) -> FastAPI:
    factory = dashboard_factory or (lambda: DashboardClient(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        dashboard = factory()
        app.state.dashboard = dashboard
        logger.info("Admin dashboard starting up, API base URL: %s", settings.API_BASE_URL)
        restore_task = dashboard.session.start_restore()
        yield
        if restore_task is not None and not restore_task.done():
            restore_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await restore_task
        await dashboard.aclose()

    app = FastAPI(
        title="Admin Dashboard",
        description="Operator dashboard for the shop catalog, orders and shipping tiers.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # --- Pages ---
    @app.get("/", response_class=HTMLResponse)
    async def read_root(request: Request, dashboard: DashboardClient = Depends(get_dashboard)):
        return templates.TemplateResponse(
            request,
            "index.html",
            {"session": dashboard.session.state(dashboard.notices.current)},
        )

    # --- Session ---
    @app.get("/api/session", response_model=SessionState)
    async def get_session(dashboard: DashboardClient = Depends(get_dashboard)):
        return dashboard.session.state(dashboard.notices.current)

    @app.post("/login", response_model=SessionState)
    async def login(payload: LoginRequest, dashboard: DashboardClient = Depends(get_dashboard)):
        try:
            await dashboard.session.login(payload.email, payload.password)
        except CredentialError:
            dashboard.notices.post(LOGIN_FAILED_NOTICE)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=LOGIN_FAILED_NOTICE)
        except (ApiError, httpx.RequestError):
            dashboard.notices.post(SERVICE_UNAVAILABLE_NOTICE)
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SERVICE_UNAVAILABLE_NOTICE)
        dashboard.notices.dismiss()
        return dashboard.session.state()

    @app.post("/logout", response_model=SessionState)
    async def logout(dashboard: DashboardClient = Depends(get_dashboard)):
        await dashboard.session.logout()
        return dashboard.session.state(dashboard.notices.current)

    @app.post("/forgot-password")
    async def forgot_password(payload: ForgotPasswordRequest, dashboard: DashboardClient = Depends(get_dashboard)):
        if not payload.email.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required.")
        message = await _upstream(dashboard.session.forgot_password(payload.email))
        if message:
            dashboard.notices.post(message)
        return {"message": message}

    # --- Catalog views ---
    @app.get("/api/products", response_model=typing.List[Product])
    async def list_products(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.products.get_all())

    @app.get("/api/orders", response_model=typing.List[Order])
    async def list_orders(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.orders.get_all())

    @app.get("/api/categories", response_model=typing.List[Category])
    async def list_categories(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.categories.get_all())

    @app.get("/api/filters", response_model=typing.List[Filter])
    async def list_filters(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.filters.get_all())

    @app.get("/api/weight-prices", response_model=typing.List[WeightPrice])
    async def list_weight_prices(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.weight_prices.get_all())

    @app.get("/api/analytics/stats", response_model=DashboardStats)
    async def analytics_stats(dashboard: DashboardClient = Depends(get_authenticated_dashboard)):
        return await _upstream(dashboard.analytics.get_stats())

    return app


app = create_app()
