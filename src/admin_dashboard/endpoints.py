# src/admin_dashboard/endpoints.py

import typing
from typing import Any, Dict, List

from pydantic import TypeAdapter

from .api import RequestPipeline
from .errors import ApiError
from .models import Category, DashboardStats, Filter, Order, Product, WeightPrice

T = typing.TypeVar("T")


class _EndpointGroup:
    def __init__(self, api: RequestPipeline):
        self.api = api

    async def _call(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self.api.request(method, url, **kwargs)
        if response.is_error:
            raise ApiError.from_response(response)
        if not response.content:
            return None
        return response.json()

    async def _one(self, model: typing.Type[T], method: str, url: str, **kwargs: Any) -> T:
        return TypeAdapter(model).validate_python(await self._call(method, url, **kwargs))

    async def _many(self, model: typing.Type[T], url: str, **kwargs: Any) -> List[T]:
        return TypeAdapter(List[model]).validate_python(await self._call("GET", url, **kwargs) or [])


class ProductsApi(_EndpointGroup):
    async def get_all(self) -> List[Product]:
        return await self._many(Product, "/products")

    async def get_by_id(self, product_id: int) -> Product:
        return await self._one(Product, "GET", f"/products/{product_id}")

    async def create(self, data: Dict[str, Any]) -> Product:
        return await self._one(Product, "POST", "/products", json={"data": data})

    async def update(self, product_id: int, data: Dict[str, Any]) -> Product:
        return await self._one(Product, "PUT", f"/products/{product_id}", json={"data": data})

    async def delete(self, product_id: int) -> None:
        await self._call("DELETE", f"/products/{product_id}")

    async def search(self, query: str) -> List[Product]:
        return await self._many(Product, "/search/suggestions", params={"q": query})


class OrdersApi(_EndpointGroup):
    async def get_all(self) -> List[Order]:
        return await self._many(Order, "/orders")

    async def get_by_id(self, order_id: int) -> Order:
        return await self._one(Order, "GET", f"/orders/{order_id}")

    async def update_status(self, order_id: int, status: str) -> Order:
        return await self._one(Order, "PATCH", f"/orders/{order_id}", json={"status": status})

    async def delete(self, order_id: int) -> None:
        await self._call("DELETE", f"/orders/{order_id}")


class CategoriesApi(_EndpointGroup):
    async def get_all(self) -> List[Category]:
        return await self._many(Category, "/categories2")

    async def create(self, data: Dict[str, Any]) -> Category:
        return await self._one(Category, "POST", "/categories", json={"data": data})

    async def update(self, category_id: int, data: Dict[str, Any]) -> Category:
        return await self._one(Category, "PUT", f"/categories/{category_id}", json={"data": data})

    async def delete(self, category_id: int) -> None:
        await self._call("DELETE", f"/categories/{category_id}")


class FiltersApi(_EndpointGroup):
    async def get_all(self) -> List[Filter]:
        return await self._many(Filter, "/filters2")

    async def create(self, data: Dict[str, Any]) -> Filter:
        return await self._one(Filter, "POST", "/filters", json={"data": data})

    async def update(self, filter_id: int, data: Dict[str, Any]) -> Filter:
        return await self._one(Filter, "PUT", f"/filters/{filter_id}", json={"data": data})

    async def delete(self, filter_id: int) -> None:
        await self._call("DELETE", f"/filters/{filter_id}")


class WeightPricesApi(_EndpointGroup):
    async def get_all(self) -> List[WeightPrice]:
        return await self._many(WeightPrice, "/getWeightPrices")

    async def update(self, weight_price_id: int, data: Dict[str, Any]) -> WeightPrice:
        return await self._one(WeightPrice, "PUT", f"/weight-prices/{weight_price_id}", json={"data": data})


class AnalyticsApi(_EndpointGroup):
    async def get_stats(self) -> DashboardStats:
        return await self._one(DashboardStats, "GET", "/analytics/stats")

    # Chart series are passed through as-is
    async def get_revenue_data(self) -> Any:
        return await self._call("GET", "/analytics/revenue")

    async def get_orders_data(self) -> Any:
        return await self._call("GET", "/analytics/orders")
