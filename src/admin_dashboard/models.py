# src/admin_dashboard/models.py

from typing import Optional

from pydantic import BaseModel, ConfigDict


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Product(_ApiModel):
    id: int
    stock: int = 0
    sku: str = ""
    ean: str = ""
    title: str
    description: str = ""
    specs: str = ""
    characteristics: str = ""
    price: float
    mainImg: str = ""
    galleryImgs: str = ""
    categorie: Optional[int] = None
    weight: float = 0
    discount: float = 0


class Filter(_ApiModel):
    id: int
    categoryId: int
    name: str


class WeightPrice(_ApiModel):
    id: int
    firstNumber: float
    secondNumber: float
    price: float


class Category(_ApiModel):
    id: int
    parentId: Optional[int] = None
    name: str


class Address(_ApiModel):
    city: str
    line1: str
    line2: Optional[str] = None
    postal_code: str
    state: str
    country: str


class Order(_ApiModel):
    id: int
    products: str
    status: str
    price: float
    # field name as sent by the API
    adress: Optional[Address] = None
    email: str
    date: str
    token: Optional[str] = None
    metaid: Optional[str] = None


class DashboardStats(_ApiModel):
    totalRevenue: float = 0
    totalOrders: int = 0
    totalProducts: int = 0
    pendingOrders: int = 0
