from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime, date
from config import DEFAULT_LOW_STOCK_THRESHOLD

RoleName = Literal["Manager", "Staff", "Cashier"]


# -------------------- Auth --------------------
class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    username: str
    role: RoleName


class CurrentUser(BaseModel):
    username: str
    role: RoleName

    model_config = ConfigDict(from_attributes=True)


# -------------------- Products --------------------
class ProductBase(BaseModel):
    name: str
    quantity: int = Field(0, ge=0)
    purchase_price: float = Field(0.0, ge=0)
    selling_price: float = Field(0.0, ge=0)
    low_stock_threshold: int = Field(DEFAULT_LOW_STOCK_THRESHOLD, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Product name cannot be empty.")
        return value


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    purchase_price: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Product name cannot be empty.")
        return value


class Product(ProductBase):
    product_id: int
    is_low_stock: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------------------- Sales --------------------
class SaleCreate(BaseModel):
    product_id: int
    quantity: int


class Sale(BaseModel):
    sale_id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    total_price: float
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class SalesHistory(BaseModel):
    timeframe: str
    total_sales: float
    sales: List[Sale]


# -------------------- Suppliers --------------------
class SupplierBase(BaseModel):
    name: str
    contact_info: Optional[str] = ""
    address: Optional[str] = ""
    notes: Optional[str] = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Supplier name cannot be empty.")
        return value


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    name: Optional[str] = None
    contact_info: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Supplier name cannot be empty.")
        return value


class Supplier(SupplierBase):
    supplier_id: int

    model_config = ConfigDict(from_attributes=True)


# -------------------- Purchase Orders --------------------
class PurchaseOrderCreate(BaseModel):
    product_id: int
    supplier_id: int
    quantity: int = Field(..., gt=0)
    purchase_price: float = Field(..., ge=0)
    date: Optional[datetime] = None


class PurchaseOrder(BaseModel):
    order_id: int
    product_id: Optional[int] = None
    supplier_id: Optional[int] = None
    product_name: str
    supplier_name: str
    quantity: int
    purchase_price: float
    total_cost: float
    date: datetime

    model_config = ConfigDict(from_attributes=True)


# -------------------- Users --------------------
class UserCreate(BaseModel):
    username: str
    password: str
    role: RoleName = "Staff"


class UserUpdate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[RoleName] = None


class User(BaseModel):
    user_id: int
    username: str
    role: RoleName
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------------------- Reports --------------------
class DailySales(BaseModel):
    date: date
    amount: float


class SalesReport(BaseModel):
    timeframe: str
    total_sales: float
    average_daily_sales: float
    daily_sales: List[DailySales]


class InventoryStatus(BaseModel):
    name: str
    quantity: int
    low_stock_threshold: int
    is_low_stock: bool


class InventoryReport(BaseModel):
    total_products: int
    low_stock_count: int
    products: List[InventoryStatus]


# -------------------- Settings & Notifications --------------------
class Settings(BaseModel):
    username: str
    role: RoleName
    dark_mode: bool
    notifications_enabled: bool
    version: str


class SettingsUpdate(BaseModel):
    dark_mode: bool


class Notification(BaseModel):
    identifier: str
    title: str
    body: str
    product_id: Optional[int] = None
    delivered_at: datetime


class NotificationStatus(BaseModel):
    is_authorized: bool
    pending: List[str]
    delivered: List[Notification]
