# app/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, ConfigDict, model_validator


class PaymentMethod(str, Enum):
    """Wartosci na drucie: EFECTIVO (gotowka), TARJETA (karta), MIXTO (czesc gotowka, czesc karta)."""

    CASH = "EFECTIVO"
    CARD = "TARJETA"
    SPLIT = "MIXTO"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    WAITER = "WAITER"


# =====================================================
# USERS / CATEGORIES
# =====================================================
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: UserRole = UserRole.WAITER


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# PRODUCTS
# =====================================================
class ComboItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1, description="Mnoznik na jedna sztuke combo")


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    stock: int = 0
    min_stock: int = Field(5, ge=0)
    category_id: int = Field(..., gt=0)
    description: str | None = None
    is_active: bool = True
    is_combo: bool = False
    combo_items: List[ComboItemIn] | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    stock: int | None = None
    min_stock: int | None = Field(None, ge=0)
    category_id: int | None = Field(None, gt=0)
    description: str | None = None
    is_active: bool | None = None
    is_combo: bool | None = None
    combo_items: List[ComboItemIn] | None = None


class ComboItemOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    component_stock: int


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: float
    stock: int
    min_stock: int
    is_active: bool
    is_combo: bool
    category_id: int
    category_name: str | None = None
    combo_items: List[ComboItemOut] = []


class ProductDeleteOut(BaseModel):
    id: int
    deleted: bool
    is_active: bool


# =====================================================
# ORDERS
# =====================================================
class OrderItemIn(BaseModel):
    """Pozycja koszyka. Cena podana przez klienta (nie jest porownywana z katalogiem)."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0, decimal_places=2)


class PaymentIn(BaseModel):
    cash_received: Decimal | None = Field(None, ge=0, decimal_places=2)
    change_given: Decimal | None = Field(None, ge=0, decimal_places=2)
    cash_amount: Decimal | None = Field(None, ge=0, decimal_places=2)
    card_amount: Decimal | None = Field(None, ge=0, decimal_places=2)


class OrderCreate(BaseModel):
    user_id: int = Field(..., gt=0)
    payment_method: PaymentMethod
    items: List[OrderItemIn] = Field(..., min_length=1)
    payment: PaymentIn = Field(default_factory=PaymentIn)

    @model_validator(mode="after")
    def split_requires_portions(self):
        if self.payment_method == PaymentMethod.SPLIT and (
            self.payment.cash_amount is None or self.payment.card_amount is None
        ):
            raise ValueError("Platnosc MIXTO wymaga cash_amount i card_amount")
        return self


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    price: float


class OrderOut(BaseModel):
    id: int
    user_id: int
    waiter_name: str | None = None
    status: str
    total: float
    payment_method: str
    cash_received: float | None = None
    change_given: float | None = None
    cash_amount: float | None = None
    card_amount: float | None = None
    created_at: datetime
    items: List[OrderItemOut] = []


# =====================================================
# SALES
# =====================================================
class SalesSummary(BaseModel):
    total: float
    cash: float
    card: float
    count: int


class SalesHistoryOut(BaseModel):
    orders: List[OrderOut]
    summary: SalesSummary
