# luxejewel/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from decimal import Decimal
from datetime import datetime


class MessageOut(BaseModel):
    message: str


# =====================================================
# CATALOG
# =====================================================
class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    """Public product representation (without the embedding vector)."""

    id: int
    name: str
    slug: str
    description: str = ""
    short_description: str = ""
    price: Decimal
    compare_price: Optional[Decimal] = None
    images: List[str] = []
    featured_image: Optional[str] = None
    category_id: Optional[int] = None
    material: str = ""
    gemstone: Optional[str] = None
    inventory_quantity: int = 0
    rating_average: Decimal = Decimal("0")
    rating_count: int = 0
    view_count: int = 0
    is_new: bool = False
    is_featured: bool = False
    is_on_sale: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SimilarProductOut(ProductOut):
    similarity: Optional[float] = None


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    price: Decimal = Field(..., gt=0)
    compare_price: Optional[Decimal] = Field(None, gt=0)
    description: str = ""
    short_description: str = ""
    images: List[str] = []
    featured_image: Optional[str] = None
    category_id: Optional[int] = None
    material: str = ""
    gemstone: Optional[str] = None
    inventory_quantity: int = Field(0, ge=0)
    is_new: bool = False
    is_featured: bool = False
    is_on_sale: bool = False
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Partial update, only fields that were sent are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    price: Optional[Decimal] = Field(None, gt=0)
    compare_price: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = None
    short_description: Optional[str] = None
    images: Optional[List[str]] = None
    featured_image: Optional[str] = None
    category_id: Optional[int] = None
    material: Optional[str] = None
    gemstone: Optional[str] = None
    inventory_quantity: Optional[int] = Field(None, ge=0)
    is_new: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_on_sale: Optional[bool] = None
    is_active: Optional[bool] = None


class SearchResultsOut(BaseModel):
    results: List[ProductOut]
    count: int


# =====================================================
# CART / WISHLIST
# =====================================================
class CartItemIn(BaseModel):
    product_id: Optional[int] = None
    quantity: int = 1
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    variant_id: Optional[int] = None


class CartItemUpdate(BaseModel):
    id: Optional[int] = None
    quantity: int


class CartItemOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    product_id: int
    variant_id: Optional[int] = None
    quantity: int
    added_at: datetime
    updated_at: Optional[datetime] = None
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class WishlistIn(BaseModel):
    user_id: Optional[int] = None
    product_id: Optional[int] = None


class WishlistItemOut(BaseModel):
    id: int
    user_id: int
    product_id: int
    created_at: datetime
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class WishlistStatusOut(BaseModel):
    in_wishlist: bool
    item: Optional[WishlistItemOut] = None


# =====================================================
# ORDERS
# =====================================================
class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    variant_id: Optional[int] = None


class OrderCreate(BaseModel):
    user_id: Optional[int] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    items: List[OrderItemIn] = []
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    shipping_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    payment_method: str = "mock"


class OrderStatusUpdate(BaseModel):
    id: Optional[int] = None
    status: Optional[str] = None


class OrderStatusIn(BaseModel):
    status: str


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    variant_id: Optional[int] = None
    quantity: int
    price_at_purchase: Decimal
    product: Optional[ProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: str
    user_id: Optional[int] = None
    status: str
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    payment_status: str
    payment_method: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderOut):
    items: List[OrderItemOut] = []


class AdminOrderOut(OrderOut):
    customer_name: Optional[str] = None


# =====================================================
# REVIEWS
# =====================================================
class ReviewCreate(BaseModel):
    product_id: Optional[int] = None
    user_id: Optional[int] = None
    rating: int = 0
    comment: Optional[str] = None


class ReviewUpdate(BaseModel):
    id: Optional[int] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(BaseModel):
    id: int
    product_id: int
    user_id: Optional[int] = None
    rating: int
    comment: str
    is_approved: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    reviewer_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# AI SEARCH
# =====================================================
class AISearchIn(BaseModel):
    image: Optional[str] = None
    query: Optional[str] = None


class AISearchOut(BaseModel):
    results: List[SimilarProductOut]
    count: int
    category: Optional[str] = None
    is_fallback: bool = False
    message: Optional[str] = None


# =====================================================
# AUTH
# =====================================================
class RegisterIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field("", max_length=200)


class LoginIn(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    full_name: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead


# =====================================================
# ADMIN
# =====================================================
class DashboardStat(BaseModel):
    title: str
    value: str


class TopProductOut(BaseModel):
    name: str
    sold: int
    revenue: Decimal


class DashboardOut(BaseModel):
    total_revenue: Decimal
    order_count: int
    customer_count: int
    avg_order_value: Decimal
    stats: List[DashboardStat]
    recent_orders: List[AdminOrderOut]
    top_products: List[TopProductOut]


class MonthlyRevenueOut(BaseModel):
    month: str
    revenue: Decimal


class CustomerStatsOut(BaseModel):
    new_customers: int
    returning_customers: int
    avg_order_value: Decimal
    conversion_rate: float


class AnalyticsOut(BaseModel):
    revenue_by_month: List[MonthlyRevenueOut]
    top_products: List[TopProductOut]
    orders_by_status: Dict[str, int]
    customer_stats: CustomerStatsOut
