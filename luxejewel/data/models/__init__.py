#all models imported here so SQLAlchemy registers them in Base.metadata

from luxejewel.data.models.category import CategoryModel
from luxejewel.data.models.product import ProductModel
from luxejewel.data.models.user import UserModel, AuthSessionModel
from luxejewel.data.models.cart_item import CartItemModel
from luxejewel.data.models.wishlist_item import WishlistItemModel
from luxejewel.data.models.order import OrderModel, OrderItemModel
from luxejewel.data.models.review import ReviewModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "UserModel",
    "AuthSessionModel",
    "CartItemModel",
    "WishlistItemModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
]
