# import every model so they are registered on Base.metadata

from phonedeals.data.models.listing import ListingModel, ReviewModel, BRANDS
from phonedeals.data.models.cart import CartModel
from phonedeals.data.models.cart_item import CartItemModel
from phonedeals.data.models.order import OrderModel, OrderItemModel
from phonedeals.data.models.wishlist import WishlistItemModel

__all__ = [
    "BRANDS",
    "ListingModel",
    "ReviewModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "WishlistItemModel",
]
