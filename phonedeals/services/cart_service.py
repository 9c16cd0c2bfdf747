# phonedeals/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phonedeals.data.models.cart import CartModel
from phonedeals.data.models.cart_item import CartItemModel
from phonedeals.domain.errors import (
    CartLineNotFound,
    ConcurrencyConflict,
    InsufficientStock,
    InvalidPhoneId,
    InvalidQuantity,
    ListingNotFound,
)
from phonedeals.repos.cart_repo import CartRepo
from phonedeals.repos.listing_repo import ListingRepo
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)


def parse_quantity(quantity) -> int:
    try:
        qty = int(quantity)
    except (TypeError, ValueError):
        raise InvalidQuantity()
    if qty < 1:
        raise InvalidQuantity()
    return qty


def parse_listing_id(listing_id) -> int:
    if listing_id is None:
        raise InvalidPhoneId("Phone ID is required")
    if isinstance(listing_id, bool):
        raise InvalidPhoneId()
    try:
        return int(listing_id)
    except (TypeError, ValueError):
        raise InvalidPhoneId()


class CartService:
    """
    Cart use cases, one cart per user.
    Commands (add, update, remove, clear) bump the cart version;
    the query (get) creates the cart on first access.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.listing_repo = ListingRepo(db)

    # query
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)
        return self._cart_view(cart)

    # commands
    def add_or_set_line(self, user_id: str, listing_id, quantity) -> Dict[str, Any]:
        listing_id = parse_listing_id(listing_id)
        qty = parse_quantity(quantity)
        listing = self._check_stock(listing_id, qty)
        cart = self._get_or_create_cart(user_id)

        item = self.repo.get_cart_item(cart.id, listing_id)
        if item:
            logger.info(f"Setting quantity of listing {listing_id} in cart {cart.id} from {item.quantity} to {qty}")
            item.quantity = qty
            # re-adding refreshes the snapshot shown to the buyer
            item.price = listing.price
            item.title = listing.title
            self.repo.add_cart_item(item)
        else:
            logger.info(f"Adding listing {listing_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    listing_id=listing_id,
                    title=listing.title,
                    quantity=qty,
                    price=listing.price,
                )
            )

        self._commit_version(cart)
        return self.get_cart(user_id)

    def update_line_quantity(self, user_id: str, listing_id: int, quantity) -> Dict[str, Any]:
        qty = parse_quantity(quantity)
        self._check_stock(listing_id, qty)
        cart = self.repo.get_cart_by_user(user_id)
        item = self.repo.get_cart_item(cart.id, listing_id) if cart else None
        if not item:
            raise CartLineNotFound()

        logger.info(f"Updating quantity of listing {listing_id} in cart {cart.id} to {qty}")
        # price snapshot stays as it was when the line was added
        item.quantity = qty
        self.repo.add_cart_item(item)

        self._commit_version(cart)
        return self.get_cart(user_id)

    def remove_line(self, user_id: str, listing_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartLineNotFound()

        if not self.repo.delete_cart_item(cart.id, listing_id):
            self.repo.rollback()
            raise CartLineNotFound()

        logger.info(f"Removed listing {listing_id} from cart {cart.id}")
        self._commit_version(cart)
        return self.get_cart(user_id)

    def clear_cart(self, user_id: str) -> None:
        cart = self._get_or_create_cart(user_id)
        self.repo.clear_cart_items(cart.id)
        self._commit_version(cart)
        logger.info(f"Cleared cart {cart.id}")

    # helpers
    def _get_or_create_cart(self, user_id: str) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            cart = self.repo.create_cart(CartModel(user_id=user_id, version=1))
            logger.info(f"Created cart {cart.id} for user {user_id}")
            return cart
        except IntegrityError:
            # another request created it first
            self.repo.rollback()
            return self.repo.get_cart_by_user(user_id)

    def _check_stock(self, listing_id: int, qty: int):
        listing = self.listing_repo.get_listing(listing_id)
        if not listing:
            raise ListingNotFound()
        if qty > listing.stock:
            raise InsufficientStock()
        return listing

    def _commit_version(self, cart: CartModel):
        # optimistic locking: UPDATE carts SET version = v + 1 WHERE id = :id AND version = v
        rowcount = self.repo.update_cart_version(cart.id, cart.version)
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict()
        self.repo.commit()

    def _cart_view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        listings = self.listing_repo.get_listings(i.listing_id for i in items)
        total = sum((i.price * i.quantity for i in items), Decimal("0.00"))

        lines = []
        for i in items:
            line = {
                "phone_id": i.listing_id,
                "title": i.title,
                "quantity": i.quantity,
                "price": i.price,
            }
            listing = listings.get(i.listing_id)
            if listing:
                line.update(
                    average_rating=listing.average_rating,
                    review_count=listing.review_count,
                    seller_id=listing.seller_id,
                )
            lines.append(line)

        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": lines,
            "total": total,
            "version": cart.version,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
        }
