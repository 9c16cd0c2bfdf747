# phonedeals/services/checkout_service.py
import uuid
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from phonedeals.data.models.order import OrderItemModel, OrderModel
from phonedeals.domain.errors import (
    ConcurrencyConflict,
    EmptyCart,
    InsufficientStock,
    InvalidAddress,
    ListingNotFound,
)
from phonedeals.repos.cart_repo import CartRepo
from phonedeals.repos.listing_repo import ListingRepo
from phonedeals.repos.order_repo import OrderRepo
from phonedeals.services.lock_service import LockService
from phonedeals.services.notification_service import NotificationService
from phonedeals.services.order_service import order_to_dict
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip", "country")


def validate_address(address) -> Dict[str, str]:
    """
    All five fields are required and must not be blank.
    Scalars such as a numeric zip are kept as their string form.
    """
    if not isinstance(address, dict):
        raise InvalidAddress()

    cleaned = {}
    for field in ADDRESS_FIELDS:
        value = address.get(field)
        if isinstance(value, (bool, dict, list)) or value is None:
            raise InvalidAddress()
        text = str(value).strip()
        if not text:
            raise InvalidAddress()
        cleaned[field] = text
    return cleaned


class CheckoutService:
    """
    Turns the caller's cart into an order.

    1. validate the shipping address
    2. load the cart (empty -> EmptyCart)
    3. check every line against live stock, before touching anything
    4. total = sum(quantity * price snapshot of the cart line)
    5-7. in one transaction, under per-listing locks: create the order,
       conditionally decrement stock / increment sales, clear the cart
    8. notify (async) and return the order
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.cart_repo = CartRepo(db)
        self.listing_repo = ListingRepo(db)
        self.order_repo = OrderRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: str, address) -> Dict[str, Any]:
        shipping = validate_address(address)

        cart = self.cart_repo.get_cart_by_user(user_id)
        items = self.cart_repo.get_cart_items(cart.id) if cart else []
        if not items:
            raise EmptyCart()

        logger.info(f"Checkout started for user {user_id}, cart {cart.id}, {len(items)} line(s)")

        # read-only validation pass
        for item in items:
            listing = self.listing_repo.get_listing(item.listing_id)
            if not listing:
                raise ListingNotFound(item.listing_id)
            if item.quantity > listing.stock:
                raise InsufficientStock(item.listing_id)

        # snapshot prices: what the buyer saw when adding to the cart
        total = sum((i.price * i.quantity for i in items), Decimal("0.00"))

        owner = f"checkout:{uuid.uuid4().hex}"
        with self.lock_service.hold_listing_locks([i.listing_id for i in items], owner):
            order = self._commit(user_id, cart, items, total, shipping)

        logger.info(f"Order {order['id']} created for user {user_id}, total {order['total_amount']}")
        self._notify(order)
        return order

    def _commit(self, user_id, cart, items, total, shipping) -> Dict[str, Any]:
        cart_id, cart_version = cart.id, cart.version
        try:
            order = self.order_repo.create_order(
                OrderModel(
                    user_id=user_id,
                    total_amount=total,
                    items=[
                        OrderItemModel(
                            listing_id=i.listing_id,
                            title=i.title,
                            quantity=i.quantity,
                            price=i.price,
                        )
                        for i in items
                    ],
                    **shipping,
                )
            )

            for i in items:
                self.listing_repo.decrement_stock_and_increment_sales(i.listing_id, i.quantity)

            self.cart_repo.clear_cart_items(cart_id)
            if self.cart_repo.update_cart_version(cart_id, cart_version) == 0:
                raise ConcurrencyConflict()

            result = order_to_dict(order)
            self.db.commit()
        except Exception:
            logger.warning(f"Checkout for user {user_id} rolled back")
            self.db.rollback()
            raise

        return result

    def _notify(self, order: Dict[str, Any]):
        try:
            self.notification_service.send_order_notification(
                order["user_id"], order["id"], str(order["total_amount"])
            )
        except Exception as e:
            # the order is committed; a lost notification must not undo it
            logger.warning(f"Failed to enqueue notification for order {order['id']}: {e}")
