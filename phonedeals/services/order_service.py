# phonedeals/services/order_service.py
import math
from typing import Any, Dict

from sqlalchemy.orm import Session

from phonedeals.data.models.order import OrderModel
from phonedeals.domain.errors import Forbidden, InvalidOrderQuery, OrderNotFound
from phonedeals.repos.order_repo import OrderRepo
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)

SORT_FIELDS = {
    "createdAt": OrderModel.created_at,
    "totalAmount": OrderModel.total_amount,
}


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": [
            {
                "phone_id": i.listing_id,
                "title": i.title,
                "quantity": i.quantity,
                "price": i.price,
            }
            for i in order.items
        ],
        "total_amount": order.total_amount,
        "address": {
            "street": order.street,
            "city": order.city,
            "state": order.state,
            "zip": order.zip,
            "country": order.country,
        },
        "created_at": order.created_at,
    }


def _positive_int(value, message: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidOrderQuery(message)
    if number < 1:
        raise InvalidOrderQuery(message)
    return number


class OrderService:
    """
    Read side of the order domain. Orders are created only by the checkout
    and never change afterwards.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(
        self,
        user_id: str,
        page=1,
        limit=10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        page_num = _positive_int(page, "Invalid page number")
        limit_num = _positive_int(limit, "Invalid limit number")

        column = SORT_FIELDS.get(sort_by)
        if column is None:
            raise InvalidOrderQuery("Invalid sort field")

        if sort_order == "asc":
            order_by = (column.asc(), OrderModel.id.asc())
        else:
            order_by = (column.desc(), OrderModel.id.desc())

        total = self.repo.count_orders_for_user(user_id)
        orders = self.repo.list_orders_for_user(
            user_id,
            offset=(page_num - 1) * limit_num,
            limit=limit_num,
            order_by=order_by,
        )

        return {
            "orders": [order_to_dict(o) for o in orders],
            "total": total,
            "total_pages": math.ceil(total / limit_num),
            "current_page": page_num,
        }

    def get_order(self, order_id: int, user_id: str) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound()

        if order.user_id != user_id:
            logger.warning(f"User {user_id} tried to read order {order_id} of another user")
            raise Forbidden()

        return order_to_dict(order)
