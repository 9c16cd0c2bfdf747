# phonedeals/repos/order_repo.py
from sqlalchemy.orm import Session

from phonedeals.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        # no commit: the checkout owns the transaction
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def count_orders_for_user(self, user_id: str) -> int:
        return self.db.query(OrderModel).filter(OrderModel.user_id == user_id).count()

    def list_orders_for_user(self, user_id: str, offset: int, limit: int, order_by) -> list[OrderModel]:
        return (
            self.db.query(OrderModel)
            .filter(OrderModel.user_id == user_id)
            .order_by(*order_by)
            .offset(offset)
            .limit(limit)
            .all()
        )
