# phonedeals/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from phonedeals.data.models.cart import CartModel
from phonedeals.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        return self.db.query(CartModel).filter(CartModel.user_id == user_id).one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return (
            self.db.query(CartItemModel)
            .filter(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
            .all()
        )

    def get_cart_item(self, cart_id: int, listing_id: int) -> CartItemModel | None:
        return (
            self.db.query(CartItemModel)
            .filter(CartItemModel.cart_id == cart_id, CartItemModel.listing_id == listing_id)
            .one_or_none()
        )

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, listing_id: int) -> int:
        return (
            self.db.query(CartItemModel)
            .filter(CartItemModel.cart_id == cart_id, CartItemModel.listing_id == listing_id)
            .delete(synchronize_session=False)
        )

    def clear_cart_items(self, cart_id: int) -> int:
        return (
            self.db.query(CartItemModel)
            .filter(CartItemModel.cart_id == cart_id)
            .delete(synchronize_session=False)
        )

    def update_cart_version(self, cart_id: int, old_version: int) -> int:
        """UPDATE carts SET version = old + 1 WHERE id = :id AND version = :old"""
        return (
            self.db.query(CartModel)
            .filter(CartModel.id == cart_id, CartModel.version == old_version)
            .update(
                {
                    CartModel.version: old_version + 1,
                    CartModel.updated_at: datetime.now(timezone.utc),
                },
                synchronize_session=False,
            )
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
