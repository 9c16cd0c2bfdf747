# phonedeals/repos/wishlist_repo.py
from sqlalchemy.orm import Session

from phonedeals.data.models.wishlist import WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_items(self, user_id: str) -> list[WishlistItemModel]:
        return (
            self.db.query(WishlistItemModel)
            .filter(WishlistItemModel.user_id == user_id)
            .order_by(WishlistItemModel.id)
            .all()
        )

    def get_item(self, user_id: str, listing_id: int) -> WishlistItemModel | None:
        return (
            self.db.query(WishlistItemModel)
            .filter(WishlistItemModel.user_id == user_id, WishlistItemModel.listing_id == listing_id)
            .one_or_none()
        )

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: WishlistItemModel):
        self.db.delete(item)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
