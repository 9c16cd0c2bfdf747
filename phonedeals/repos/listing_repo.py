# phonedeals/repos/listing_repo.py
from sqlalchemy.orm import Session

from phonedeals.data.models.listing import ListingModel
from phonedeals.domain.errors import InsufficientStock, ListingNotFound


class ListingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_listing(self, listing_id: int) -> ListingModel | None:
        return self.db.get(ListingModel, listing_id)

    def get_listings(self, listing_ids) -> dict[int, ListingModel]:
        ids = set(listing_ids)
        if not ids:
            return {}
        rows = self.db.query(ListingModel).filter(ListingModel.id.in_(ids)).all()
        return {row.id: row for row in rows}

    def decrement_stock_and_increment_sales(self, listing_id: int, quantity: int) -> ListingModel:
        """
        Conditional decrement: UPDATE ... WHERE id = :id AND stock >= :q.

        The row is only touched when enough stock is left at the moment of
        the update, so two buyers can never both take the last unit.
        Does not commit; runs inside the caller's transaction.
        """
        rowcount = (
            self.db.query(ListingModel)
            .filter(ListingModel.id == listing_id, ListingModel.stock >= quantity)
            .update(
                {
                    ListingModel.stock: ListingModel.stock - quantity,
                    ListingModel.sales_count: ListingModel.sales_count + quantity,
                },
                synchronize_session=False,
            )
        )

        if rowcount == 0:
            exists = self.db.query(ListingModel.id).filter(ListingModel.id == listing_id).first()
            if exists is None:
                raise ListingNotFound(listing_id)
            raise InsufficientStock(listing_id)

        listing = self.get_listing(listing_id)
        self.db.refresh(listing)
        return listing
