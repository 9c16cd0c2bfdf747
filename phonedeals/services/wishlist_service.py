# phonedeals/services/wishlist_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phonedeals.data.models.listing import ListingModel
from phonedeals.data.models.wishlist import WishlistItemModel
from phonedeals.domain.errors import AlreadyInWishlist, ListingNotFound, WishlistItemNotFound
from phonedeals.repos.listing_repo import ListingRepo
from phonedeals.repos.wishlist_repo import WishlistRepo
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)


def listing_summary(listing: ListingModel) -> Dict[str, Any]:
    return {
        "id": listing.id,
        "title": listing.title,
        "brand": listing.brand,
        "price": listing.price,
        "stock": listing.stock,
        "seller_id": listing.seller_id,
        "is_disabled": listing.is_disabled,
        "average_rating": listing.average_rating,
        "review_count": listing.review_count,
    }


class WishlistService:
    def __init__(self, db: Session):
        self.repo = WishlistRepo(db)
        self.listing_repo = ListingRepo(db)

    def get_wishlist(self, user_id: str) -> List[Dict[str, Any]]:
        items = self.repo.get_items(user_id)
        listings = self.listing_repo.get_listings(i.listing_id for i in items)
        # listings removed since they were saved are skipped
        return [listing_summary(listings[i.listing_id]) for i in items if i.listing_id in listings]

    def add(self, user_id: str, listing_id: int) -> List[Dict[str, Any]]:
        if not self.listing_repo.get_listing(listing_id):
            raise ListingNotFound()

        if self.repo.get_item(user_id, listing_id):
            raise AlreadyInWishlist()

        try:
            self.repo.add_item(WishlistItemModel(user_id=user_id, listing_id=listing_id))
        except IntegrityError:
            # a concurrent add won the unique (user, listing) constraint
            self.repo.rollback()
            raise AlreadyInWishlist()

        logger.info(f"Listing {listing_id} added to wishlist of user {user_id}")
        return self.get_wishlist(user_id)

    def remove(self, user_id: str, listing_id: int) -> List[Dict[str, Any]]:
        item = self.repo.get_item(user_id, listing_id)
        if not item:
            raise WishlistItemNotFound()

        self.repo.delete_item(item)
        logger.info(f"Listing {listing_id} removed from wishlist of user {user_id}")
        return self.get_wishlist(user_id)
