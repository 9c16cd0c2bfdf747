# phonedeals/data/seed.py
from decimal import Decimal

from phonedeals.data.database import SessionLocal
from phonedeals.data.models.listing import ListingModel, ReviewModel
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_LISTINGS = [
    {
        "title": "Galaxy S III 16GB",
        "brand": "Samsung",
        "price": "159.00",
        "stock": 12,
        "seller_id": "seller-1",
        "reviews": [("buyer-1", 5, "Works like new."), ("buyer-2", 4, "Small scratch on the back.")],
    },
    {
        "title": "iPhone 6 64GB",
        "brand": "Apple",
        "price": "249.99",
        "stock": 5,
        "seller_id": "seller-2",
        "reviews": [("buyer-3", 3, "Battery is tired.")],
    },
    {"title": "Lumia 920", "brand": "Nokia", "price": "89.50", "stock": 8, "seller_id": "seller-1", "reviews": []},
    {"title": "One M8", "brand": "HTC", "price": "120.00", "stock": 3, "seller_id": "seller-3", "reviews": []},
    {"title": "Xperia Z3", "brand": "Sony", "price": "110.00", "stock": 0, "seller_id": "seller-3", "reviews": []},
]


def seed():
    db = SessionLocal()
    try:
        # only seed an empty catalog
        if db.query(ListingModel).first():
            return 0

        for data in SAMPLE_LISTINGS:
            listing = ListingModel(
                title=data["title"],
                brand=data["brand"],
                image=f"/static/images/{data['brand']}.jpeg",
                price=Decimal(data["price"]),
                stock=data["stock"],
                seller_id=data["seller_id"],
                reviews=[
                    ReviewModel(reviewer_id=reviewer, rating=rating, comment=comment)
                    for reviewer, rating, comment in data["reviews"]
                ],
            )
            db.add(listing)
        db.commit()
        logger.info(f"Seeded {len(SAMPLE_LISTINGS)} listings")
        return len(SAMPLE_LISTINGS)
    finally:
        db.close()
