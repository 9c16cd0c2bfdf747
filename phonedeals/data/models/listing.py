# phonedeals/data/models/listing.py
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates

from phonedeals.data.database import Base

BRANDS = (
    "Samsung",
    "Apple",
    "HTC",
    "Huawei",
    "Nokia",
    "LG",
    "Motorola",
    "Sony",
    "BlackBerry",
)


def _now():
    return datetime.now(timezone.utc)


class ListingModel(Base):
    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_listing_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_listing_price_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    brand = Column(String(32), nullable=False)
    image = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    seller_id = Column(String(64), nullable=False, index=True)

    is_disabled = Column(Boolean, nullable=False, default=False)
    sales_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    reviews = relationship(
        "ReviewModel",
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="ReviewModel.created_at",
    )

    @validates("brand")
    def validate_brand(self, key, value):
        if value not in BRANDS:
            raise ValueError(f"Unknown brand: {value}")
        return value

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def average_rating(self) -> float:
        if not self.reviews:
            return 0
        return sum(r.rating for r in self.reviews) / len(self.reviews)


class ReviewModel(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
    )

    id = Column(Integer, primary_key=True)
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    is_hidden = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    listing = relationship("ListingModel", back_populates="reviews")
