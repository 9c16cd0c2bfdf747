# phonedeals/api/routers/wishlist.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from phonedeals.api.deps import get_current_user_id
from phonedeals.data.database import get_db
from phonedeals.domain.schemas import ListingSummaryOut, WishlistIn
from phonedeals.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/profile/wishlist", tags=["wishlist"])


@router.get("", response_model=List[ListingSummaryOut])
def get_wishlist(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return WishlistService(db).get_wishlist(user_id)


@router.post("", response_model=List[ListingSummaryOut])
def add_to_wishlist(
    payload: WishlistIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return WishlistService(db).add(user_id, payload.phone_id)


@router.delete("/{phone_id}", response_model=List[ListingSummaryOut])
def remove_from_wishlist(
    phone_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return WishlistService(db).remove(user_id, phone_id)
