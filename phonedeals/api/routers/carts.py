# phonedeals/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from phonedeals.api.deps import get_current_user_id
from phonedeals.data.database import get_db
from phonedeals.domain.schemas import CartLineIn, CartOut, QuantityIn
from phonedeals.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user_id)


@router.post("/items", response_model=CartOut)
def add_or_set_item(
    payload: CartLineIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).add_or_set_line(user_id, payload.phone_id, payload.quantity)


@router.patch("/items/{phone_id}", response_model=CartOut)
def update_item_quantity(
    phone_id: int,
    payload: QuantityIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).update_line_quantity(user_id, phone_id, payload.quantity)


@router.delete("/items/{phone_id}", response_model=CartOut)
def remove_item(
    phone_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_line(user_id, phone_id)
