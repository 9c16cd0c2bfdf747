# phonedeals/api/routers/orders.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from phonedeals.api.deps import get_current_user_id, get_lock_service
from phonedeals.data.database import get_db
from phonedeals.domain.schemas import CheckoutIn, OrderOut, OrderPageOut
from phonedeals.services.checkout_service import CheckoutService
from phonedeals.services.lock_service import LockService
from phonedeals.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut)
def checkout(
    payload: Optional[CheckoutIn] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Creates an order from the caller's cart, commits stock and clears the cart.
    """
    svc = CheckoutService(db, lock_service=lock_service)
    return svc.checkout(user_id, payload.address if payload else None)


@router.get("", response_model=OrderPageOut)
def list_orders(
    page: str = Query("1"),
    limit: str = Query("10"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Order history of the caller, paginated.
    """
    return OrderService(db).list_orders(user_id, page, limit, sort_by, sort_order)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_order(order_id, user_id)
