# luxejewel/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.domain.schemas import OrderCreate, OrderDetailOut, OrderOut, OrderStatusUpdate
from luxejewel.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=OrderDetailOut | List[OrderOut])
def get_orders(
    user_id: int | None = Query(None),
    order_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Single order with its items (order_id) or a user's order history (user_id).
    """
    svc = get_service(db)
    if order_id is not None:
        try:
            return svc.get_order(order_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    if user_id is not None:
        return svc.list_user_orders(user_id)

    raise HTTPException(status_code=400, detail="User ID or Order ID is required")


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """
    Places an order after a successful payment.
    The confirmation notification is sent asynchronously.
    """
    svc = get_service(db)
    try:
        return svc.create_order(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("", response_model=OrderOut)
def update_order(payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_status(payload.id, payload.status)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
