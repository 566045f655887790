# luxejewel/api/routers/cart.py
from typing import List

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import NotFoundError, ValidationError
from luxejewel.domain.schemas import CartItemIn, CartItemOut, CartItemUpdate, MessageOut
from luxejewel.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=List[CartItemOut])
def get_cart(
    user_id: int | None = Query(None),
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.get_cart(user_id, x_session_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=CartItemOut)
def add_item(payload: CartItemIn, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.add_item(
            product_id=payload.product_id,
            quantity=payload.quantity,
            user_id=payload.user_id,
            session_id=payload.session_id,
            variant_id=payload.variant_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("", response_model=CartItemOut | MessageOut)
def update_item(payload: CartItemUpdate, db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        item = svc.update_quantity(payload.id, payload.quantity)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if item is None:
        return {"message": "Item removed"}
    return item


@router.delete("", response_model=MessageOut)
def remove_items(
    id: int | None = Query(None),
    user_id: int | None = Query(None),
    session_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        svc.remove(item_id=id, user_id=user_id, session_id=session_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Cart cleared or item removed"}
