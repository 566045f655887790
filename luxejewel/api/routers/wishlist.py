# luxejewel/api/routers/wishlist.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.domain.errors import ConflictError, NotFoundError, ValidationError
from luxejewel.domain.schemas import MessageOut, WishlistIn, WishlistItemOut, WishlistStatusOut
from luxejewel.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("", response_model=List[WishlistItemOut] | WishlistStatusOut)
def get_wishlist(
    user_id: int | None = Query(None),
    product_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    svc = WishlistService(db)
    try:
        if product_id is not None:
            item = svc.get_status(user_id, product_id)
            return {"in_wishlist": item is not None, "item": item}
        return svc.list_items(user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=WishlistItemOut, status_code=201)
def add_to_wishlist(payload: WishlistIn, db: Session = Depends(get_db)):
    svc = WishlistService(db)
    try:
        return svc.add_item(payload.user_id, payload.product_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("", response_model=MessageOut)
def remove_from_wishlist(
    user_id: int | None = Query(None),
    product_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    svc = WishlistService(db)
    try:
        svc.remove_item(user_id, product_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Item removed from wishlist successfully"}
