# storefront/api/routers/cart.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import require_identity
from storefront.data.database import get_db
from storefront.domain.errors import CartConflictError
from storefront.domain.identity import VerifiedIdentity
from storefront.domain.schemas import CartLineIn, CartLineKey, CartLineOut, MessageOut
from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=List[CartLineOut])
def get_cart(
    identity: VerifiedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.get_cart(identity.user_id)


@router.post("", response_model=MessageOut)
def upsert_item(
    payload: CartLineIn,
    identity: VerifiedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.upsert_line(
            user_id=identity.user_id,
            product_id=payload.product_id,
            size_id=payload.size_id,
            quantity=payload.quantity,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception:
        logger.exception("Failed to add item to cart")
        raise HTTPException(status_code=500, detail="Failed to add item to cart")

    return {"message": "Item added to cart"}


@router.post("/remove", response_model=MessageOut)
def remove_item(
    payload: CartLineKey,
    identity: VerifiedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_line(identity.user_id, payload.product_id, payload.size_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Failed to remove item from cart")
        raise HTTPException(status_code=500, detail="Failed to remove item from cart")

    return {"message": "Item removed from cart"}


@router.post("/sync", response_model=MessageOut)
def sync_cart(
    payload: List[CartLineIn],
    identity: VerifiedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    """
    Wywolywane przez klienta raz po login/signup z offline koszykiem.
    Caly batch jest walidowany zanim cokolwiek zostanie zapisane.
    """
    svc = get_service(db)
    try:
        svc.sync_cart(identity.user_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception:
        logger.exception("Cart synchronization error")
        raise HTTPException(status_code=500, detail="Cart synchronization failed")

    return {"message": "Cart synchronized successfully"}
