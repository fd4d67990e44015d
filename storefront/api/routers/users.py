# storefront/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import require_identity
from storefront.data.database import get_db
from storefront.domain.identity import VerifiedIdentity
from storefront.domain.schemas import UserRead
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/user", tags=["user"])


@router.get("", response_model=UserRead)
def get_user(
    identity: VerifiedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    service = AuthService(db)
    try:
        return service.get_user(identity.user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
