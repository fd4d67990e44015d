# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import Credentials, MessageOut
from storefront.services.auth_service import AuthService
from storefront.utils.settings import TOKEN_COOKIE_NAME, TOKEN_TTL_SECONDS, COOKIE_SECURE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def set_identity_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=TOKEN_TTL_SECONDS,
        path="/",
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/signup", response_model=MessageOut)
def signup(payload: Credentials, response: Response, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        token = svc.signup(payload.email, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Signup error")
        raise HTTPException(status_code=500, detail="Signup failed")

    set_identity_cookie(response, token)
    return {"message": "Signup successful"}


@router.post("/login", response_model=MessageOut)
def login(payload: Credentials, response: Response, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        token = svc.login(payload.email, payload.password)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except Exception:
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Login failed")

    set_identity_cookie(response, token)
    return {"message": "Login successful"}


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    """
    Tylko usuniecie cookie - token nie jest nigdzie odwolywany
    i pozostaje wazny do exp.
    """
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/", httponly=True, secure=COOKIE_SECURE, samesite="lax")
    return {"message": "Logout successful"}
