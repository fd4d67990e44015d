# storefront/api/deps.py
from fastapi import HTTPException, Request

from storefront.domain.identity import VerifiedIdentity


def require_identity(request: Request) -> VerifiedIdentity:
    identity = getattr(request.state, "identity", None)

    # brak = route poza allow-lista bramy albo gate nie przepuscil
    if not isinstance(identity, VerifiedIdentity):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return identity
