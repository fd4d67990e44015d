# storefront/services/token_service.py
import uuid
from datetime import datetime, timezone, timedelta

import jwt

from storefront.utils.settings import JWT_SECRET, JWT_ALGORITHM, TOKEN_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class TokenService:
    """
    Bezstanowy token tozsamosci (JWT, HS256).

    Waznosc zalezy tylko od podpisu i exp - nie ma tabeli sesji ani listy
    odwolanych tokenow. Wylogowanie = usuniecie cookie po stronie klienta,
    skradziony token jest wazny do wygasniecia.
    """

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        ttl_seconds: int | None = None,
    ):
        self.secret = secret or JWT_SECRET
        self.algorithm = algorithm or JWT_ALGORITHM
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else TOKEN_TTL_SECONDS

    def issue(self, user_id: uuid.UUID) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": str(user_id),
            "iat": now,
            "exp": now + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> uuid.UUID | None:
        """Returns the user id, or None for any invalid token. Never raises."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
            return uuid.UUID(str(payload["userId"]))
        except (jwt.PyJWTError, KeyError, ValueError, TypeError) as e:
            # przyczyna tylko w logach, klient dostaje "unauthenticated"
            logger.debug(f"Token rejected: {type(e).__name__}")
            return None
