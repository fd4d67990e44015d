# storefront/api/gate.py
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from storefront.domain.identity import VerifiedIdentity
from storefront.services.token_service import TokenService
from storefront.utils.settings import (
    API_PREFIX,
    LOGIN_PATH,
    PROTECTED_PATHS,
    TOKEN_COOKIE_NAME,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

IDENTITY_HEADER = "x-user-id"


class SessionGate(BaseHTTPMiddleware):
    """
    Brama autoryzacji dla sciezek z allow-listy.

    unauthenticated -> API: 401, strona: redirect na login (+ usuniecie
    niewaznego cookie). authenticated -> VerifiedIdentity w request.state
    i request leci dalej. Pozostale sciezki przechodza bez sprawdzania.
    """

    def __init__(
        self,
        app,
        protected_paths: Iterable[str] | None = None,
        token_service: TokenService | None = None,
        api_prefix: str | None = None,
        login_path: str | None = None,
        cookie_name: str | None = None,
    ):
        super().__init__(app)
        self.protected_paths = tuple(
            p.rstrip("/") for p in (protected_paths if protected_paths is not None else PROTECTED_PATHS)
        )
        self.token_service = token_service or TokenService()
        self.api_prefix = (api_prefix if api_prefix is not None else API_PREFIX).rstrip("/")
        self.login_path = login_path or LOGIN_PATH
        self.cookie_name = cookie_name or TOKEN_COOKIE_NAME

    def is_protected(self, path: str) -> bool:
        path = path.rstrip("/") or "/"
        return any(path == p or path.startswith(p + "/") for p in self.protected_paths)

    def is_api(self, path: str) -> bool:
        return path == self.api_prefix or path.startswith(self.api_prefix + "/")

    async def dispatch(self, request: Request, call_next) -> Response:
        # naglowek tozsamosci od klienta nigdy nie jest zaufany
        if IDENTITY_HEADER in request.headers:
            logger.warning(f"Dropping client supplied {IDENTITY_HEADER} header on {request.url.path}")
            request.scope["headers"] = [
                (k, v) for k, v in request.scope["headers"] if k.decode("latin-1").lower() != IDENTITY_HEADER
            ]

        path = request.url.path
        if not self.is_protected(path):
            return await call_next(request)

        token = request.cookies.get(self.cookie_name)
        if not token:
            return self._reject(path, stale_cookie=False)

        user_id = self.token_service.verify(token)
        if user_id is None:
            return self._reject(path, stale_cookie=True)

        request.state.identity = VerifiedIdentity(user_id)
        return await call_next(request)

    def _reject(self, path: str, stale_cookie: bool) -> Response:
        if self.is_api(path):
            return JSONResponse({"message": "Unauthorized"}, status_code=401)

        response = RedirectResponse(self.login_path, status_code=307)
        if stale_cookie:
            response.delete_cookie(self.cookie_name, path="/")
        return response
