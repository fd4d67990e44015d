# storefront/client/api.py
from typing import Any, Dict, Iterable, List
from urllib.parse import urlsplit

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import STOREFRONT_URL, API_PREFIX, TOKEN_COOKIE_NAME
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR = "An error occurred"


class StorefrontApiError(Exception):
    """Non-2xx answer. message = server text verbatim, else a generic fallback."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message or GENERIC_ERROR
        super().__init__(f"{status_code}: {self.message}")


class StorefrontClient:
    """
    Klient HTTP storefrontu. Cookie z tokenem trzyma sesja (cookie jar),
    tak jak przegladarka.

    `session` moze byc dowolnym obiektem z API requests.Session
    (np. TestClient w testach).
    """

    def __init__(self, base_url: str | None = None, session: Any = None, timeout: int = 2):
        self.base_url = (base_url or STOREFRONT_URL).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    def has_credential(self) -> bool:
        """True only if the jar would actually send the token to base_url."""
        https = urlsplit(self.base_url).scheme == "https"
        # requests: the jar itself, httpx/TestClient: Cookies.jar
        jar = getattr(self.session.cookies, "jar", self.session.cookies)
        return any(
            cookie.name == TOKEN_COOKIE_NAME and (https or not cookie.secure)
            for cookie in jar
        )

    def _send(self, method: str, path: str, json: Any = None) -> Any:
        url = self._url(path)
        logger.info(f"StorefrontClient {method} {url}")

        resp = self.session.request(method, url, json=json, timeout=self.timeout)

        if resp.status_code >= 400:
            raise StorefrontApiError(resp.status_code, self._message(resp))

        return resp.json()

    @staticmethod
    def _message(resp) -> str | None:
        try:
            body = resp.json()
        except ValueError:
            return None
        return body.get("message") if isinstance(body, dict) else None

    #auth
    def signup(self, email: str, password: str) -> Dict[str, Any]:
        return self._send("POST", "/auth/signup", {"email": email, "password": password})

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._send("POST", "/auth/login", {"email": email, "password": password})

    def logout(self) -> Dict[str, Any]:
        return self._send("POST", "/auth/logout")

    def get_user(self) -> Dict[str, Any]:
        return self._send("GET", "/user")

    #cart - wszystkie operacje sa idempotentne (overwrite/delete), wiec retry jest bezpieczne
    @http_retry()
    def fetch_cart(self) -> List[Dict[str, Any]]:
        return self._send("GET", "/cart")

    @http_retry()
    def upsert_line(self, product_id: int, size_id: int, quantity: int) -> Dict[str, Any]:
        return self._send(
            "POST",
            "/cart",
            {"productId": product_id, "sizeId": size_id, "quantity": quantity},
        )

    @http_retry()
    def remove_line(self, product_id: int, size_id: int) -> Dict[str, Any]:
        return self._send("POST", "/cart/remove", {"productId": product_id, "sizeId": size_id})

    @http_retry()
    def sync_cart(self, records: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        return self._send("POST", "/cart/sync", list(records))
