# storefront/client/reconciler.py
from typing import Any

import requests

from storefront.client.api import StorefrontApiError
from storefront.client.cart_cache import CartCache, CartState
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartReconciler:
    """
    Laczenie offline koszyka z ledgerem po udanym login/signup.

    1. offline koszyk niepusty -> POST /cart/sync (caly batch)
    2. dopiero po odpowiedzi z (1) -> GET /cart
    3. lokalny cache zastapiony w calosci stanem z ledgera

    Wywolanie drugi raz z tym samym koszykiem nic nie zmienia w ledgerze.
    """

    def __init__(self, client: Any, cache: CartCache):
        self.client = client
        self.cache = cache

    def reconcile(self, state: CartState) -> CartState:
        if len(state) > 0:
            try:
                self.client.sync_cart(state.to_records())
                logger.info(f"Offline cart synchronized ({len(state)} items)")
            except (StorefrontApiError, requests.RequestException) as e:
                # jak w przegladarce: blad synchronizacji nie blokuje pobrania ledgera
                logger.error(f"Cart synchronization failed: {e}")

        try:
            lines = self.client.fetch_cart()
        except (StorefrontApiError, requests.RequestException) as e:
            logger.error(f"Failed to fetch cart after login, keeping local cart: {e}")
            return state

        return self.cache.replace(lines)

    def login(self, state: CartState, email: str, password: str) -> CartState:
        self.client.login(email, password)
        return self.reconcile(state)

    def signup(self, state: CartState, email: str, password: str) -> CartState:
        self.client.signup(email, password)
        return self.reconcile(state)

    def logout(self, state: CartState) -> CartState:
        """Usuwa cookie. Lokalny koszyk zostaje jako offline cache."""
        self.client.logout()
        return state
