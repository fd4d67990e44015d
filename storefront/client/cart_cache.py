# storefront/client/cart_cache.py
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import ConfigDict, Field, ValidationError

from storefront.domain.schemas import CamelModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartItem(CamelModel):
    """Pozycja offline koszyka. Rekord w storage i na wire ma nazwy camelCase."""

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(..., gt=0, alias="productId")
    size_id: int = Field(..., gt=0, alias="sizeId")
    quantity: int = Field(1, ge=1)
    name: str = ""
    price: float = 0
    image: str = ""
    size: str = ""

    @property
    def key(self) -> Tuple[int, int]:
        return self.product_id, self.size_id

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CartItem":
        return cls.model_validate(record)


@dataclass(frozen=True)
class CartState:
    """
    Niemutowalny stan koszyka klienta. Kazda operacja zwraca nowy CartState,
    obok ilosc do wyslania na serwer (0 = nic do wyslania).
    """

    items: Tuple[CartItem, ...] = ()

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def find(self, product_id: int, size_id: int) -> CartItem | None:
        return next((i for i in self.items if i.key == (product_id, size_id)), None)

    def to_records(self) -> List[Dict[str, Any]]:
        return [i.to_record() for i in self.items]

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "CartState":
        items = []
        for record in records:
            try:
                items.append(CartItem.from_record(record))
            except ValidationError as e:
                # uszkodzony rekord jest pomijany, reszta koszyka zostaje
                logger.warning(f"Skipping invalid cart record {record!r}: {e.error_count()} errors")
        return cls(tuple(items))

    def _with_quantity(self, key: Tuple[int, int], quantity: int) -> "CartState":
        return CartState(
            tuple(i.model_copy(update={"quantity": quantity}) if i.key == key else i for i in self.items)
        )

    def add(self, item: CartItem) -> Tuple["CartState", int]:
        existing = self.find(*item.key)
        if existing:
            quantity = existing.quantity + 1
            return self._with_quantity(item.key, quantity), quantity
        return CartState(self.items + (item.model_copy(update={"quantity": 1}),)), 1

    def remove(self, product_id: int, size_id: int) -> "CartState":
        return CartState(tuple(i for i in self.items if i.key != (product_id, size_id)))

    def increase(self, product_id: int, size_id: int) -> Tuple["CartState", int]:
        existing = self.find(product_id, size_id)
        if not existing:
            return self, 0
        quantity = existing.quantity + 1
        return self._with_quantity(existing.key, quantity), quantity

    def decrease(self, product_id: int, size_id: int) -> Tuple["CartState", int]:
        existing = self.find(product_id, size_id)
        # floor 1 - zmniejszanie nigdy nie usuwa pozycji
        if not existing or existing.quantity <= 1:
            return self, 0
        quantity = existing.quantity - 1
        return self._with_quantity(existing.key, quantity), quantity


class RemoteCartMirror:
    """
    Best-effort lustro zmian w Cart Ledger. Zapisy ida w tle, bledy sa tylko
    logowane - lokalny stan nie jest cofany.
    """

    def __init__(self, client: Any, executor: Executor | None = None):
        self.client = client
        # jeden worker - zapisy docieraja do serwera w kolejnosci mutacji
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="cart-mirror")

    def has_credential(self) -> bool:
        return self.client.has_credential()

    def put(self, product_id: int, size_id: int, quantity: int) -> Future:
        return self._submit(
            f"persist cart item ({product_id}, {size_id}) x{quantity}",
            self.client.upsert_line,
            product_id,
            size_id,
            quantity,
        )

    def remove(self, product_id: int, size_id: int) -> Future:
        return self._submit(
            f"remove cart item ({product_id}, {size_id})",
            self.client.remove_line,
            product_id,
            size_id,
        )

    def _submit(self, description: str, fn, *args) -> Future:
        future = self.executor.submit(fn, *args)

        def _log_failure(f: Future):
            error = f.exception()
            if error is not None:
                logger.error(f"Failed to {description} in DB: {error}")

        future.add_done_callback(_log_failure)
        return future

    def shutdown(self, wait: bool = True):
        self.executor.shutdown(wait=wait)


class CartCache:
    """
    Client Cart Cache: kazda mutacja -> nowy stan -> zapis do storage ->
    (jesli jest token i dodatnia ilosc) zapis w tle do ledgera.

    storage: obiekt z load()/save(records), np. FileCartStorage
    mirror: obiekt z has_credential()/put()/remove(), np. RemoteCartMirror; None = offline
    """

    def __init__(self, storage: Any, mirror: Any = None):
        self.storage = storage
        self.mirror = mirror

    def load(self) -> CartState:
        return CartState.from_records(self.storage.load())

    def _commit(self, state: CartState) -> CartState:
        self.storage.save(state.to_records())
        return state

    def _online(self) -> bool:
        return self.mirror is not None and self.mirror.has_credential()

    def _mirror_put(self, product_id: int, size_id: int, quantity: int) -> None:
        if quantity > 0 and self._online():
            self.mirror.put(product_id, size_id, quantity)

    def add_to_cart(self, state: CartState, item: CartItem) -> CartState:
        new_state, quantity = state.add(item)
        self._commit(new_state)
        self._mirror_put(item.product_id, item.size_id, quantity)
        return new_state

    def remove_from_cart(self, state: CartState, product_id: int, size_id: int) -> CartState:
        new_state = self._commit(state.remove(product_id, size_id))
        if self._online():
            self.mirror.remove(product_id, size_id)
        return new_state

    def increase_quantity(self, state: CartState, product_id: int, size_id: int) -> CartState:
        new_state, quantity = state.increase(product_id, size_id)
        self._commit(new_state)
        self._mirror_put(product_id, size_id, quantity)
        return new_state

    def decrease_quantity(self, state: CartState, product_id: int, size_id: int) -> CartState:
        new_state, quantity = state.decrease(product_id, size_id)
        if quantity == 0:
            return state
        self._commit(new_state)
        self._mirror_put(product_id, size_id, quantity)
        return new_state

    def replace(self, records: Iterable[Dict[str, Any]]) -> CartState:
        """Wholesale set - po reconciliation stan = ledger."""
        return self._commit(CartState.from_records(records))
