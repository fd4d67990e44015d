# storefront/services/cart_service.py
import uuid
from typing import Any, Dict, Iterable, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel
from storefront.domain.errors import CartConflictError
from storefront.domain.schemas import CartLineIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger
from storefront.utils.retry import conflict_retry

logger = get_logger(__name__)

LineKey = Tuple[int, int]

PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Unique key clash (retryable) vs any other constraint (FK, CHECK)."""
    if getattr(error.orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    # sqlite: "UNIQUE constraint failed: ..."
    return "unique constraint" in str(error.orig).lower()


class CartService:
    """
    Cart Ledger - serwerowy koszyk (user, product, size) -> quantity.

    query (get_cart) tylko odczyt, commands (upsert, remove, sync) modyfikuja stan.
    user_id zawsze pochodzi z VerifiedIdentity, nigdy z body.
    Jedyna ochrona przed wyscigiem to unique constraint na (user, product, size):
    naruszenie unique -> rollback -> CartConflictError -> retry; inne IntegrityError leca dalej.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: uuid.UUID) -> List[Dict[str, Any]]:
        lines = self.repo.get_lines_with_details(user_id)
        return [self._line_view(line) for line in lines]

    @staticmethod
    def _line_view(line: CartLineModel) -> Dict[str, Any]:
        #brakujace joiny -> puste/zero zamiast bledu
        product = line.product
        prices = [s.price for s in product.sizes] if product else []
        images = [m.url for m in product.medias if m.type == "image"] if product else []

        return {
            "product_id": product.id if product else 0,
            "name": product.name if product else "",
            "price": min(prices) if prices else 0,
            "image": images[0] if images else "",
            "size_id": line.size_id or 0,
            "size": line.size.label if line.size else "",
            "quantity": line.quantity,
        }

    #commands
    @conflict_retry()
    def upsert_line(self, user_id: uuid.UUID, product_id: int, size_id: int, quantity: int) -> None:
        if not product_id or not size_id:
            raise ValueError("productId and sizeId are required")

        if not isinstance(quantity, int) or quantity <= 0:
            raise ValueError("quantity must be a positive integer")

        if not self.products.exists(product_id):
            raise LookupError("Product not found")

        try:
            line = self.repo.get_line(user_id, product_id, size_id)

            if line:
                logger.info(
                    f"Linia ({product_id}, {size_id}) uzytkownika {user_id}: "
                    f"ilosc {line.quantity} -> {quantity}"
                )
                line.quantity = quantity
            else:
                logger.info(f"Nowa linia ({product_id}, {size_id}) dla uzytkownika {user_id}")
                self.repo.add_line(
                    CartLineModel(
                        user_id=user_id,
                        product_id=product_id,
                        size_id=size_id,
                        quantity=quantity,
                    )
                )

            self.repo.commit()

        except IntegrityError as e:
            self.repo.rollback()
            if not is_unique_violation(e):
                # np. FK na usunietego uzytkownika - ponowienie nic nie da
                raise
            logger.warning(f"Konflikt na kluczu ({user_id}, {product_id}, {size_id}), ponawiam")
            raise CartConflictError(
                "Cart line was modified concurrently, retry the request"
            ) from e

    def remove_line(self, user_id: uuid.UUID, product_id: int, size_id: int) -> None:
        if not product_id or not size_id:
            raise ValueError("productId and sizeId are required")

        deleted = self.repo.delete_line(user_id, product_id, size_id)
        self.repo.commit()

        # usuniecie nieistniejacej linii to nie blad
        logger.info(f"Usunieto {deleted} linii ({product_id}, {size_id}) uzytkownika {user_id}")

    @conflict_retry()
    def sync_cart(self, user_id: uuid.UUID, items: Iterable[CartLineIn]) -> int:
        """
        Reconciliation: offline koszyk klienta -> ledger.

        Pozycje przychodza juz zwalidowane (CartLineIn), caly batch albo nic.
        1. wszystkie produkty musza istniec, inaczej nic nie jest zapisane
        2. istniejaca linia: nadpisz ilosc (klient wygrywa, bez sumowania)
        3. brak linii: insert
        Wszystkie zapisy w jednej transakcji - commit raz, rollback przy bledzie.
        Ponowienie tego samego batcha nic nie zmienia (overwrite jest idempotentny).

        Zwraca liczbe przetworzonych pozycji.
        """
        batch = list(items)

        if not batch:
            return 0

        wanted = {item.product_id for item in batch}
        missing = wanted - self.products.existing_ids(wanted)
        if missing:
            raise LookupError(f"Product not found: {', '.join(str(p) for p in sorted(missing))}")

        existing: Dict[LineKey, CartLineModel] = {
            (line.product_id, line.size_id): line for line in self.repo.get_lines(user_id)
        }

        try:
            for item in batch:
                line = existing.get((item.product_id, item.size_id))

                if line:
                    line.quantity = item.quantity
                else:
                    line = self.repo.add_line(
                        CartLineModel(
                            user_id=user_id,
                            product_id=item.product_id,
                            size_id=item.size_id,
                            quantity=item.quantity,
                        )
                    )
                    # duplikat klucza w tym samym batchu nadpisze te linie
                    existing[(item.product_id, item.size_id)] = line

            self.repo.commit()

        except IntegrityError as e:
            self.repo.rollback()
            if not is_unique_violation(e):
                raise
            logger.warning(f"Konflikt podczas synchronizacji koszyka uzytkownika {user_id}, ponawiam")
            raise CartConflictError(
                "Cart was modified concurrently, retry the synchronization"
            ) from e
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Zsynchronizowano {len(batch)} pozycji koszyka uzytkownika {user_id}")

        return len(batch)
