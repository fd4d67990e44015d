"""
Component tests for the Cart Ledger (GET/POST /cart, POST /cart/remove).

Real router, service, repo and SQLite database; identity comes from the
cookie minted at signup.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from storefront.data.database import SessionLocal
from storefront.data.models import CartLineModel
from storefront.domain.errors import CartConflictError
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService, is_unique_violation
from storefront.services.token_service import TokenService


class TestUpsert:

    def test_add_line_and_read_it_back_with_display_data(self, auth_client: TestClient, catalog):
        """
        Validates:
        - POST /cart inserts a new line
        - GET /cart joins name, cheapest size price, first image and size label
        """
        # Act
        response = auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})

        # Assert
        assert response.status_code == 200
        assert response.json() == {"message": "Item added to cart"}

        cart = auth_client.get("/api/cart").json()
        assert len(cart) == 1
        line = cart[0]
        assert line["productId"] == 7
        assert line["sizeId"] == 2
        assert line["quantity"] == 3
        assert line["name"] == "Men Slim Fit Casual Shirt"
        assert line["size"] == "M"
        # cheapest size S: 1199 - 40%
        assert line["price"] == pytest.approx(719.4)
        # video skipped, first image wins
        assert line["image"] == "https://cdn.example.com/7/front.jpg"

    def test_existing_line_quantity_is_overwritten_not_summed(self, auth_client: TestClient, catalog, ledger):
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 5})

        rows = ledger()
        assert len(rows) == 1
        assert rows[0][1:] == (7, 2, 5)

    def test_repeated_upserts_keep_one_row_per_key(self, auth_client: TestClient, catalog, ledger):
        for quantity in (1, 4, 2, 9, 1):
            auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": quantity})
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 1, "quantity": 2})

        rows = ledger()
        assert [r[1:] for r in rows] == [(7, 1, 2), (7, 2, 1)]

    def test_missing_fields_are_rejected_and_ledger_unchanged(self, auth_client: TestClient, catalog, ledger):
        response = auth_client.post("/api/cart", json={"productId": 5})

        assert response.status_code == 400
        message = response.json()["message"]
        assert "sizeId" in message
        assert "quantity" in message
        assert ledger() == []

    @pytest.mark.parametrize("quantity", [0, -2, "many"])
    def test_quantity_must_be_positive_integer(self, auth_client: TestClient, catalog, ledger, quantity):
        response = auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": quantity})

        assert response.status_code == 400
        assert ledger() == []

    def test_unknown_product_is_404(self, auth_client: TestClient, catalog, ledger):
        response = auth_client.post("/api/cart", json={"productId": 999, "sizeId": 2, "quantity": 1})

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}
        assert ledger() == []


class TestGetCart:

    def test_empty_cart(self, auth_client: TestClient):
        response = auth_client.get("/api/cart")

        assert response.status_code == 200
        assert response.json() == []

    def test_missing_joins_degrade_to_defaults(self, auth_client: TestClient, catalog):
        """Shoes have no media; size 999 does not exist."""
        auth_client.post("/api/cart", json={"productId": 5, "sizeId": 999, "quantity": 1})

        line = auth_client.get("/api/cart").json()[0]

        assert line["image"] == ""
        assert line["size"] == ""
        assert line["sizeId"] == 999
        assert line["price"] == 2499

    def test_lines_are_scoped_to_the_verified_user(self, auth_client: TestClient, other_client: TestClient, catalog):
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})
        other_client.post("/api/cart", json={"productId": 5, "sizeId": 3, "quantity": 1})

        mine = auth_client.get("/api/cart").json()
        theirs = other_client.get("/api/cart").json()

        assert [(l["productId"], l["quantity"]) for l in mine] == [(7, 3)]
        assert [(l["productId"], l["quantity"]) for l in theirs] == [(5, 1)]


class TestRemove:

    def test_remove_existing_line(self, auth_client: TestClient, catalog, ledger):
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 1, "quantity": 1})

        response = auth_client.post("/api/cart/remove", json={"productId": 7, "sizeId": 2})

        assert response.status_code == 200
        assert response.json() == {"message": "Item removed from cart"}
        assert [r[1:] for r in ledger()] == [(7, 1, 1)]

    def test_remove_nonexistent_line_is_idempotent(self, auth_client: TestClient, catalog, ledger):
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})
        before = ledger()

        response = auth_client.post("/api/cart/remove", json={"productId": 5, "sizeId": 3})

        assert response.status_code == 200
        assert ledger() == before

    def test_remove_only_touches_own_lines(self, auth_client: TestClient, other_client: TestClient, catalog, ledger):
        other_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 3})

        auth_client.post("/api/cart/remove", json={"productId": 7, "sizeId": 2})

        assert len(ledger()) == 1

    def test_remove_requires_size(self, auth_client: TestClient):
        response = auth_client.post("/api/cart/remove", json={"productId": 7})

        assert response.status_code == 400
        assert "sizeId" in response.json()["message"]


class TestConcurrentWrites:
    """
    Two writers on the same new key: the loser hits the unique constraint,
    retries, finds the row and overwrites it.
    """

    def test_stale_read_resolves_to_single_row_last_write_wins(self, db_session, catalog, user_id, ledger, monkeypatch):
        # the other writer got there first
        other = SessionLocal()
        other.add(CartLineModel(user_id=user_id, product_id=7, size_id=2, quantity=1))
        other.commit()
        other.close()

        svc = CartService(db_session)
        real_get_line = svc.repo.get_line
        reads = []

        def stale_then_real(*args):
            reads.append(args)
            return None if len(reads) == 1 else real_get_line(*args)

        monkeypatch.setattr(svc.repo, "get_line", stale_then_real)

        svc.upsert_line(user_id, 7, 2, 4)

        assert len(reads) == 2
        assert ledger() == [(user_id, 7, 2, 4)]

    def test_persistent_conflict_surfaces_as_conflict_error(self, db_session, catalog, user_id, monkeypatch):
        other = SessionLocal()
        other.add(CartLineModel(user_id=user_id, product_id=7, size_id=2, quantity=1))
        other.commit()
        other.close()

        svc = CartService(db_session)
        monkeypatch.setattr(svc.repo, "get_line", lambda *args: None)

        with pytest.raises(CartConflictError):
            svc.upsert_line(user_id, 7, 2, 4)

    def test_conflict_is_409_not_500(self, auth_client: TestClient, catalog, monkeypatch):
        auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 1})
        monkeypatch.setattr(CartRepo, "get_line", lambda self, *args: None)

        response = auth_client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 2})

        assert response.status_code == 409
        assert "retry" in response.json()["message"]


class TestNonConflictIntegrityErrors:
    """Only unique key clashes are retried; other constraint failures surface at once."""

    def test_unknown_user_fails_once_without_retries(self, db_session, catalog, ledger, monkeypatch):
        svc = CartService(db_session)
        real_get_line = svc.repo.get_line
        reads = []

        def counting_get_line(*args):
            reads.append(args)
            return real_get_line(*args)

        monkeypatch.setattr(svc.repo, "get_line", counting_get_line)

        with pytest.raises(IntegrityError):
            svc.upsert_line(uuid.uuid4(), 7, 2, 1)

        assert len(reads) == 1
        assert ledger() == []

    def test_token_for_missing_user_is_not_a_409(self, client: TestClient, catalog, ledger):
        client.cookies.set("token", TokenService().issue(uuid.uuid4()))

        response = client.post("/api/cart", json={"productId": 7, "sizeId": 2, "quantity": 1})

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to add item to cart"}
        assert ledger() == []

    @pytest.mark.parametrize(
        "orig, expected",
        [
            (type("PgError", (Exception,), {"pgcode": "23505"})("duplicate key"), True),
            (type("PgError", (Exception,), {"pgcode": "23503"})("violates foreign key constraint"), False),
            (Exception("UNIQUE constraint failed: cart_lines.user_id"), True),
            (Exception("FOREIGN KEY constraint failed"), False),
        ],
    )
    def test_unique_violation_detection(self, orig, expected):
        error = IntegrityError("INSERT INTO cart_lines ...", {}, orig)

        assert is_unique_violation(error) is expected
