# storefront/repos/cart_repo.py
import uuid
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session, joinedload, selectinload

from storefront.data.models.cart_line import CartLineModel
from storefront.data.models.product import ProductModel


class CartRepo:
    """Dostep do tabeli cart_lines. Commit/rollback decyduje serwis."""

    def __init__(self, db: Session):
        self.db = db

    def get_lines(self, user_id: uuid.UUID) -> List[CartLineModel]:
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.user_id == user_id)
                .order_by(CartLineModel.created_at, CartLineModel.id)
            ).scalars()
        )

    def get_lines_with_details(self, user_id: uuid.UUID) -> List[CartLineModel]:
        #product + sizes + media + size label w jednym przejsciu
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.user_id == user_id)
                .options(
                    joinedload(CartLineModel.product).selectinload(ProductModel.sizes),
                    joinedload(CartLineModel.product).selectinload(ProductModel.medias),
                    joinedload(CartLineModel.size),
                )
                .order_by(CartLineModel.created_at, CartLineModel.id)
            ).unique().scalars()
        )

    def get_line(self, user_id: uuid.UUID, product_id: int, size_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel).where(
                CartLineModel.user_id == user_id,
                CartLineModel.product_id == product_id,
                CartLineModel.size_id == size_id,
            )
        ).scalar_one_or_none()

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        # flush so a unique key violation surfaces here, not at commit
        self.db.flush()
        return line

    def delete_line(self, user_id: uuid.UUID, product_id: int, size_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel).where(
                CartLineModel.user_id == user_id,
                CartLineModel.product_id == product_id,
                CartLineModel.size_id == size_id,
            )
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
