# storefront/repos/product_repo.py
from typing import Iterable, List, Set

from sqlalchemy import select, distinct, delete
from sqlalchemy.orm import Session, selectinload, joinedload

from storefront.data.models.product import (
    BrandModel,
    ProductModel,
    SizeModel,
    MediaModel,
    AnalyticsModel,
)


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def exists(self, product_id: int) -> bool:
        return self.db.get(ProductModel, product_id) is not None

    def existing_ids(self, product_ids: Iterable[int]) -> Set[int]:
        ids = set(product_ids)
        if not ids:
            return set()
        return set(
            self.db.execute(
                select(ProductModel.id).where(ProductModel.id.in_(ids))
            ).scalars()
        )

    def list_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .options(
                    joinedload(ProductModel.brand),
                    selectinload(ProductModel.sizes),
                    selectinload(ProductModel.medias),
                )
                .order_by(ProductModel.id)
            ).unique().scalars()
        )

    def brand_names(self) -> List[str]:
        return list(self.db.execute(select(distinct(BrandModel.name)).order_by(BrandModel.name)).scalars())

    def article_types(self) -> List[str]:
        return list(
            self.db.execute(
                select(distinct(AnalyticsModel.article_type)).order_by(AnalyticsModel.article_type)
            ).scalars()
        )

    def genders(self) -> List[str]:
        return list(self.db.execute(select(distinct(AnalyticsModel.gender)).order_by(AnalyticsModel.gender)).scalars())

    def clear_catalog(self):
        # children first, same order as the FKs
        for model in (AnalyticsModel, MediaModel, SizeModel, ProductModel, BrandModel):
            self.db.execute(delete(model))
