# storefront/services/catalog_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.repos.product_repo import ProductRepo


class CatalogService:
    """
    Odczyt katalogu. Filtrowanie i paginacja w pamieci na pelnej liscie
    produktow - katalog jest maly.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_items(
        self,
        brands: List[str] | None = None,
        min_price: int | None = None,
        max_price: int | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        items = [self._item_view(p) for p in self.repo.list_products()]

        if brands:
            items = [i for i in items if i["brand"]["name"] in brands]

        if min_price is not None:
            items = [i for i in items if i["price"] >= min_price]

        if max_price is not None:
            items = [i for i in items if i["price"] <= max_price]

        start = (page - 1) * limit

        return {
            "data": items[start:start + limit],
            "total": len(items),
        }

    @staticmethod
    def _item_view(product: ProductModel) -> Dict[str, Any]:
        prices = [s.price for s in product.sizes]
        return {
            "id": product.id,
            "name": product.name,
            "price": min(prices) if prices else 0,
            "images": [m.url for m in product.medias],
            "base_colour": product.base_colour or "N/A",
            "brand": {"name": product.brand.name if product.brand else "N/A"},
        }

    def filter_options(self) -> Dict[str, List[str]]:
        return {
            "brands": self.repo.brand_names(),
            "categories": self.repo.article_types(),
            "genders": self.repo.genders(),
        }
