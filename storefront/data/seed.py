# storefront/data/seed.py
import json
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.product import (
    BrandModel,
    ProductModel,
    SizeModel,
    MediaModel,
    AnalyticsModel,
    GENDERS,
)
from storefront.repos.product_repo import ProductRepo
from storefront.utils.settings import DATASET_PATH
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MRP = 2999


def find_mrp(price: int, discount_percentage: int | None = None) -> int:
    """Cena katalogowa z ceny po rabacie, zaokraglona w gore do ...9."""
    mrp = int(price / ((100 - (discount_percentage or 0)) / 100))
    return mrp + (9 - mrp % 10)


def read_dataset(path: str | None = None) -> List[Dict[str, Any]]:
    with open(path or DATASET_PATH, encoding="utf-8") as fh:
        return json.load(fh)["data"]


def load_dataset(db: Session, records: List[Dict[str, Any]]) -> int:
    """
    Laduje produkty (brand, sizes, media, analytics) w jednej transakcji.
    Zwraca liczbe dodanych produktow.
    """
    try:
        brands: Dict[str, BrandModel] = {}
        for rec in records:
            name = rec["brand"]["name"]
            if name not in brands:
                brands[name] = BrandModel(name=name, description="A Good Brand")
        db.add_all(brands.values())

        for rec in records:
            details = rec.get("productDetails") or {}
            discounts = rec.get("discounts") or []
            discount = discounts[0].get("percent", 0) if discounts else 0
            analytics = rec["analytics"]

            gender = analytics["gender"].lower()
            if gender not in GENDERS:
                raise ValueError(f"Invalid gender in dataset: {analytics['gender']}")

            product = ProductModel(
                name=rec["name"],
                manufacturer=rec.get("manufacturer"),
                country_of_origin=rec.get("countryOfOrigin"),
                base_colour=rec.get("baseColour"),
                brand=brands[rec["brand"]["name"]],
                description=details.get("description"),
                material_and_care=details.get("materialAndCare"),
                specifications=details.get("specification"),
            )
            product.sizes = [
                SizeModel(
                    label=s["label"],
                    available=s["available"],
                    mrp=find_mrp(s["price"], discount) if s.get("price") else DEFAULT_MRP,
                    discount_percentage=discount or 0,
                    measurements=s.get("measurements"),
                )
                for s in rec.get("sizes", [])
            ]
            product.medias = [MediaModel(type="image", url=url) for url in rec.get("images", [])]
            product.analytic = AnalyticsModel(
                gender=gender,
                article_type=analytics["articleType"],
                category=analytics["subCategory"],
            )
            db.add(product)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Dataset loaded: {len(records)} products, {len(brands)} brands")
    return len(records)


def clear_dataset(db: Session) -> None:
    try:
        ProductRepo(db).clear_catalog()
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Dataset cleared")
