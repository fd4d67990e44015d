# storefront/api/routers/items.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ItemsPage, FilterOptions
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/items", response_model=ItemsPage)
def list_items(
    brands: str | None = Query(None, description="Comma separated brand names"),
    min_price: int | None = Query(None, alias="minPrice"),
    max_price: int | None = Query(None, alias="maxPrice"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    svc = CatalogService(db)
    brand_list = [b for b in brands.split(",") if b] if brands else None
    return svc.list_items(
        brands=brand_list,
        min_price=min_price,
        max_price=max_price,
        page=page,
        limit=limit,
    )


@router.get("/filter-options", response_model=FilterOptions)
def filter_options(db: Session = Depends(get_db)):
    return CatalogService(db).filter_options()
