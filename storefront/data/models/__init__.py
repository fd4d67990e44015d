# all models imported here so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import (
    BrandModel,
    ProductModel,
    SizeModel,
    MediaModel,
    AnalyticsModel,
)
from storefront.data.models.cart_line import CartLineModel

__all__ = [
    "UserModel",
    "BrandModel",
    "ProductModel",
    "SizeModel",
    "MediaModel",
    "AnalyticsModel",
    "CartLineModel",
]
