# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List


class CamelModel(BaseModel):
    """Wire format uses camelCase (productId, sizeId), Python side snake_case."""

    model_config = ConfigDict(populate_by_name=True)


class Credentials(BaseModel):
    """Schema dla signup/login."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class MessageOut(BaseModel):
    message: str


class UserRead(BaseModel):
    email: str

    model_config = ConfigDict(from_attributes=True)


class CartLineIn(CamelModel):
    """Linia koszyka: POST /cart i pozycja batcha w /cart/sync."""

    product_id: int = Field(..., gt=0, alias="productId")
    size_id: int = Field(..., gt=0, alias="sizeId")
    quantity: int = Field(..., gt=0)


class CartLineKey(CamelModel):
    product_id: int = Field(..., gt=0, alias="productId")
    size_id: int = Field(..., gt=0, alias="sizeId")


class CartLineOut(CamelModel):
    product_id: int = Field(alias="productId")
    name: str
    price: float
    image: str
    size_id: int = Field(alias="sizeId")
    size: str
    quantity: int


class BrandOut(BaseModel):
    name: str


class ProductOut(CamelModel):
    id: int
    name: str
    price: float
    images: List[str]
    base_colour: str = Field(alias="baseColour")
    brand: BrandOut


class ItemsPage(BaseModel):
    data: List[ProductOut]
    total: int


class FilterOptions(BaseModel):
    brands: List[str]
    categories: List[str]
    genders: List[str]
