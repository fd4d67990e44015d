# storefront/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.data.database import Base

MEDIA_TYPES = ("image", "video", "animated_gif")
GENDERS = ("men", "women", "unisex")


class BrandModel(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)

    products = relationship("ProductModel", back_populates="brand")


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    manufacturer = Column(String, nullable=True)
    country_of_origin = Column(String, nullable=True)
    base_colour = Column(String, nullable=True)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    description = Column(Text, nullable=True)
    material_and_care = Column(Text, nullable=True)
    specifications = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    brand = relationship("BrandModel", back_populates="products")
    sizes = relationship("SizeModel", back_populates="product", cascade="all, delete-orphan", order_by="SizeModel.id")
    medias = relationship("MediaModel", back_populates="product", cascade="all, delete-orphan", order_by="MediaModel.id")
    analytic = relationship("AnalyticsModel", back_populates="product", uselist=False, cascade="all, delete-orphan")


class SizeModel(Base):
    __tablename__ = "sizes"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    label = Column(String, nullable=False)
    available = Column(Boolean, nullable=False)
    mrp = Column(Integer, nullable=False)
    discount_percentage = Column(Integer, nullable=False, default=0)
    measurements = Column(JSON, nullable=True)

    product = relationship("ProductModel", back_populates="sizes")

    @property
    def price(self) -> float:
        """Price after discount."""
        return self.mrp - (self.mrp * (self.discount_percentage or 0)) / 100


class MediaModel(Base):
    __tablename__ = "media"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    type = Column(Enum(*MEDIA_TYPES, name="media_type"), nullable=False, default="image")
    url = Column("image_url", Text, nullable=False)

    product = relationship("ProductModel", back_populates="medias")


class AnalyticsModel(Base):
    __tablename__ = "analytics"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    article_type = Column(String, nullable=False)
    gender = Column(Enum(*GENDERS, name="gender"), nullable=False)
    category = Column(String, nullable=False)

    product = relationship("ProductModel", back_populates="analytic")
