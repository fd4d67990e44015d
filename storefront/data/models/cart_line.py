# storefront/data/models/cart_line.py
import uuid

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.data.database import Base


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False)
    # no FK on sizes, a size row may be reloaded with the dataset
    size_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("UserModel", back_populates="cart_lines")
    product = relationship("ProductModel")
    size = relationship(
        "SizeModel",
        primaryjoin="foreign(CartLineModel.size_id) == SizeModel.id",
        viewonly=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "size_id", name="uq_cart_user_product_size"),
        CheckConstraint("quantity > 0", name="ck_cart_quantity_positive"),
    )
