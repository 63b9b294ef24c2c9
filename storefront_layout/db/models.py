from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront_layout.db.base import Base
from storefront_layout.db.enums import RendererEnum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class Store(Base):
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(length=64), primary_key=True, default=_new_id)
    profile_id: Mapped[str | None] = mapped_column(String(length=64), nullable=True, index=True)
    slug: Mapped[str] = mapped_column(String(length=128), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(length=255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    logo_file_id: Mapped[str | None] = mapped_column(String(length=128), nullable=True)
    template_id: Mapped[str] = mapped_column(String(length=64), nullable=False, default="minimal")
    layout_family: Mapped[str | None] = mapped_column(String(length=64), nullable=True)
    active_renderer: Mapped[str] = mapped_column(
        String(length=32), nullable=False, default=RendererEnum.fixedTemplate.value
    )
    settings: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    categories_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    purchase_instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    payment_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Textual JSON of the sanitized layout document; NULL until the first save.
    layout_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    products: Mapped[list["Product"]] = relationship(
        back_populates="store", cascade="all, delete-orphan", order_by="Product.created_at"
    )


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(length=64), primary_key=True, default=_new_id)
    store_id: Mapped[str] = mapped_column(
        String(length=64), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(length=255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    currency: Mapped[str] = mapped_column(String(length=8), nullable=False, default="MXN")
    category_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    image_file_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    store: Mapped[Store] = relationship(back_populates="products")
