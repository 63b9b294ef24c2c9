from __future__ import annotations

import json
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront_layout.db.models import Product, Store


class StoresRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, *, store_id: str) -> Optional[Store]:
        stmt = select(Store).where(Store.id == store_id, Store.enabled.is_(True))
        return self.session.scalars(stmt).first()

    def get_by_slug(self, *, slug: str) -> Optional[Store]:
        normalized = (slug or "").strip().lower()
        stmt = select(Store).where(Store.slug == normalized, Store.enabled.is_(True))
        return self.session.scalars(stmt).first()

    def save_layout_data(self, *, store: Store, document: dict[str, Any]) -> Store:
        # Whole-document overwrite; the last save wins.
        store.layout_data = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
        self.session.add(store)
        self.session.commit()
        self.session.refresh(store)
        return store


class ProductsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_store(self, *, store_id: str) -> list[Product]:
        stmt = select(Product).where(Product.store_id == store_id).order_by(Product.created_at.asc(), Product.id.asc())
        return list(self.session.scalars(stmt).all())
