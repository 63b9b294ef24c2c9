from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from storefront_layout.config import settings
from storefront_layout.db.deps import get_session
from storefront_layout.schemas.layouts import PublicCatalogResponse
from storefront_layout.services.store_layouts import (
    CatalogUnavailableError,
    StoreNotFoundError,
    build_public_catalog_page,
)

router = APIRouter(prefix="/public", tags=["public"])


def get_block_tree_enabled() -> bool:
    return settings.BLOCK_TREE_RENDERER_ENABLED


@router.get("/catalog/{slug}", response_model=PublicCatalogResponse)
def get_public_catalog(
    slug: str,
    renderer: Optional[str] = Query(default=None),
    previewOffset: float = Query(default=0),
    feature_enabled: bool = Depends(get_block_tree_enabled),
    session: Session = Depends(get_session),
) -> PublicCatalogResponse:
    try:
        page = build_public_catalog_page(
            session=session,
            slug=slug,
            feature_enabled=feature_enabled,
            renderer_override=renderer,
            preview_offset=previewOffset,
        )
    except (StoreNotFoundError, CatalogUnavailableError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Catalog not available") from exc

    return PublicCatalogResponse(
        storeId=page.store_id,
        slug=page.slug,
        renderer=page.renderer.value,
        templateId=page.template_id,
        layoutData=page.layout_data,
        theme=page.theme,
        catalogSettings=page.catalog_settings,
    )
