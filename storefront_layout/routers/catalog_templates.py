from __future__ import annotations

from fastapi import APIRouter

from storefront_layout.schemas.layouts import CatalogTemplateSummary, ThemeDefaultsResponse
from storefront_layout.services.catalog_templates import list_catalog_templates

router = APIRouter(prefix="/catalog-templates", tags=["catalog-templates"])


@router.get("", response_model=list[CatalogTemplateSummary])
def list_templates() -> list[CatalogTemplateSummary]:
    return [
        CatalogTemplateSummary(
            id=tmpl.template_id,
            name=tmpl.name,
            description=tmpl.description,
            thumbnail=tmpl.thumbnail,
            defaultTheme=ThemeDefaultsResponse(
                primary=tmpl.default_theme.primary,
                secondary=tmpl.default_theme.secondary,
                font=tmpl.default_theme.font,
            ),
        )
        for tmpl in list_catalog_templates()
    ]
