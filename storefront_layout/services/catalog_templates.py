from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ThemeDefaults:
    primary: str
    secondary: str
    font: str


@dataclass(frozen=True)
class CatalogTemplate:
    template_id: str
    name: str
    description: str
    thumbnail: str
    default_theme: ThemeDefaults


FALLBACK_TEMPLATE_ID = "minimal"

CATALOG_TEMPLATES: dict[str, CatalogTemplate] = {
    "minimal": CatalogTemplate(
        template_id="minimal",
        name="Minimal",
        description="Simple typography, clean background, direct product list",
        thumbnail="/templates/minimal-thumb.png",
        default_theme=ThemeDefaults(primary="#171717", secondary="#404040", font="inter"),
    ),
    "storefront": CatalogTemplate(
        template_id="storefront",
        name="Storefront",
        description="Prominent header with description, classic store look",
        thumbnail="/templates/storefront-thumb.png",
        default_theme=ThemeDefaults(primary="#3b82f6", secondary="#1e40af", font="roboto"),
    ),
    "gallery": CatalogTemplate(
        template_id="gallery",
        name="Gallery",
        description="Visual grid, ideal for products with a strong visual component",
        thumbnail="/templates/gallery-thumb.png",
        default_theme=ThemeDefaults(primary="#ec4899", secondary="#be185d", font="playfair"),
    ),
    "noir": CatalogTemplate(
        template_id="noir",
        name="Noir Grid",
        description="Dark aesthetic with premium cards and an editorial focus",
        thumbnail="/templates/noir-thumb.png",
        default_theme=ThemeDefaults(primary="#a855f7", secondary="#7e22ce", font="montserrat"),
    ),
}


def list_catalog_templates() -> list[CatalogTemplate]:
    return list(CATALOG_TEMPLATES.values())


def get_catalog_template(template_id: Optional[str], fallback_id: str = FALLBACK_TEMPLATE_ID) -> CatalogTemplate:
    template = CATALOG_TEMPLATES.get(template_id or "")
    if template is not None:
        return template
    return CATALOG_TEMPLATES.get(fallback_id) or CATALOG_TEMPLATES[FALLBACK_TEMPLATE_ID]
