from __future__ import annotations

import json
from typing import Any

DEFAULT_CATALOG_SETTINGS: dict[str, Any] = {
    "showSearch": True,
    "showFilters": True,
    "showSort": True,
    "showProductCount": True,
    "showShareButton": True,
    "showPurchaseInfo": True,
    "showPaymentButton": True,
    "showCart": True,
    "featuredProductIds": [],
}


def resolve_store_settings(raw_settings: Any) -> dict[str, Any]:
    """Parse the store ``settings`` field, stored either as JSON text or as an object."""
    if not raw_settings:
        return {}
    if isinstance(raw_settings, str):
        try:
            parsed = json.loads(raw_settings)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    if isinstance(raw_settings, dict):
        return dict(raw_settings)
    return {}


def resolve_catalog_settings(raw_settings: Any) -> dict[str, Any]:
    catalog = resolve_store_settings(raw_settings).get("catalog")
    merged = {**DEFAULT_CATALOG_SETTINGS, "featuredProductIds": []}
    if isinstance(catalog, dict):
        merged.update(catalog)
    return merged


def _first_non_blank(*values: Any) -> str:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def resolve_settings_font(settings: dict[str, Any]) -> str:
    raw_font = settings.get("font")
    if isinstance(raw_font, str):
        return raw_font.strip()
    if isinstance(raw_font, dict):
        return _first_non_blank(raw_font.get("id"), raw_font.get("value"), raw_font.get("family"), raw_font.get("name"))
    return ""


def resolve_settings_colors(settings: dict[str, Any]) -> tuple[str, str]:
    colors = settings.get("colors")
    if not isinstance(colors, dict):
        return "", ""
    return _first_non_blank(colors.get("primary")), _first_non_blank(colors.get("secondary"))
