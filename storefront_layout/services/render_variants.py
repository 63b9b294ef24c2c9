from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from storefront_layout.db.enums import RendererEnum
from storefront_layout.services.catalog_templates import FALLBACK_TEMPLATE_ID, get_catalog_template
from storefront_layout.services.store_settings import (
    resolve_settings_colors,
    resolve_settings_font,
    resolve_store_settings,
)

GLOBAL_DEFAULT_PRIMARY = "#6366f1"
GLOBAL_DEFAULT_SECONDARY = "#4f46e5"
GLOBAL_DEFAULT_FONT = "inter"

FONT_FAMILY_MAP: dict[str, str] = {
    "inter": '"Inter", sans-serif',
    "merriweather": '"Merriweather", serif',
    "jetbrains": '"JetBrains Mono", monospace',
    "roboto": '"Roboto", sans-serif',
    "playfair": '"Playfair Display", serif',
    "montserrat": '"Montserrat", sans-serif',
}

# Older store records saved the editor's name for each renderer.
_STORED_RENDERER_ALIASES: dict[str, RendererEnum] = {
    "blockTree": RendererEnum.blockTree,
    "puck": RendererEnum.blockTree,
    "fixedTemplate": RendererEnum.fixedTemplate,
    "template": RendererEnum.fixedTemplate,
}


def parse_renderer_choice(value: Any) -> Optional[RendererEnum]:
    if isinstance(value, RendererEnum):
        return value
    if not isinstance(value, str):
        return None
    return _STORED_RENDERER_ALIASES.get(value.strip())


def select_renderer(
    store_config: Mapping[str, Any],
    feature_enabled: bool,
    override: Union[RendererEnum, str, None] = None,
) -> RendererEnum:
    forced = parse_renderer_choice(override)
    if forced is RendererEnum.fixedTemplate:
        return RendererEnum.fixedTemplate
    if not feature_enabled:
        return RendererEnum.fixedTemplate
    if forced is RendererEnum.blockTree:
        return RendererEnum.blockTree
    stored = parse_renderer_choice(store_config.get("activeRenderer"))
    if stored is RendererEnum.blockTree:
        return RendererEnum.blockTree
    return RendererEnum.fixedTemplate


@dataclass(frozen=True)
class ResolvedTheme:
    primary: str
    secondary: str
    font: str

    @property
    def font_family(self) -> str:
        return FONT_FAMILY_MAP.get(self.font, FONT_FAMILY_MAP[GLOBAL_DEFAULT_FONT])

    def to_dict(self) -> dict[str, Any]:
        return {
            "colors": {"primary": self.primary, "secondary": self.secondary},
            "font": self.font,
            "fontFamily": self.font_family,
        }


def resolve_theme(
    store_config: Mapping[str, Any],
    fallback_template_id: str = FALLBACK_TEMPLATE_ID,
) -> ResolvedTheme:
    """Resolve colors and font for the fixed-template renderer.

    Tiers, first match wins: the store's own style settings, the selected
    template's declared defaults, the global default. The color pair is taken
    whole from the first tier that has both colors so palettes are never mixed.
    Font resolves independently along the same tiers.
    """
    settings = resolve_store_settings(store_config.get("settings"))
    template = get_catalog_template(store_config.get("templateId"), fallback_template_id)
    template_theme = template.default_theme

    store_primary, store_secondary = "", ""
    store_font = ""
    if settings.get("useTemplateStyles") is not True:
        store_primary, store_secondary = resolve_settings_colors(settings)
        store_font = resolve_settings_font(settings)

    color_tiers = (
        (store_primary, store_secondary),
        (template_theme.primary, template_theme.secondary),
        (GLOBAL_DEFAULT_PRIMARY, GLOBAL_DEFAULT_SECONDARY),
    )
    primary, secondary = next(pair for pair in color_tiers if pair[0] and pair[1])
    font = next(value for value in (store_font, template_theme.font, GLOBAL_DEFAULT_FONT) if value)

    return ResolvedTheme(primary=primary, secondary=secondary, font=font)
