from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class LayoutSaveRequest(BaseModel):
    # Raw editor output; any shape is accepted and sanitized server side.
    layoutData: Any = None


class LayoutPreviewRequest(BaseModel):
    layoutData: Any = None
    previewOffset: float = 0


class StoreLayoutResponse(BaseModel):
    storeId: str
    familyId: str
    isDefault: bool
    layoutData: dict[str, Any]


class LayoutPreviewResponse(BaseModel):
    storeId: str
    familyId: str
    layoutData: dict[str, Any]


class BlockTypeSummary(BaseModel):
    type: str
    label: str
    category: Optional[str] = None
    defaultProps: dict[str, Any] = Field(default_factory=dict)


class LayoutFamilySummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class LayoutFamilyDetail(LayoutFamilySummary):
    blockTypes: list[BlockTypeSummary]
    categories: dict[str, Any]
    rootDefaultProps: dict[str, Any]
    defaultData: dict[str, Any]


class ThemeColors(BaseModel):
    primary: str
    secondary: str


class ThemeResponse(BaseModel):
    colors: ThemeColors
    font: str
    fontFamily: str


class PublicCatalogResponse(BaseModel):
    storeId: str
    slug: str
    renderer: str
    templateId: str
    layoutData: Optional[dict[str, Any]] = None
    theme: Optional[ThemeResponse] = None
    catalogSettings: dict[str, Any]


class ThemeDefaultsResponse(BaseModel):
    primary: str
    secondary: str
    font: str


class CatalogTemplateSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    defaultTheme: ThemeDefaultsResponse
