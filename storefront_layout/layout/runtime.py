from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

from storefront_layout.layout.aliases import CATALOG_ALIAS_TABLE, AliasTable
from storefront_layout.layout.normalizer import normalize_layout


def _finite_number(value: Any) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value


@dataclass(frozen=True)
class RuntimeContext:
    """Live data overlaid on ``root.props`` for the editor and the public renderer."""

    store: Optional[Mapping[str, Any]] = None
    products: Any = field(default_factory=list)
    is_preview: bool = False
    is_editor: bool = False
    preview_offset: Any = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "RuntimeContext":
        return cls(
            store=values.get("store"),
            products=values.get("products"),
            is_preview=values.get("isPreview", False),
            is_editor=values.get("isEditor", False),
            preview_offset=values.get("previewOffset", 0),
        )

    def to_root_props(self) -> dict[str, Any]:
        return {
            "store": dict(self.store) if isinstance(self.store, Mapping) else None,
            "products": list(self.products) if isinstance(self.products, list) else [],
            "isPreview": bool(self.is_preview),
            "isEditor": bool(self.is_editor),
            "previewOffset": _finite_number(self.preview_offset),
        }


def sanitize_for_storage(
    document: Any,
    default_document: Mapping[str, Any],
    allowed_types: Optional[Iterable[str]] = None,
    *,
    alias_table: AliasTable = CATALOG_ALIAS_TABLE,
) -> dict[str, Any]:
    # Normalization strips the runtime root props.
    return normalize_layout(document, default_document, allowed_types, alias_table=alias_table)


def inject_runtime_context(
    document: Any,
    default_document: Mapping[str, Any],
    allowed_types: Optional[Iterable[str]],
    context: Union[RuntimeContext, Mapping[str, Any]],
    *,
    alias_table: AliasTable = CATALOG_ALIAS_TABLE,
) -> dict[str, Any]:
    normalized = normalize_layout(document, default_document, allowed_types, alias_table=alias_table)
    runtime = context if isinstance(context, RuntimeContext) else RuntimeContext.from_mapping(context)
    root = normalized.get("root") if isinstance(normalized.get("root"), dict) else {}
    root_props = root.get("props") if isinstance(root.get("props"), dict) else {}
    return {
        **normalized,
        "root": {
            **root,
            "props": {**root_props, **runtime.to_root_props()},
        },
    }
