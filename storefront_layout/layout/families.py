from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from storefront_layout.layout.aliases import ALIAS_TABLES, EMPTY_ALIAS_TABLE, AliasTable
from storefront_layout.layout.normalizer import NormalizationReport, inspect_layout, is_renderable
from storefront_layout.layout.runtime import RuntimeContext, inject_runtime_context, sanitize_for_storage


@dataclass(frozen=True)
class BlockType:
    type_id: str
    label: str
    category: Optional[str]
    default_props: Mapping[str, Any]


@dataclass(frozen=True)
class LayoutFamily:
    family_id: str
    name: str
    description: Optional[str]
    block_types: Mapping[str, BlockType]
    categories: Mapping[str, Mapping[str, Any]]
    root_default_props: Mapping[str, Any]
    alias_table: AliasTable
    _default_document: dict[str, Any] = field(repr=False)

    @property
    def allowed_types(self) -> frozenset[str]:
        return frozenset(self.block_types)

    @property
    def default_document(self) -> dict[str, Any]:
        return deepcopy(self._default_document)

    def default_props(self, type_id: str) -> dict[str, Any]:
        block_type = self.block_types.get(type_id)
        if block_type is None:
            return {}
        return deepcopy(dict(block_type.default_props))

    def new_block(self, type_id: str, props: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        if type_id not in self.block_types:
            raise KeyError(f"Block type {type_id} is not part of layout family {self.family_id}")
        return {"type": type_id, "props": {**self.default_props(type_id), **dict(props or {})}}

    def inspect(self, raw: Any) -> NormalizationReport:
        return inspect_layout(raw, self._default_document, self.allowed_types, alias_table=self.alias_table)

    def normalize(self, raw: Any) -> dict[str, Any]:
        return self.inspect(raw).document

    def sanitize_for_storage(self, document: Any) -> dict[str, Any]:
        return sanitize_for_storage(
            document, self._default_document, self.allowed_types, alias_table=self.alias_table
        )

    def inject_context(
        self, document: Any, context: Union[RuntimeContext, Mapping[str, Any]]
    ) -> dict[str, Any]:
        return inject_runtime_context(
            document,
            self._default_document,
            self.allowed_types,
            context,
            alias_table=self.alias_table,
        )


def _families_dir() -> Path:
    # storefront_layout/layout -> storefront_layout
    return Path(__file__).resolve().parents[1] / "templates" / "layouts"


def _load_block_types(path: Path, raw_blocks: Any) -> dict[str, BlockType]:
    if not isinstance(raw_blocks, dict) or not raw_blocks:
        raise ValueError(f"Layout family {path} missing required blocks")
    block_types: dict[str, BlockType] = {}
    for type_id, definition in raw_blocks.items():
        if not isinstance(definition, dict):
            raise ValueError(f"Layout family {path} block {type_id} must be an object")
        default_props = definition.get("defaultProps", {})
        if not isinstance(default_props, dict):
            raise ValueError(f"Layout family {path} block {type_id} defaultProps must be an object")
        label = definition.get("label")
        category = definition.get("category")
        block_types[type_id] = BlockType(
            type_id=type_id,
            label=label if isinstance(label, str) and label else type_id,
            category=category if isinstance(category, str) else None,
            default_props=MappingProxyType(default_props),
        )
    return block_types


def _load_family(path: Path) -> LayoutFamily:
    data = json.loads(path.read_text(encoding="utf-8"))
    family_id = data.get("id")
    name = data.get("name")
    declared_default = data.get("defaultData")
    if not isinstance(family_id, str) or not family_id:
        raise ValueError(f"Layout family {path} missing required id")
    if not isinstance(name, str) or not name:
        raise ValueError(f"Layout family {path} missing required name")
    if not isinstance(declared_default, dict):
        raise ValueError(f"Layout family {path} missing required defaultData")

    block_types = _load_block_types(path, data.get("blocks"))

    alias_table_name = data.get("aliasTable")
    if alias_table_name is None:
        alias_table = EMPTY_ALIAS_TABLE
    elif alias_table_name in ALIAS_TABLES:
        alias_table = ALIAS_TABLES[alias_table_name]
    else:
        raise ValueError(f"Layout family {path} references unknown alias table {alias_table_name}")

    categories = data.get("categories") or {}
    if not isinstance(categories, dict):
        raise ValueError(f"Layout family {path} categories must be an object")
    for category_id, category in categories.items():
        components = category.get("components", []) if isinstance(category, dict) else None
        if not isinstance(components, list):
            raise ValueError(f"Layout family {path} category {category_id} must list components")
        unknown = [component for component in components if component not in block_types]
        if unknown:
            raise ValueError(f"Layout family {path} category {category_id} lists unknown blocks: {unknown}")

    root_default_props = data.get("rootDefaultProps") or {}
    if not isinstance(root_default_props, dict):
        raise ValueError(f"Layout family {path} rootDefaultProps must be an object")

    if not is_renderable(declared_default):
        raise ValueError(f"Layout family {path} defaultData has no blocks")
    # The stored default must be a normalization fixed point, ids included.
    report = inspect_layout(
        declared_default,
        declared_default,
        frozenset(block_types),
        alias_table=alias_table,
    )
    if report.used_default or report.dropped:
        raise ValueError(f"Layout family {path} defaultData contains blocks outside the family")

    return LayoutFamily(
        family_id=family_id,
        name=name,
        description=data.get("description"),
        block_types=MappingProxyType(block_types),
        categories=MappingProxyType(categories),
        root_default_props=MappingProxyType(root_default_props),
        alias_table=alias_table,
        _default_document=report.document,
    )


@lru_cache(maxsize=1)
def _load_families() -> Mapping[str, LayoutFamily]:
    families: dict[str, LayoutFamily] = {}
    directory = _families_dir()
    if not directory.exists():
        return MappingProxyType(families)
    for path in sorted(directory.glob("*.json")):
        family = _load_family(path)
        if family.family_id in families:
            raise ValueError(f"Duplicate layout family id {family.family_id} in {path}")
        families[family.family_id] = family
    return MappingProxyType(families)


def list_layout_families() -> list[LayoutFamily]:
    return list(_load_families().values())


def get_layout_family(family_id: Optional[str]) -> Optional[LayoutFamily]:
    if not family_id:
        return None
    return _load_families().get(family_id)


def resolve_layout_family(family_id: Optional[str], fallback_id: str) -> LayoutFamily:
    family = get_layout_family(family_id) or get_layout_family(fallback_id)
    if family is None:
        raise ValueError(f"Fallback layout family {fallback_id} is not installed")
    return family
