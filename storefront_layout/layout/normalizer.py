"""Normalization of persisted layout documents.

A layout document has three parts:

- ``content``: ordered blocks of the unnamed top-level zone
- ``zones``: named zones, each an ordered list of blocks
- ``root``: ``{"props": {...}}`` holding document-wide settings

``normalize_layout`` accepts anything (JSON text, bytes, a mapping, garbage)
and always returns a well-formed, renderable document, falling back to a
deep copy of the supplied default document when the input cannot be used.
Individual bad blocks are dropped instead of invalidating the document.
"""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from storefront_layout.layout.aliases import CATALOG_ALIAS_TABLE, AliasTable
from storefront_layout.layout.identity import DEFAULT_ID_PREFIX, ReassignedId, allocate_block_ids

# Keys injected into root.props for rendering/editing; never persisted.
RUNTIME_ROOT_PROPS: tuple[str, ...] = (
    "store",
    "products",
    "isPreview",
    "isEditor",
    "previewOffset",
)


class FallbackReasonEnum(str, Enum):
    undecodable = "undecodable"
    not_an_object = "not_an_object"
    not_renderable = "not_renderable"


class DropReasonEnum(str, Enum):
    not_an_object = "not_an_object"
    missing_type = "missing_type"
    disallowed_type = "disallowed_type"


@dataclass(frozen=True)
class ResolvedBlock:
    block_type: str
    props: dict[str, Any]
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "type": self.block_type, "props": self.props}


@dataclass(frozen=True)
class DroppedBlock:
    reason: DropReasonEnum
    block_type: Optional[str] = None


BlockResolution = Union[ResolvedBlock, DroppedBlock]


@dataclass(frozen=True)
class DroppedBlockRecord:
    zone: Optional[str]
    index: int
    reason: DropReasonEnum
    block_type: Optional[str]


@dataclass(frozen=True)
class NormalizationReport:
    document: dict[str, Any]
    fallback: Optional[FallbackReasonEnum] = None
    dropped: tuple[DroppedBlockRecord, ...] = ()
    reassigned_ids: tuple[ReassignedId, ...] = ()

    @property
    def used_default(self) -> bool:
        return self.fallback is not None


def _as_allowed_set(allowed_types: Optional[Iterable[str]]) -> Optional[frozenset[str]]:
    if allowed_types is None:
        return None
    allowed = frozenset(allowed_types)
    return allowed or None


def resolve_block(
    item: Any,
    allowed_types: Optional[Iterable[str]] = None,
    alias_table: AliasTable = CATALOG_ALIAS_TABLE,
) -> BlockResolution:
    if not isinstance(item, dict):
        return DroppedBlock(reason=DropReasonEnum.not_an_object)
    raw_type = item.get("type")
    if not isinstance(raw_type, str) or not raw_type:
        return DroppedBlock(reason=DropReasonEnum.missing_type)

    block_type = alias_table.resolve_type(raw_type)
    allowed = _as_allowed_set(allowed_types)
    if allowed is not None and block_type not in allowed:
        return DroppedBlock(reason=DropReasonEnum.disallowed_type, block_type=block_type)

    props = item.get("props")
    safe_props = dict(props) if isinstance(props, dict) else {}
    extra = {key: value for key, value in item.items() if key not in ("type", "props")}
    return ResolvedBlock(
        block_type=block_type,
        props=alias_table.migrate_props(block_type, safe_props),
        extra=extra,
    )


def _normalize_blocks(
    items: Any,
    *,
    zone: Optional[str],
    allowed_types: Optional[frozenset[str]],
    alias_table: AliasTable,
    dropped: list[DroppedBlockRecord],
) -> list[dict[str, Any]]:
    if not isinstance(items, list):
        return []
    blocks: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        resolution = resolve_block(item, allowed_types, alias_table)
        if isinstance(resolution, DroppedBlock):
            dropped.append(
                DroppedBlockRecord(
                    zone=zone,
                    index=index,
                    reason=resolution.reason,
                    block_type=resolution.block_type,
                )
            )
            continue
        blocks.append(resolution.to_dict())
    return blocks


def strip_runtime_root_props(root: Any) -> dict[str, Any]:
    safe_root = dict(root) if isinstance(root, dict) else {}
    props = safe_root.get("props")
    safe_props = dict(props) if isinstance(props, dict) else {}
    for key in RUNTIME_ROOT_PROPS:
        safe_props.pop(key, None)
    safe_root["props"] = safe_props
    return safe_root


def is_renderable(document: Mapping[str, Any]) -> bool:
    content = document.get("content")
    if isinstance(content, list) and content:
        return True
    zones = document.get("zones")
    if not isinstance(zones, dict):
        return False
    return any(isinstance(blocks, list) and blocks for blocks in zones.values())


def decode_layout(raw: Any) -> tuple[Any, bool]:
    """Decode textual encodings; returns ``(value, ok)``."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return None, False
    if isinstance(raw, str):
        try:
            return json.loads(raw), True
        except (ValueError, RecursionError):
            return None, False
    return raw, True


def inspect_layout(
    raw: Any,
    default_document: Mapping[str, Any],
    allowed_types: Optional[Iterable[str]] = None,
    *,
    alias_table: AliasTable = CATALOG_ALIAS_TABLE,
    id_prefix: str = DEFAULT_ID_PREFIX,
) -> NormalizationReport:
    """Normalize ``raw`` and report what was dropped, reassigned or replaced."""
    if not isinstance(default_document, Mapping):
        raise ValueError("inspect_layout requires a default document")

    def _fallback(reason: FallbackReasonEnum, **kwargs: Any) -> NormalizationReport:
        return NormalizationReport(document=deepcopy(dict(default_document)), fallback=reason, **kwargs)

    parsed, decoded = decode_layout(raw)
    if not decoded:
        return _fallback(FallbackReasonEnum.undecodable)
    if not isinstance(parsed, dict):
        return _fallback(FallbackReasonEnum.not_an_object)

    allowed = _as_allowed_set(allowed_types)
    dropped: list[DroppedBlockRecord] = []
    content = _normalize_blocks(
        parsed.get("content"),
        zone=None,
        allowed_types=allowed,
        alias_table=alias_table,
        dropped=dropped,
    )
    raw_zones = parsed.get("zones")
    zones: dict[str, list[dict[str, Any]]] = {}
    if isinstance(raw_zones, dict):
        for zone_name, items in raw_zones.items():
            zones[zone_name] = _normalize_blocks(
                items,
                zone=zone_name,
                allowed_types=allowed,
                alias_table=alias_table,
                dropped=dropped,
            )

    allocation = allocate_block_ids(content, zones, prefix=id_prefix)
    document = {
        **parsed,
        "content": allocation.content,
        "zones": allocation.zones,
        "root": strip_runtime_root_props(parsed.get("root")),
    }

    if not is_renderable(document):
        return _fallback(FallbackReasonEnum.not_renderable, dropped=tuple(dropped))

    return NormalizationReport(
        document=document,
        dropped=tuple(dropped),
        reassigned_ids=allocation.reassigned,
    )


def normalize_layout(
    raw: Any,
    default_document: Mapping[str, Any],
    allowed_types: Optional[Iterable[str]] = None,
    *,
    alias_table: AliasTable = CATALOG_ALIAS_TABLE,
    id_prefix: str = DEFAULT_ID_PREFIX,
) -> dict[str, Any]:
    return inspect_layout(
        raw,
        default_document,
        allowed_types,
        alias_table=alias_table,
        id_prefix=id_prefix,
    ).document
