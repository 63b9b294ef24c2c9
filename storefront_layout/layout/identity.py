from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterator

DEFAULT_ID_PREFIX = "puck"

_UNSAFE_TYPE_CHARS = re.compile(r"[^a-z0-9-]")


def slugify_block_type(block_type: Any) -> str:
    # One dash per unsafe character; runs are not collapsed.
    return _UNSAFE_TYPE_CHARS.sub("-", str(block_type).lower())


def _number_text(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def coerce_block_id(value: Any) -> str:
    """Text form of a stored id; ``""`` means the block needs a new one.

    Falsy values (None, False, 0, NaN, "") and non-scalar values count as absent.
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else ""
    if isinstance(value, (int, float)):
        if not value or (isinstance(value, float) and math.isnan(value)):
            return ""
        try:
            return _number_text(value)
        except ValueError:
            # int too large for str() under the interpreter's digit limit
            return ""
    return ""


def next_free_id(
    used: set[str] | frozenset[str],
    block_type: Any,
    counter: int,
    *,
    prefix: str = DEFAULT_ID_PREFIX,
) -> tuple[str, int]:
    """Return the first ``<prefix>-<type>-<n>`` not in ``used`` for n >= counter, and the next counter."""
    safe_type = slugify_block_type(block_type or "block")
    candidate = f"{prefix}-{safe_type}-{counter}"
    while candidate in used:
        counter += 1
        candidate = f"{prefix}-{safe_type}-{counter}"
    return candidate, counter + 1


@dataclass(frozen=True)
class ReassignedId:
    zone: str | None
    index: int
    block_type: str
    previous: str
    assigned: str


@dataclass(frozen=True)
class IdAllocation:
    content: list[dict[str, Any]]
    zones: dict[str, list[dict[str, Any]]]
    reassigned: tuple[ReassignedId, ...]


def _iter_blocks(
    content: list[dict[str, Any]], zones: dict[str, list[dict[str, Any]]]
) -> Iterator[tuple[str | None, int, dict[str, Any]]]:
    for index, block in enumerate(content):
        yield None, index, block
    for zone_name, blocks in zones.items():
        for index, block in enumerate(blocks):
            yield zone_name, index, block


def allocate_block_ids(
    content: list[dict[str, Any]],
    zones: dict[str, list[dict[str, Any]]],
    *,
    prefix: str = DEFAULT_ID_PREFIX,
) -> IdAllocation:
    located = list(_iter_blocks(content, zones))

    # Pass one: the first occurrence of every valid id keeps it.
    claimed: set[str] = set()
    kept: list[str | None] = []
    for _zone, _index, block in located:
        props = block.get("props") if isinstance(block.get("props"), dict) else {}
        raw_id = coerce_block_id(props.get("id"))
        if raw_id and raw_id not in claimed:
            claimed.add(raw_id)
            kept.append(raw_id)
        else:
            kept.append(None)

    # Pass two: everything else gets a fresh id outside the claimed set.
    used = set(claimed)
    counter = 1
    reassigned: list[ReassignedId] = []
    new_content: list[dict[str, Any]] = []
    new_zones: dict[str, list[dict[str, Any]]] = {zone_name: [] for zone_name in zones}

    for (zone_name, index, block), kept_id in zip(located, kept):
        props = dict(block["props"]) if isinstance(block.get("props"), dict) else {}
        if kept_id is not None:
            block_id = kept_id
        else:
            block_id, counter = next_free_id(used, block.get("type"), counter, prefix=prefix)
            used.add(block_id)
            reassigned.append(
                ReassignedId(
                    zone=zone_name,
                    index=index,
                    block_type=str(block.get("type")),
                    previous=coerce_block_id(props.get("id")),
                    assigned=block_id,
                )
            )
        props["id"] = block_id
        updated = {**block, "props": props}
        if zone_name is None:
            new_content.append(updated)
        else:
            new_zones[zone_name].append(updated)

    return IdAllocation(content=new_content, zones=new_zones, reassigned=tuple(reassigned))


def assign_block_ids(
    content: list[dict[str, Any]],
    zones: dict[str, list[dict[str, Any]]],
    *,
    prefix: str = DEFAULT_ID_PREFIX,
) -> tuple[list[dict[str, Any]], dict[str, list[dict[str, Any]]]]:
    allocation = allocate_block_ids(content, zones, prefix=prefix)
    return allocation.content, allocation.zones
