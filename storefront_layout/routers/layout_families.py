from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from storefront_layout.layout.families import LayoutFamily, get_layout_family, list_layout_families
from storefront_layout.schemas.layouts import BlockTypeSummary, LayoutFamilyDetail, LayoutFamilySummary

router = APIRouter(prefix="/layout-families", tags=["layout-families"])


def _to_detail(family: LayoutFamily) -> LayoutFamilyDetail:
    return LayoutFamilyDetail(
        id=family.family_id,
        name=family.name,
        description=family.description,
        blockTypes=[
            BlockTypeSummary(
                type=block_type.type_id,
                label=block_type.label,
                category=block_type.category,
                defaultProps=family.default_props(block_type.type_id),
            )
            for block_type in family.block_types.values()
        ],
        categories={key: dict(value) for key, value in family.categories.items()},
        rootDefaultProps=dict(family.root_default_props),
        defaultData=family.default_document,
    )


@router.get("", response_model=list[LayoutFamilySummary])
def list_families() -> list[LayoutFamilySummary]:
    return [
        LayoutFamilySummary(id=family.family_id, name=family.name, description=family.description)
        for family in list_layout_families()
    ]


@router.get("/{family_id}", response_model=LayoutFamilyDetail)
def get_family(family_id: str) -> LayoutFamilyDetail:
    family = get_layout_family(family_id)
    if not family:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout family not found")
    return _to_detail(family)
