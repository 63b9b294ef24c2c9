from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront_layout.db.deps import get_session
from storefront_layout.schemas.layouts import (
    LayoutPreviewRequest,
    LayoutPreviewResponse,
    LayoutSaveRequest,
    StoreLayoutResponse,
)
from storefront_layout.services.store_layouts import (
    StoreLayout,
    StoreNotFoundError,
    build_editor_preview,
    load_store_layout,
    save_store_layout,
)

router = APIRouter(prefix="/stores", tags=["layouts"])


def _to_response(layout: StoreLayout) -> StoreLayoutResponse:
    return StoreLayoutResponse(
        storeId=layout.store_id,
        familyId=layout.family_id,
        isDefault=layout.is_default,
        layoutData=layout.document,
    )


@router.get("/{store_id}/layout", response_model=StoreLayoutResponse)
def get_store_layout(store_id: str, session: Session = Depends(get_session)) -> StoreLayoutResponse:
    try:
        layout = load_store_layout(session=session, store_id=store_id)
    except StoreNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found") from exc
    return _to_response(layout)


@router.put("/{store_id}/layout", response_model=StoreLayoutResponse)
def put_store_layout(
    store_id: str,
    payload: LayoutSaveRequest,
    session: Session = Depends(get_session),
) -> StoreLayoutResponse:
    try:
        layout = save_store_layout(session=session, store_id=store_id, layout_data=payload.layoutData)
    except StoreNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found") from exc
    return _to_response(layout)


@router.post("/{store_id}/layout/preview", response_model=LayoutPreviewResponse)
def preview_store_layout(
    store_id: str,
    payload: LayoutPreviewRequest,
    session: Session = Depends(get_session),
) -> LayoutPreviewResponse:
    try:
        preview = build_editor_preview(
            session=session,
            store_id=store_id,
            layout_data=payload.layoutData,
            preview_offset=payload.previewOffset,
        )
    except StoreNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found") from exc
    return LayoutPreviewResponse(
        storeId=preview.store_id,
        familyId=preview.family_id,
        layoutData=preview.document,
    )
