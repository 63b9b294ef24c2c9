from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from storefront_layout.config import settings
from storefront_layout.db.enums import RendererEnum
from storefront_layout.db.models import Product, Store
from storefront_layout.db.repositories.stores import ProductsRepository, StoresRepository
from storefront_layout.layout.families import LayoutFamily, resolve_layout_family
from storefront_layout.layout.normalizer import NormalizationReport
from storefront_layout.layout.runtime import RuntimeContext
from storefront_layout.services.render_variants import parse_renderer_choice, resolve_theme, select_renderer
from storefront_layout.services.store_settings import resolve_catalog_settings, resolve_store_settings

logger = logging.getLogger(__name__)


class StoreNotFoundError(LookupError):
    pass


class CatalogUnavailableError(Exception):
    pass


@dataclass(frozen=True)
class StoreLayout:
    store_id: str
    family_id: str
    document: dict[str, Any]
    is_default: bool


@dataclass(frozen=True)
class LayoutPreview:
    store_id: str
    family_id: str
    document: dict[str, Any]


@dataclass(frozen=True)
class PublicCatalogPage:
    store_id: str
    slug: str
    renderer: RendererEnum
    template_id: str
    layout_data: Optional[dict[str, Any]]
    theme: Optional[dict[str, Any]]
    catalog_settings: dict[str, Any]


def serialize_store(store: Store) -> dict[str, Any]:
    return {
        "id": store.id,
        "slug": store.slug,
        "name": store.name,
        "description": store.description,
        "logoFileId": store.logo_file_id,
        "templateId": store.template_id,
        "activeRenderer": store.active_renderer,
        "settings": resolve_store_settings(store.settings),
        "categoriesJson": store.categories_json,
        "purchaseInstructions": store.purchase_instructions,
        "paymentLink": store.payment_link,
        "published": store.published,
    }


def serialize_product(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "currency": product.currency,
        "categoryIds": list(product.category_ids or []),
        "imageFileIds": list(product.image_file_ids or []),
    }


def family_for_store(store: Store) -> LayoutFamily:
    return resolve_layout_family(store.layout_family, settings.DEFAULT_LAYOUT_FAMILY)


def _get_store_or_raise(session: Session, store_id: str) -> Store:
    store = StoresRepository(session).get(store_id=store_id)
    if not store:
        raise StoreNotFoundError(f"Store {store_id} not found")
    return store


def _log_report(report: NormalizationReport, *, store_id: str, family_id: str, source: str) -> None:
    extra = {"store_id": store_id, "family_id": family_id, "source": source}
    if report.fallback is not None:
        logger.warning(
            "store_layout.replaced_with_default",
            extra={**extra, "reason": report.fallback.value},
        )
    if report.dropped:
        logger.info(
            "store_layout.blocks_dropped",
            extra={
                **extra,
                "dropped": [
                    {"zone": record.zone, "index": record.index, "reason": record.reason.value, "type": record.block_type}
                    for record in report.dropped
                ],
            },
        )
    if report.reassigned_ids:
        logger.debug(
            "store_layout.ids_reassigned",
            extra={**extra, "count": len(report.reassigned_ids)},
        )


def load_store_layout(*, session: Session, store_id: str) -> StoreLayout:
    store = _get_store_or_raise(session, store_id)
    family = family_for_store(store)
    if store.layout_data is None:
        logger.info("store_layout.materialized_default", extra={"store_id": store.id, "family_id": family.family_id})
        return StoreLayout(store_id=store.id, family_id=family.family_id, document=family.default_document, is_default=True)

    report = family.inspect(store.layout_data)
    _log_report(report, store_id=store.id, family_id=family.family_id, source="stored")
    return StoreLayout(
        store_id=store.id,
        family_id=family.family_id,
        document=report.document,
        is_default=report.used_default,
    )


def save_store_layout(*, session: Session, store_id: str, layout_data: Any) -> StoreLayout:
    store = _get_store_or_raise(session, store_id)
    family = family_for_store(store)
    report = family.inspect(layout_data)
    _log_report(report, store_id=store.id, family_id=family.family_id, source="save")
    StoresRepository(session).save_layout_data(store=store, document=report.document)
    logger.info(
        "store_layout.saved",
        extra={
            "store_id": store.id,
            "family_id": family.family_id,
            "content_blocks": len(report.document.get("content", [])),
            "zones": len(report.document.get("zones", {})),
        },
    )
    return StoreLayout(
        store_id=store.id,
        family_id=family.family_id,
        document=report.document,
        is_default=report.used_default,
    )


def build_runtime_context(
    *,
    session: Session,
    store: Store,
    is_preview: bool,
    is_editor: bool,
    preview_offset: Any = 0,
) -> RuntimeContext:
    products = ProductsRepository(session).list_for_store(store_id=store.id)
    return RuntimeContext(
        store=serialize_store(store),
        products=[serialize_product(product) for product in products],
        is_preview=is_preview,
        is_editor=is_editor,
        preview_offset=preview_offset,
    )


def build_editor_preview(
    *,
    session: Session,
    store_id: str,
    layout_data: Any = None,
    preview_offset: Any = 0,
) -> LayoutPreview:
    store = _get_store_or_raise(session, store_id)
    family = family_for_store(store)
    source = layout_data if layout_data is not None else store.layout_data
    context = build_runtime_context(
        session=session,
        store=store,
        is_preview=True,
        is_editor=True,
        preview_offset=preview_offset,
    )
    return LayoutPreview(
        store_id=store.id,
        family_id=family.family_id,
        document=family.inject_context(source, context),
    )


def build_public_catalog_page(
    *,
    session: Session,
    slug: str,
    feature_enabled: bool,
    renderer_override: Optional[str] = None,
    preview_offset: Any = 0,
) -> PublicCatalogPage:
    store = StoresRepository(session).get_by_slug(slug=slug)
    if not store:
        raise StoreNotFoundError(f"Store {slug} not found")
    if not store.published:
        raise CatalogUnavailableError(f"Store {slug} is not published")

    store_config = serialize_store(store)
    renderer = select_renderer(store_config, feature_enabled, renderer_override)
    layout_data: Optional[dict[str, Any]] = None
    theme: Optional[dict[str, Any]] = None
    if renderer == RendererEnum.blockTree:
        family = family_for_store(store)
        report = family.inspect(store.layout_data)
        if store.layout_data is not None:
            _log_report(report, store_id=store.id, family_id=family.family_id, source="public")
        context = build_runtime_context(
            session=session,
            store=store,
            is_preview=parse_renderer_choice(renderer_override) is not None,
            is_editor=False,
            preview_offset=preview_offset,
        )
        layout_data = family.inject_context(report.document, context)
    else:
        theme = resolve_theme(store_config, settings.DEFAULT_TEMPLATE_ID).to_dict()

    return PublicCatalogPage(
        store_id=store.id,
        slug=store.slug,
        renderer=renderer,
        template_id=store.template_id,
        layout_data=layout_data,
        theme=theme,
        catalog_settings=resolve_catalog_settings(store.settings),
    )
