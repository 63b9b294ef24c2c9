import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from storefront_layout.config import settings
from storefront_layout.db.base import init_db
from storefront_layout.layout.families import list_layout_families
from storefront_layout.routers import catalog_templates, layout_families, layouts, public_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _app_lifespan(_app: FastAPI) -> AsyncIterator[None]:
    init_db()
    # Loads and validates every layout family definition.
    families = list_layout_families()
    logger.info("storefront_layout.started", extra={"families": [family.family_id for family in families]})
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Layout API",
        default_response_class=ORJSONResponse,
        lifespan=_app_lifespan,
    )

    allow_origins = sorted(set(settings.BACKEND_CORS_ORIGINS))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return ORJSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(layouts.router)
    app.include_router(layout_families.router)
    app.include_router(catalog_templates.router)
    app.include_router(public_catalog.router)

    return app


app = create_app()
