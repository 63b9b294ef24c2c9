import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault(
    "STOREFRONT_DB_URL",
    f"sqlite:///{Path(tempfile.gettempdir()) / 'test_storefront_layout.db'}",
)
os.environ.setdefault("BLOCK_TREE_RENDERER_ENABLED", "false")
os.environ.setdefault("DEFAULT_LAYOUT_FAMILY", "catalog")
os.environ.setdefault("DEFAULT_TEMPLATE_ID", "minimal")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from storefront_layout.db.base import SessionLocal, init_db  # noqa: E402
from storefront_layout.db.models import Product, Store  # noqa: E402
from storefront_layout.layout.families import get_layout_family  # noqa: E402


@pytest.fixture()
def catalog_family():
    return get_layout_family("catalog")


@pytest.fixture()
def db_session():
    init_db()
    session = SessionLocal()
    session.execute(delete(Product))
    session.execute(delete(Store))
    session.commit()
    try:
        yield session
    finally:
        session.rollback()
        session.execute(delete(Product))
        session.execute(delete(Store))
        session.commit()
        session.close()


@pytest.fixture()
def api_client():
    from storefront_layout.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
