"""Shared test fixtures for all tests."""
import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from losstrack import db
from losstrack.api.deps import get_export_storage, get_upload_storage
from losstrack.db import init_db, metadata
from losstrack.entries import EntryService
from losstrack.files import LocalFileStorage
from losstrack.main import app
from losstrack.models import ProductStatus, UnitType
from losstrack.products import ProductService
from losstrack.reasons import ReasonService
from losstrack.schemas import ProductRecord
from losstrack.store import SqlStore


def build_line(code: str, name: str, price: str) -> str:
    """Lay out a 40-character product record."""
    return f"{code:<13.13}{name:<20.20}{price:>7.7}"


@pytest.fixture
def make_line():
    return build_line


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def store(engine):
    return SqlStore(engine)


@pytest.fixture
def product_service(store):
    return ProductService(store, cache_ttl_seconds=300)


@pytest.fixture
def reason_service(store):
    return ReasonService(store)


@pytest.fixture
def entry_service(store, product_service, reason_service):
    return EntryService(store, product_service, reason_service)


@pytest.fixture
def export_storage(tmp_path):
    return LocalFileStorage(tmp_path / "exports")


@pytest.fixture
def sample_reasons(reason_service):
    """The eight default reasons."""
    reason_service.seed_default_reasons()
    return reason_service.get_all_reasons()


@pytest.fixture
def sample_products(store):
    """Two weighed products and one sold by the unit."""
    rows = [
        {"code": "7890000000001", "name": "ARROZ 5KG", "regular_price": Decimal("25.99"),
         "unit_type": UnitType.WEIGHT},
        {"code": "7890000000002", "name": "FEIJAO PRETO", "regular_price": Decimal("8.49"),
         "unit_type": UnitType.UNIT},
        {"code": "7890000000003", "name": "QUEIJO MUSSARELA KG", "regular_price": Decimal("39.90"),
         "unit_type": UnitType.WEIGHT},
    ]
    created = []
    with store.write():
        for row in rows:
            created.append(store.create("products", {
                **row,
                "club_price": Decimal("0"),
                "status": ProductStatus.ACTIVE,
            }))
    return [ProductRecord.model_validate(r) for r in created]


@pytest.fixture
def sample_entries(entry_service, sample_products, sample_reasons):
    """Pending entries: A2, B1, A3 under reason 01 and one entry under reason 02."""
    expired, damaged = sample_reasons[0], sample_reasons[1]
    arroz, feijao, _ = sample_products
    return [
        entry_service.record_entry(arroz.code, expired.id, Decimal("2")),
        entry_service.record_entry(feijao.code, expired.id, Decimal("1")),
        entry_service.record_entry(arroz.code, expired.id, Decimal("3")),
        entry_service.record_entry(feijao.code, damaged.id, Decimal("4")),
    ]


@pytest.fixture(scope="function")
def client(engine, tmp_path, monkeypatch):
    """Test client bound to the in-memory database and temp directories."""
    monkeypatch.setattr(db, "engine", engine)
    app.dependency_overrides[get_upload_storage] = lambda: LocalFileStorage(tmp_path / "uploads")
    app.dependency_overrides[get_export_storage] = lambda: LocalFileStorage(tmp_path / "exports")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
