"""
Configuration globale pytest pour restopos
Fixtures partagees entre tous les tests

Environnement de test (ENV=test):
- Base SQLite en memoire, schema cree a chaque test
- Les services recoivent la meme session que le TestClient
- SQLite ignore FOR UPDATE et les cles etrangeres: les regles
  d'integrite testees ici sont celles des services
"""
import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator

import pytest

# Configuration environnement de test (avant tout import restopos)
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restopos.core.database import get_db
from restopos.core.dependencies import (
    build_expense_service,
    build_ingredient_service,
    build_ledger_service,
    build_menu_service,
    build_order_engine,
    build_report_service,
    build_table_registry,
)
from restopos.main import app
from restopos.models import Base
from restopos.models.ingredient import IngredientUnit


# ============================================
# Base de donnees de test
# ============================================

@pytest.fixture(scope="function")
def db_engine():
    """Engine SQLite en memoire partage par toutes les connexions du test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.rollback()
    session.close()


# ============================================
# Services construits sur la session de test
# ============================================

@pytest.fixture
def ledger(db_session):
    return build_ledger_service(db_session)


@pytest.fixture
def ingredient_service(db_session):
    return build_ingredient_service(db_session)


@pytest.fixture
def menu_service(db_session):
    return build_menu_service(db_session)


@pytest.fixture
def registry(db_session):
    return build_table_registry(db_session)


@pytest.fixture
def expense_service(db_session, fixed_now):
    service = build_expense_service(db_session)
    service.clock = lambda: fixed_now
    return service


@pytest.fixture
def fixed_now() -> datetime:
    """Mardi 15 janvier 2024, 12h00 a Karachi (07h00 UTC)."""
    return datetime(2024, 1, 15, 7, 0, tzinfo=timezone.utc)


@pytest.fixture
def order_engine(db_session, fixed_now):
    engine = build_order_engine(db_session)
    engine.clock = lambda: fixed_now
    return engine


@pytest.fixture
def report_service(db_session, fixed_now):
    service = build_report_service(db_session)
    service.clock = lambda: fixed_now
    return service


# ============================================
# Client API Test
# ============================================

@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    TestClient FastAPI avec override de get_db.
    Meme contrat que get_db: commit si succes, rollback sinon.
    """
    def override_get_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================
# Jeu de donnees: burger
# ============================================

@pytest.fixture
def stocked_kitchen(db_session, ledger):
    """
    Boeuf (kg) et pain (pcs) achetes puis transferes en cuisine.

    Boeuf: 5 kg @ 1000, 2 kg en cuisine
    Pain: 50 pcs @ 20, 20 en cuisine
    """
    from tests.factories import IngredientFactory

    beef = IngredientFactory.create(db_session=db_session, name="Boeuf", unit=IngredientUnit.KILOGRAM)
    bun = IngredientFactory.create(db_session=db_session, name="Pain", unit=IngredientUnit.PIECES)
    ledger.add_purchase(beef.id, Decimal("5"), Decimal("1000"))
    ledger.add_purchase(bun.id, Decimal("50"), Decimal("20"))
    ledger.transfer_to_kitchen(beef.id, Decimal("2"))
    ledger.transfer_to_kitchen(bun.id, Decimal("20"))
    return {"beef": beef, "bun": bun}


@pytest.fixture
def burger(db_session, menu_service, stocked_kitchen):
    """Burger a 800: 0.2 kg de boeuf + 1 pain."""
    return menu_service.create_menu_item(
        name="Burger",
        price=Decimal("800"),
        recipe=[
            {"ingredient_id": stocked_kitchen["beef"].id, "quantity": Decimal("0.2")},
            {"ingredient_id": stocked_kitchen["bun"].id, "quantity": Decimal("1")},
        ],
    )


@pytest.fixture
def api_burger(client):
    """Cree via l'API: boeuf (5 kg, 2 en cuisine, seuil 3) et burger a 800 utilisant 0.2 kg."""
    API = "/api/v1"
    beef = client.post(f"{API}/ingredients", json={
        "name": "Boeuf", "unit": "kg", "low_stock_threshold": "3",
    }).json()
    client.post(f"{API}/stock/purchases", json={
        "ingredient_id": beef["id"], "quantity": "5", "unit_cost": "1000",
    })
    client.post(f"{API}/stock/transfers", json={
        "ingredient_id": beef["id"], "quantity": "2",
        "from_location": "store", "to_location": "kitchen",
    })
    burger = client.post(f"{API}/menu/items", json={
        "name": "Burger", "price": "800",
        "recipe": [{"ingredient_id": beef["id"], "quantity": "0.2"}],
    }).json()
    return {"beef": beef, "burger": burger}
