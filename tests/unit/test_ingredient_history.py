"""
Suppression d'ingredient et journal de stock, cles etrangeres actives.

La base de test par defaut (conftest) laisse SQLite ignorer les FK;
ici chaque connexion active PRAGMA foreign_keys pour verifier aussi
la contrainte RESTRICT du schema.
"""
import pytest
from decimal import Decimal

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restopos.core.dependencies import build_ingredient_service, build_ledger_service
from restopos.core.exceptions import IngredientHasHistory, IngredientNotFound
from restopos.models import Base
from restopos.models.ingredient import Ingredient
from restopos.models.stock import StockPurchase, StockSale


@pytest.fixture
def fk_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = factory()
    yield session
    session.rollback()
    session.close()
    engine.dispose()


def _counts(session, ingredient_id):
    purchases = session.execute(
        select(func.count()).select_from(StockPurchase).where(StockPurchase.ingredient_id == ingredient_id)
    ).scalar()
    sales = session.execute(
        select(func.count()).select_from(StockSale).where(StockSale.ingredient_id == ingredient_id)
    ).scalar()
    return purchases, sales


@pytest.fixture
def traded_ingredient(fk_session):
    """Riz achete puis vendu en direct, le tout commite."""
    ingredients = build_ingredient_service(fk_session)
    ledger = build_ledger_service(fk_session)
    rice = ingredients.create_ingredient("Riz")
    ledger.add_purchase(rice.id, Decimal("10"), Decimal("200"))
    ledger.sell(rice.id, Decimal("2"), Decimal("300"))
    fk_session.commit()
    return rice


class TestDeleteIngredientWithHistory:

    @pytest.mark.unit
    def test_delete_refused_and_history_kept(self, fk_session, traded_ingredient):
        service = build_ingredient_service(fk_session)
        assert _counts(fk_session, traded_ingredient.id) == (1, 1)

        with pytest.raises(IngredientHasHistory) as exc_info:
            service.delete_ingredient(traded_ingredient.id)
        fk_session.commit()

        # achat + transfert de reception + vente
        assert exc_info.value.records == 3
        assert exc_info.value.details["ingredient_id"] == traded_ingredient.id
        assert _counts(fk_session, traded_ingredient.id) == (1, 1)
        assert service.get_ingredient(traded_ingredient.id).name == "Riz"

    @pytest.mark.unit
    def test_foreign_key_restricts_raw_delete(self, fk_session, traded_ingredient):
        ingredient_id = traded_ingredient.id
        fk_session.expunge_all()

        fk_session.delete(fk_session.get(Ingredient, ingredient_id))
        with pytest.raises(IntegrityError):
            fk_session.flush()
        fk_session.rollback()

        assert _counts(fk_session, ingredient_id) == (1, 1)

    @pytest.mark.unit
    def test_ingredient_without_history_still_deleted(self, fk_session):
        service = build_ingredient_service(fk_session)
        mint = service.create_ingredient("Menthe")
        fk_session.commit()

        service.delete_ingredient(mint.id)
        fk_session.commit()

        with pytest.raises(IngredientNotFound):
            service.get_ingredient(mint.id)
