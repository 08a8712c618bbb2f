"""
Tests de la notification de changement apres commit.
"""
import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy import text

from restopos.services.events import (
    TOPIC_INGREDIENTS,
    TOPIC_ORDERS,
    ChangeNotifier,
    mark_changed,
    pending_topics,
)


@pytest.fixture
def notifier(session_factory):
    notifier = ChangeNotifier()
    notifier.attach(session_factory)
    yield notifier
    notifier.detach(session_factory)


class TestChangeNotifier:

    @pytest.mark.unit
    def test_commit_publishes_marked_topics(self, notifier, session_factory):
        received = MagicMock()
        notifier.subscribe(received)
        session = session_factory()
        session.execute(text("SELECT 1"))

        mark_changed(session, TOPIC_ORDERS)
        mark_changed(session, TOPIC_INGREDIENTS, TOPIC_ORDERS)
        session.commit()

        received.assert_called_once_with({TOPIC_ORDERS, TOPIC_INGREDIENTS})
        assert pending_topics(session) == set()
        session.close()

    @pytest.mark.unit
    def test_rollback_discards_topics(self, notifier, session_factory):
        received = MagicMock()
        notifier.subscribe(received)
        session = session_factory()
        session.execute(text("SELECT 1"))

        mark_changed(session, TOPIC_ORDERS)
        session.rollback()
        session.commit()

        received.assert_not_called()
        session.close()

    @pytest.mark.unit
    def test_failing_subscriber_does_not_block_others(self, notifier):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        notifier.subscribe(broken)
        notifier.subscribe(healthy)

        notifier.publish({TOPIC_ORDERS})

        healthy.assert_called_once_with({TOPIC_ORDERS})

    @pytest.mark.unit
    def test_unsubscribe(self, notifier):
        received = MagicMock()
        unsubscribe = notifier.subscribe(received)

        unsubscribe()
        unsubscribe()
        notifier.publish({TOPIC_ORDERS})

        received.assert_not_called()

    @pytest.mark.unit
    def test_service_writes_are_published_once_committed(self, notifier, session_factory):
        from restopos.core.dependencies import build_ingredient_service, build_ledger_service

        received = MagicMock()
        notifier.subscribe(received)
        session = session_factory()
        ingredient = build_ingredient_service(session).create_ingredient("Ail")
        build_ledger_service(session).add_purchase(ingredient.id, Decimal("1"), Decimal("300"))

        received.assert_not_called()
        session.commit()

        received.assert_called_once_with({TOPIC_INGREDIENTS})
        session.close()
