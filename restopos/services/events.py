"""
Notification de changement apres commit.

Les services marquent les sujets modifies sur la session
(`mark_changed(session, "orders")`); apres un commit reussi, les abonnes
du ChangeNotifier recoivent l'ensemble des sujets. Un rollback efface
les marques sans notifier.
"""
import logging
from typing import Callable, List, Set

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

TOPIC_INGREDIENTS = "ingredients"
TOPIC_MENU = "menu"
TOPIC_ORDERS = "orders"
TOPIC_TABLES = "tables"
TOPIC_EXPENSES = "expenses"

TOPICS = (TOPIC_INGREDIENTS, TOPIC_MENU, TOPIC_ORDERS, TOPIC_TABLES, TOPIC_EXPENSES)

_INFO_KEY = "restopos.changed_topics"

Subscriber = Callable[[Set[str]], None]


def mark_changed(session: Session, *topics: str) -> None:
    """Enregistre les sujets modifies dans la transaction courante."""
    pending = session.info.setdefault(_INFO_KEY, set())
    for topic in topics:
        pending.add(topic)


def pending_topics(session: Session) -> Set[str]:
    """Sujets marques et non encore notifies."""
    return set(session.info.get(_INFO_KEY, ()))


class ChangeNotifier:
    """
    Diffuse "quelque chose a change, relisez" aux abonnes.

    Usage:
        notifier = ChangeNotifier()
        notifier.attach(SessionLocal)
        notifier.subscribe(lambda topics: print(topics))
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Abonne un callback.

        Returns:
            Fonction de desabonnement
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def attach(self, target) -> None:
        """Ecoute les commits/rollbacks d'une sessionmaker ou d'une classe Session."""
        event.listen(target, "after_commit", self._after_commit)
        event.listen(target, "after_soft_rollback", self._after_rollback)

    def detach(self, target) -> None:
        event.remove(target, "after_commit", self._after_commit)
        event.remove(target, "after_soft_rollback", self._after_rollback)

    def publish(self, topics: Set[str]) -> None:
        """Notifie les abonnes. Une erreur d'abonne est loggee et n'interrompt pas les autres."""
        for callback in list(self._subscribers):
            try:
                callback(set(topics))
            except Exception:
                logger.exception("Abonne de notification en echec", extra={"topics": sorted(topics)})

    def _after_commit(self, session: Session) -> None:
        topics = session.info.pop(_INFO_KEY, None)
        if topics:
            logger.debug("Changements commites", extra={"topics": sorted(topics)})
            self.publish(topics)

    def _after_rollback(self, session: Session, previous_transaction) -> None:
        session.info.pop(_INFO_KEY, None)


change_notifier = ChangeNotifier()
