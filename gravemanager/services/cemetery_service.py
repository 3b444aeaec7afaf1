"""
Placing bodies into graves.

A body lies in at most one grave and a grave never holds more bodies than its
capacity. Both rules hold under concurrent callers: putting a body into a
grave locks the grave row, re-counts its bodies and writes the body's
``grave_id`` in one transaction.
"""
import logging
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session, sessionmaker

from gravemanager.database import transaction, check_rowcount
from gravemanager.exceptions import IllegalEntityError
from gravemanager.models.body import Body
from gravemanager.models.grave import Grave
from gravemanager.services.grave_service import lock_grave, count_bodies
from gravemanager.validation import require_entity, require_id

logger = logging.getLogger(__name__)


def _check_pair(body: Body, grave: Grave) -> None:
    require_entity(body, "body")
    require_entity(grave, "grave")
    require_id(body, "body")
    require_id(grave, "grave")


class CemeteryService:
    def __init__(self, sessions: sessionmaker[Session]):
        self._sessions = sessions

    def find_grave_with_body(self, body: Body) -> Grave | None:
        require_entity(body, "body")
        require_id(body, "body")
        with transaction(self._sessions, f"finding grave with {body!r}") as db:
            return db.scalars(
                select(Grave)
                .join(Body, Body.grave_id == Grave.id)
                .where(Body.id == body.id)
            ).one_or_none()

    def find_bodies_in_grave(self, grave: Grave) -> list[Body]:
        require_entity(grave, "grave")
        require_id(grave, "grave")
        with transaction(self._sessions, f"finding bodies in {grave!r}") as db:
            return list(db.scalars(
                select(Body).where(Body.grave_id == grave.id).order_by(Body.id)
            ).all())

    def find_unburied_bodies(self) -> list[Body]:
        with transaction(self._sessions, "finding unburied bodies") as db:
            return list(db.scalars(
                select(Body).where(Body.grave_id.is_(None)).order_by(Body.id)
            ).all())

    def find_empty_graves(self) -> list[Grave]:
        with transaction(self._sessions, "finding empty graves") as db:
            return list(db.scalars(
                select(Grave)
                .outerjoin(Body, Body.grave_id == Grave.id)
                .group_by(Grave.id)
                .having(func.count(Body.id) == 0)
                .order_by(Grave.id)
            ).all())

    def find_graves_with_some_free_space(self) -> list[Grave]:
        with transaction(self._sessions, "finding graves with some free space") as db:
            return list(db.scalars(
                select(Grave)
                .outerjoin(Body, Body.grave_id == Grave.id)
                .group_by(Grave.id)
                .having(func.count(Body.id) < Grave.capacity)
                .order_by(Grave.id)
            ).all())

    def put_body_into_grave(self, body: Body, grave: Grave) -> None:
        """
        Bury ``body`` in ``grave``.

        Raises IllegalEntityError when the grave does not exist or is full, or
        when the body does not exist or already lies in some grave. A failure
        leaves the database untouched.
        """
        _check_pair(body, grave)
        with transaction(self._sessions, "putting body into grave") as db:
            locked = lock_grave(db, grave.id)
            if locked is None:
                raise IllegalEntityError(f"{grave!r} does not exist in the database")
            if count_bodies(db, grave.id) >= locked.capacity:
                raise IllegalEntityError(f"{grave!r} is already full")

            result = db.execute(
                update(Body)
                .where(Body.id == body.id, Body.grave_id.is_(None))
                .values({Body.grave_id: grave.id})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise IllegalEntityError(f"{body!r} not found or it is already placed in some grave")
            check_rowcount(result.rowcount, "updated", "body")
        body.grave_id = grave.id
        logger.info("Put %r into %r", body, grave)

    def remove_body_from_grave(self, body: Body, grave: Grave) -> None:
        """Take ``body`` out of ``grave``; it must currently lie there."""
        _check_pair(body, grave)
        with transaction(self._sessions, "removing body from grave") as db:
            result = db.execute(
                update(Body)
                .where(Body.id == body.id, Body.grave_id == grave.id)
                .values({Body.grave_id: None})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise IllegalEntityError(f"{body!r} not found or it is not placed in {grave!r}")
            check_rowcount(result.rowcount, "updated", "body")
        body.grave_id = None
        logger.info("Removed %r from %r", body, grave)
