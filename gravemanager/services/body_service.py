import logging
from datetime import date
from typing import Callable
from sqlalchemy import select, update, delete
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Session, sessionmaker

from gravemanager.database import transaction, check_rowcount
from gravemanager.exceptions import IllegalEntityError, InvalidArgumentError, ServiceFailureError
from gravemanager.models.body import Body
from gravemanager.validation import require_entity, require_id, validate_body

logger = logging.getLogger(__name__)


class BodyService:
    """
    CRUD operations for bodies.

    ``clock`` returns the current date; born/died dates after it are rejected.
    The grave a body lies in is never written here, see CemeteryService.
    """

    def __init__(self, sessions: sessionmaker[Session], clock: Callable[[], date] = date.today):
        self._sessions = sessions
        self._clock = clock

    def find_all_bodies(self) -> list[Body]:
        with transaction(self._sessions, "getting all bodies") as db:
            return list(db.scalars(select(Body).order_by(Body.id)).all())

    def create_body(self, body: Body) -> Body:
        validate_body(body, today=self._clock())
        if body.id is not None:
            raise IllegalEntityError("body id is already set")
        if body.grave_id is not None or body.grave is not None:
            raise IllegalEntityError("new body must not be placed in a grave")
        with transaction(self._sessions, "inserting body") as db:
            db.add(body)
            db.flush()
        logger.info("Created %r", body)
        return body

    def get_body(self, body_id: int | None) -> Body | None:
        if body_id is None:
            raise InvalidArgumentError("id is null")
        with transaction(self._sessions, f"getting body with id = {body_id}") as db:
            try:
                return db.scalars(select(Body).where(Body.id == body_id)).one_or_none()
            except MultipleResultsFound as ex:
                raise ServiceFailureError(
                    f"Internal integrity error: more bodies with id = {body_id} found"
                ) from ex

    def update_body(self, body: Body) -> Body:
        validate_body(body, today=self._clock())
        require_id(body, "body")
        with transaction(self._sessions, "updating body") as db:
            result = db.execute(
                update(Body)
                .where(Body.id == body.id)
                .values({
                    Body.name: body.name,
                    Body.gender: body.gender,
                    Body.born: body.born,
                    Body.died: body.died,
                    Body.vampire: bool(body.vampire),
                })
                .execution_options(synchronize_session=False)
            )
            check_rowcount(result.rowcount, "updated", "body")
        logger.info("Updated %r", body)
        return body

    def delete_body(self, body: Body) -> None:
        require_entity(body, "body")
        require_id(body, "body")
        with transaction(self._sessions, "deleting body") as db:
            result = db.execute(
                delete(Body)
                .where(Body.id == body.id)
                .execution_options(synchronize_session=False)
            )
            check_rowcount(result.rowcount, "deleted", "body")
        logger.info("Deleted %r", body)
