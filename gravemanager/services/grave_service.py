import logging
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Session, sessionmaker

from gravemanager.database import transaction, check_rowcount
from gravemanager.exceptions import IllegalEntityError, InvalidArgumentError, ServiceFailureError
from gravemanager.models.body import Body
from gravemanager.models.grave import Grave
from gravemanager.validation import require_entity, require_id, validate_grave

logger = logging.getLogger(__name__)


def lock_grave(db: Session, grave_id: int) -> Grave | None:
    """Load the grave row and hold its write lock until the transaction ends."""
    return db.scalar(select(Grave).where(Grave.id == grave_id).with_for_update())


def count_bodies(db: Session, grave_id: int) -> int:
    return db.scalar(select(func.count(Body.id)).where(Body.grave_id == grave_id))


class GraveService:
    def __init__(self, sessions: sessionmaker[Session]):
        self._sessions = sessions

    def find_all_graves(self) -> list[Grave]:
        with transaction(self._sessions, "getting all graves") as db:
            return list(db.scalars(select(Grave).order_by(Grave.id)).all())

    def create_grave(self, grave: Grave) -> Grave:
        validate_grave(grave)
        if grave.id is not None:
            raise IllegalEntityError("grave id is already set")
        if grave.bodies:
            raise IllegalEntityError("bodies are placed into a grave only by CemeteryService")
        with transaction(self._sessions, "inserting grave") as db:
            db.add(grave)
            db.flush()
        logger.info("Created %r", grave)
        return grave

    def get_grave(self, grave_id: int | None) -> Grave | None:
        if grave_id is None:
            raise InvalidArgumentError("id is null")
        with transaction(self._sessions, f"getting grave with id = {grave_id}") as db:
            try:
                return db.scalars(select(Grave).where(Grave.id == grave_id)).one_or_none()
            except MultipleResultsFound as ex:
                raise ServiceFailureError(
                    f"Internal integrity error: more graves with id = {grave_id} found"
                ) from ex

    def update_grave(self, grave: Grave) -> Grave:
        """
        Write column, row, capacity and note of the grave.

        The capacity may not drop below the number of bodies the grave holds.
        """
        validate_grave(grave)
        require_id(grave, "grave")
        with transaction(self._sessions, "updating grave") as db:
            if lock_grave(db, grave.id) is not None:
                buried = count_bodies(db, grave.id)
                if grave.capacity < buried:
                    raise IllegalEntityError(
                        f"{grave!r} holds {buried} bodies, capacity {grave.capacity} is too small"
                    )
            result = db.execute(
                update(Grave)
                .where(Grave.id == grave.id)
                .values({
                    Grave.column: grave.column,
                    Grave.row: grave.row,
                    Grave.capacity: grave.capacity,
                    Grave.note: grave.note,
                })
                .execution_options(synchronize_session=False)
            )
            check_rowcount(result.rowcount, "updated", "grave")
        logger.info("Updated %r", grave)
        return grave

    def delete_grave(self, grave: Grave) -> None:
        require_entity(grave, "grave")
        require_id(grave, "grave")
        with transaction(self._sessions, "deleting grave") as db:
            if lock_grave(db, grave.id) is not None and count_bodies(db, grave.id):
                raise IllegalEntityError(f"{grave!r} is not empty")
            result = db.execute(
                delete(Grave)
                .where(Grave.id == grave.id)
                .execution_options(synchronize_session=False)
            )
            check_rowcount(result.rowcount, "deleted", "grave")
        logger.info("Deleted %r", grave)
