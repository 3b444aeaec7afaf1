"""Checks run on entities before they are written."""
from datetime import date
from pydantic import BaseModel, ValidationError as PydanticValidationError

from gravemanager.exceptions import IllegalEntityError, InvalidArgumentError, ValidationError
from gravemanager.models.body import Body
from gravemanager.models.grave import Grave
from gravemanager.schemas.body import BodyBase
from gravemanager.schemas.grave import GraveBase


def require_entity(entity, name: str) -> None:
    if entity is None:
        raise InvalidArgumentError(f"{name} is null")


def require_id(entity, name: str) -> None:
    if entity.id is None:
        raise IllegalEntityError(f"{name} id is null")


def validate_body(body: Body, today: date | None = None) -> None:
    """
    Check name, date order and, when ``today`` is given, that neither date lies
    after it. Raises ValidationError with the first broken rule.
    """
    require_entity(body, "body")
    _validate(BodyBase, body, {"today": today})


def validate_grave(grave: Grave) -> None:
    require_entity(grave, "grave")
    _validate(GraveBase, grave, None)


def _validate(schema: type[BaseModel], entity, context: dict | None) -> None:
    try:
        schema.model_validate(entity, context=context)
    except PydanticValidationError as ex:
        raise ValidationError(_reason(ex)) from ex


def _reason(ex: PydanticValidationError) -> str:
    error = ex.errors()[0]
    msg = error["msg"].removeprefix("Value error, ")
    loc = ".".join(str(part) for part in error["loc"])
    return f"{loc}: {msg}" if loc else msg
