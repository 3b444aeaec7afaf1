"""Testy pro BodyService: CRUD těl."""
import pytest
from datetime import date

from gravemanager.database import Base
from gravemanager.exceptions import (
    IllegalEntityError, InvalidArgumentError, ServiceFailureError, ValidationError,
)
from gravemanager.models.body import Body, Gender
from gravemanager.models.grave import Grave
from gravemanager.schemas.body import BodyResponse
from gravemanager.services import BodyService

TODAY = date(2024, 6, 1)


def _fields(body: Body) -> dict:
    return BodyResponse.model_validate(body).model_dump()


def test_create_body(body_service):
    body = Body(name="Pepa z Depa", gender=Gender.MALE, born=date(1962, 10, 21), died=date(2011, 11, 8))
    body_service.create_body(body)

    assert body.id is not None
    loaded = body_service.get_body(body.id)
    assert loaded is not body
    assert _fields(loaded) == _fields(body)
    assert loaded.vampire is False
    assert loaded.grave_id is None


def test_create_vampire(body_service):
    body = body_service.create_body(Body(name="Nosferatu", vampire=True))
    assert body_service.get_body(body.id).vampire is True


def test_create_body_with_id(body_service):
    with pytest.raises(IllegalEntityError, match="already set"):
        body_service.create_body(Body(id=1, name="x"))


def test_create_body_in_grave(body_service, grave_service):
    grave = grave_service.create_grave(Grave(column=0, row=0, capacity=1))
    with pytest.raises(IllegalEntityError):
        body_service.create_body(Body(name="x", grave_id=grave.id))
    assert body_service.find_all_bodies() == []


def test_create_invalid_body(body_service):
    with pytest.raises(InvalidArgumentError):
        body_service.create_body(None)
    with pytest.raises(ValidationError):
        body_service.create_body(Body(name=None))
    with pytest.raises(ValidationError):
        body_service.create_body(Body(name="x", born=date(1900, 1, 2), died=date(1900, 1, 1)))
    with pytest.raises(ValidationError):
        body_service.create_body(Body(name="x", born=date(2024, 6, 2)))
    with pytest.raises(ValidationError):
        body_service.create_body(Body(name="x", died=date(2024, 6, 2)))
    assert body_service.find_all_bodies() == []


def test_create_body_dated_today(body_service):
    body = body_service.create_body(Body(name="x", born=TODAY, died=TODAY))
    assert body_service.get_body(body.id).died == TODAY


def test_clock_is_consulted_on_each_write(sessions):
    today = [date(2000, 1, 1)]
    service = BodyService(sessions, clock=lambda: today[0])
    body = Body(name="x", born=date(2000, 1, 2))
    with pytest.raises(ValidationError):
        service.create_body(body)
    today[0] = date(2000, 1, 2)
    service.create_body(body)
    assert body.id is not None


def test_get_body(body_service):
    assert body_service.get_body(1) is None
    with pytest.raises(InvalidArgumentError):
        body_service.get_body(None)


def test_find_all_bodies(body_service):
    assert body_service.find_all_bodies() == []
    b1 = body_service.create_body(Body(name="Body 1"))
    b2 = body_service.create_body(Body(name="Body 2", vampire=True))
    assert body_service.find_all_bodies() == [b1, b2]


def test_update_body(body_service):
    body = body_service.create_body(Body(name="Old name"))
    other = body_service.create_body(Body(name="Other"))

    body.name = "New name"
    body.gender = Gender.FEMALE
    body.born = date(1900, 1, 1)
    body.died = date(1950, 1, 1)
    body.vampire = True
    body_service.update_body(body)

    assert _fields(body_service.get_body(body.id)) == _fields(body)
    assert _fields(body_service.get_body(other.id)) == _fields(other)


def test_update_does_not_move_body(body_service, manager, cemetery):
    manager.put_body_into_grave(cemetery.b1, cemetery.g1)

    cemetery.b1.grave_id = cemetery.g2.id
    cemetery.b1.name = "Renamed"
    body_service.update_body(cemetery.b1)

    assert body_service.get_body(cemetery.b1.id).name == "Renamed"
    assert manager.find_grave_with_body(cemetery.b1) == cemetery.g1


def test_update_invalid_body(body_service):
    body = body_service.create_body(Body(name="Valid"))
    body.name = None
    with pytest.raises(ValidationError):
        body_service.update_body(body)
    assert body_service.get_body(body.id).name == "Valid"


def test_update_body_wrong_state(body_service):
    with pytest.raises(InvalidArgumentError):
        body_service.update_body(None)
    with pytest.raises(IllegalEntityError):
        body_service.update_body(Body(name="no id"))
    with pytest.raises(IllegalEntityError, match="updated 0 body records"):
        body_service.update_body(Body(id=999, name="missing"))


def test_delete_body(body_service):
    b1 = body_service.create_body(Body(name="Body 1"))
    b2 = body_service.create_body(Body(name="Body 2"))

    body_service.delete_body(b1)

    assert body_service.get_body(b1.id) is None
    assert body_service.get_body(b2.id) is not None


def test_delete_buried_body(body_service, manager, cemetery):
    manager.put_body_into_grave(cemetery.b1, cemetery.g1)
    body_service.delete_body(cemetery.b1)

    assert manager.find_bodies_in_grave(cemetery.g1) == []
    assert cemetery.g1 in manager.find_empty_graves()


def test_delete_body_wrong_state(body_service):
    with pytest.raises(InvalidArgumentError):
        body_service.delete_body(None)
    with pytest.raises(IllegalEntityError):
        body_service.delete_body(Body(name="no id"))
    with pytest.raises(IllegalEntityError, match="deleted 0 body records"):
        body_service.delete_body(Body(id=999, name="missing"))


def test_create_body_with_string_date(body_service):
    with pytest.raises(ValidationError, match="born"):
        body_service.create_body(Body(name="x", born="2020-01-01"))
    assert body_service.find_all_bodies() == []


def test_storage_failure(body_service, engine):
    body = body_service.create_body(Body(name="x"))
    Base.metadata.drop_all(engine)

    with pytest.raises(ServiceFailureError) as exc:
        body_service.get_body(body.id)
    assert exc.value.__cause__ is not None
    with pytest.raises(ServiceFailureError):
        body_service.create_body(Body(name="y"))
