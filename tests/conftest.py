import pytest
from datetime import date

from gravemanager.database import Base, create_db_engine, create_session_factory, init_db
from gravemanager.models.body import Body
from gravemanager.models.grave import Grave
from gravemanager.services import BodyService, CemeteryService, GraveService

TEST_DB_URL = "sqlite:///:memory:"
TODAY = date(2024, 6, 1)


@pytest.fixture(scope="function")
def engine():
    engine = create_db_engine(TEST_DB_URL)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def sessions(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(sessions):
    session = sessions()
    yield session
    session.close()


@pytest.fixture
def grave_service(sessions):
    return GraveService(sessions)


@pytest.fixture
def body_service(sessions):
    return BodyService(sessions, clock=lambda: TODAY)


@pytest.fixture
def manager(sessions):
    return CemeteryService(sessions)


class Cemetery:
    """Three graves (capacity 1, 2, 3) and five unburied bodies."""

    def __init__(self, grave_service: GraveService, body_service: BodyService):
        self.g1 = grave_service.create_grave(Grave(column=1, row=2, capacity=1, note="Grave 1"))
        self.g2 = grave_service.create_grave(Grave(column=8, row=9, capacity=2, note="Grave 2"))
        self.g3 = grave_service.create_grave(Grave(column=2, row=2, capacity=3, note="Grave 3"))
        self.b1, self.b2, self.b3, self.b4, self.b5 = (
            body_service.create_body(Body(name=f"Body {i}")) for i in range(1, 6)
        )
        self.grave_with_null_id = Grave(column=0, row=0, capacity=1)
        self.grave_not_in_db = Grave(id=self.g3.id + 100, column=0, row=0, capacity=1)
        self.body_with_null_id = Body(name="Body with null id")
        self.body_not_in_db = Body(id=self.b5.id + 100, name="Body not in DB")


@pytest.fixture
def cemetery(grave_service, body_service):
    return Cemetery(grave_service, body_service)
