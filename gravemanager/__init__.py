"""Grave manager: graves, bodies and the rules for burying one in the other."""
from gravemanager.database import create_db_engine, create_session_factory, init_db
from gravemanager.services import BodyService, CemeteryService, GraveService

__all__ = [
    "create_db_engine", "create_session_factory", "init_db",
    "BodyService", "CemeteryService", "GraveService",
]
