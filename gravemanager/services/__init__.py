from gravemanager.services.grave_service import GraveService
from gravemanager.services.body_service import BodyService
from gravemanager.services.cemetery_service import CemeteryService

__all__ = ["GraveService", "BodyService", "CemeteryService"]
