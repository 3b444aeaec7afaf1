from gravemanager.schemas.grave import GraveBase, GraveResponse
from gravemanager.schemas.body import BodyBase, BodyResponse

__all__ = [
    "GraveBase", "GraveResponse",
    "BodyBase", "BodyResponse",
]
