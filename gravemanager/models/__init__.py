from gravemanager.models.grave import Grave
from gravemanager.models.body import Body, Gender

__all__ = ["Grave", "Body", "Gender"]
