from awardpool import db  # noqa: F401 - imported for model imports

from .admin import Admin
from .category import Category
from .lobby import Lobby
from .nominee import Nominee
from .participant import Participant
from .prediction import Prediction
from .system_config import SystemConfig

__all__ = [
    "Admin",
    "Category",
    "Nominee",
    "Lobby",
    "Participant",
    "Prediction",
    "SystemConfig",
]
