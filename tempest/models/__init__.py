from tempest.models.base import Base
from tempest.models.observation import Observation

__all__ = ["Base", "Observation"]
