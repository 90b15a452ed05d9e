"""FastAPI dependencies."""

from .auth import *
from .database import *

__all__ = [
    "get_current_principal",
    "get_db",
]
