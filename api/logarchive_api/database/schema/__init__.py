from .base import Base
from .log import Log

__all__ = ["Base", "Log"]
