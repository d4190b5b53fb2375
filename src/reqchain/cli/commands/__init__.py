"""CLI commands."""

from .config import config
from .request import request

__all__ = ["config", "request"]
