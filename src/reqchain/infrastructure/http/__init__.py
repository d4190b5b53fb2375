"""HTTP infrastructure components."""

from .client import StandardClient

__all__ = ["StandardClient"]
