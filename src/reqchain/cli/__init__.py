"""Command-line interface for reqchain."""

from .. import __version__

__all__ = ["__version__"]
