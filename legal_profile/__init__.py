"""Legal-compliance extension of the citizen-request user record."""

from .version import __version__

__all__ = ["__version__"]
