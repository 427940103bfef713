"""Search model and contact lookup adapters for third-party services."""

from .base import ContactLookup, SearchModel  # noqa: F401
from .contactout import ContactOutClient  # noqa: F401
from .sample import StaticSearchModel  # noqa: F401

__all__ = [
    "ContactLookup",
    "ContactOutClient",
    "SearchModel",
    "StaticSearchModel",
]
