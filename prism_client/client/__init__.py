"""HTTP client for prism APIs."""

from .base import BaseClient
from .crud import CrudOperations, FilterOptions
from .metadata import MetadataClient
from .prism import Prism

__all__ = [
    "BaseClient",
    "CrudOperations",
    "FilterOptions",
    "MetadataClient",
    "Prism",
]
