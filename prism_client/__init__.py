"""prism-client: Python client and TypeScript type generator for prism APIs."""

from .shared import (
    ColumnMetadata,
    EnumMetadata,
    FunctionMetadata,
    PrismError,
    SchemaError,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)
from .type_mapper import map_type
from .type_codegen import TypeGenerator, generate
from .client import BaseClient, CrudOperations, FilterOptions, MetadataClient, Prism

__version__ = "0.1.0"

__all__ = [
    "BaseClient",
    "ColumnMetadata",
    "CrudOperations",
    "EnumMetadata",
    "FilterOptions",
    "FunctionMetadata",
    "MetadataClient",
    "Prism",
    "PrismError",
    "SchemaError",
    "SchemaMetadata",
    "TableMetadata",
    "TypeGenerator",
    "ViewMetadata",
    "generate",
    "map_type",
]
