"""Shared metadata model and utilities."""

from .schema_loader import (
    SchemaCache,
    load_metadata_file,
    parse_metadata_file,
    load_schemas,
    collect_metadata_paths,
)
from .naming import (
    to_pascal_case,
    to_camel_case,
    sanitize_enum_member,
    ts_property_name,
    ts_string_literal,
    schema_module_name,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    PrismError,
)
from .metadata import (
    CacheStatus,
    ColumnMetadata,
    ColumnReference,
    EnumMetadata,
    FunctionMetadata,
    FunctionParameter,
    HealthStatus,
    ReturnColumn,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)

__all__ = [
    # Metadata loading
    "SchemaCache",
    "load_metadata_file",
    "parse_metadata_file",
    "load_schemas",
    "collect_metadata_paths",
    # Naming utilities
    "to_pascal_case",
    "to_camel_case",
    "sanitize_enum_member",
    "ts_property_name",
    "ts_string_literal",
    "schema_module_name",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "PrismError",
    # Metadata records
    "CacheStatus",
    "ColumnMetadata",
    "ColumnReference",
    "EnumMetadata",
    "FunctionMetadata",
    "FunctionParameter",
    "HealthStatus",
    "ReturnColumn",
    "SchemaMetadata",
    "TableMetadata",
    "ViewMetadata",
]
