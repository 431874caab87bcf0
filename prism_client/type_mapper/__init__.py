"""Type Mapper - Maps PostgreSQL column types to TypeScript types."""

from .main import (
    ArrayType,
    JsonType,
    SqlTypeCategory,
    TypeMapping,
    categorize,
    convert_value,
    default_value,
    map_type,
    normalize_sql_type,
    process_response_data,
    SQL_TYPE_MAPPINGS,
)

__all__ = [
    "ArrayType",
    "JsonType",
    "SqlTypeCategory",
    "TypeMapping",
    "categorize",
    "convert_value",
    "default_value",
    "map_type",
    "normalize_sql_type",
    "process_response_data",
    "SQL_TYPE_MAPPINGS",
]
