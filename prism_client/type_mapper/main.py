"""
Type Mapper - Maps PostgreSQL column types to TypeScript types.

The mapping is a total function: every input, including empty or garbage
strings, resolves to a TypeScript type. Unknown SQL types fall through to
``unknown`` so a whole-schema generation run never aborts on one exotic
column.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Final, Mapping

TS_NUMBER: Final = "number"
TS_STRING: Final = "string"
TS_BOOLEAN: Final = "boolean"
TS_JSON: Final = "Record<string, unknown>"
TS_UNKNOWN: Final = "unknown"

_PRECISION = re.compile(r"\([^)]*\)")
_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"true", "t", "1", "yes", "y", "on"})
_FALSE_STRINGS: Final[frozenset[str]] = frozenset({"false", "f", "0", "no", "n", "off", ""})


class SqlTypeCategory(str, Enum):
    NUMERIC = "numeric"
    STRING = "string"
    TEMPORAL = "temporal"
    BOOLEAN = "boolean"
    BINARY = "binary"
    JSON = "json"
    ARRAY = "array"
    ENUM = "enum"
    UUID = "uuid"
    NETWORK = "network"
    GEOMETRIC = "geometric"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class TypeMapping:
    """One row of the SQL type table."""

    pattern: re.Pattern[str]
    ts_type: str
    category: SqlTypeCategory
    default_value: str

    def matches(self, normalized: str) -> bool:
        return self.pattern.fullmatch(normalized) is not None


def _mapping(pattern: str, ts_type: str, category: SqlTypeCategory, default: str) -> TypeMapping:
    return TypeMapping(re.compile(pattern), ts_type, category, default)


# Evaluated in order, first match wins. The catch-all must stay last.
SQL_TYPE_MAPPINGS: Final[tuple[TypeMapping, ...]] = (
    _mapping(
        r"smallint|integer|int|int2|int4|int8|bigint|decimal|numeric|real|float4|float8"
        r"|double precision|smallserial|serial|serial2|serial4|serial8|bigserial",
        TS_NUMBER,
        SqlTypeCategory.NUMERIC,
        "0",
    ),
    _mapping(
        r"char|character|bpchar|varchar|character varying|text|citext|name",
        TS_STRING,
        SqlTypeCategory.STRING,
        '""',
    ),
    _mapping(r"boolean|bool", TS_BOOLEAN, SqlTypeCategory.BOOLEAN, "false"),
    _mapping(
        r"timestamp( with(out)? time zone)?|timestamptz|date|time( with(out)? time zone)?|timetz",
        TS_STRING,
        SqlTypeCategory.TEMPORAL,
        "new Date().toISOString()",
    ),
    _mapping(r"interval", TS_STRING, SqlTypeCategory.TEMPORAL, '""'),
    _mapping(r"uuid", TS_STRING, SqlTypeCategory.UUID, '""'),
    _mapping(r"jsonb?", TS_JSON, SqlTypeCategory.JSON, "{}"),
    _mapping(r"bytea", TS_STRING, SqlTypeCategory.BINARY, '""'),
    _mapping(r"inet|cidr|macaddr|macaddr8", TS_STRING, SqlTypeCategory.NETWORK, '""'),
    _mapping(
        r"point|line|lseg|box|path|polygon|circle",
        TS_STRING,
        SqlTypeCategory.GEOMETRIC,
        '""',
    ),
    _mapping(r"enum", TS_STRING, SqlTypeCategory.ENUM, '""'),
    _mapping(r".*", TS_UNKNOWN, SqlTypeCategory.OTHER, "undefined"),
)


@dataclass(frozen=True, slots=True)
class ArrayType:
    """TypeScript array of an already mapped item type."""

    item_type: str

    def __str__(self) -> str:
        return f"{self.item_type}[]"


@dataclass(frozen=True, slots=True)
class JsonType:
    """Structured JSON value.

    The sample value is kept for callers that want to inspect it; the
    emitted type is always the generic record.
    """

    sample_data: Any = None

    def __str__(self) -> str:
        return TS_JSON


@lru_cache(maxsize=1024)
def normalize_sql_type(raw_sql_type: str) -> str:
    """Lowercase, trim, drop precision/length suffixes and collapse spaces.

    Examples:
        >>> normalize_sql_type("NUMERIC(10, 2)")
        'numeric'
        >>> normalize_sql_type("timestamp(3) with time zone")
        'timestamp with time zone'
        >>> normalize_sql_type("varchar(255)[]")
        'varchar[]'
    """
    stripped = _PRECISION.sub("", raw_sql_type.lower().strip())
    return " ".join(stripped.split())


def _array_base(normalized: str) -> str | None:
    """Return the element type of an array type, or None for scalars."""
    if normalized.endswith("[]"):
        return normalized[:-2]
    # PostgreSQL internal array names, e.g. _int4
    if normalized.startswith("_") and len(normalized) > 1:
        return normalized[1:]
    return None


def _strip_arrays(normalized: str) -> tuple[str, int]:
    """Split off every array level, returning the element type and the depth."""
    depth = 0
    base = _array_base(normalized)
    while base is not None:
        depth += 1
        normalized = base.strip()
        base = _array_base(normalized)
    return normalized, depth


def _lookup(normalized: str) -> TypeMapping:
    for mapping in SQL_TYPE_MAPPINGS:
        if mapping.matches(normalized):
            return mapping
    return SQL_TYPE_MAPPINGS[-1]


def map_type(raw_sql_type: str, sample_value: Any = None) -> str:
    """Map a raw SQL type to a TypeScript type name.

    Args:
        raw_sql_type: SQL type as reported by the catalog, e.g. ``varchar(255)``.
        sample_value: Optional sample of a JSON column's contents.

    Returns:
        The TypeScript type, ``unknown`` when the SQL type is not recognised.
    """
    if not isinstance(raw_sql_type, str):
        raw_sql_type = "" if raw_sql_type is None else str(raw_sql_type)
    normalized = normalize_sql_type(raw_sql_type)

    base, depth = _strip_arrays(normalized)

    if base in ("json", "jsonb"):
        ts_type = str(JsonType(sample_value if depth == 0 else None))
    else:
        ts_type = _lookup(base).ts_type

    for _ in range(depth):
        ts_type = str(ArrayType(ts_type))
    return ts_type


def categorize(raw_sql_type: str) -> SqlTypeCategory:
    """Return the category of a SQL type."""
    normalized = normalize_sql_type(str(raw_sql_type or ""))
    if _array_base(normalized) is not None:
        return SqlTypeCategory.ARRAY
    return _lookup(normalized).category


def default_value(raw_sql_type: str) -> str:
    """TypeScript literal usable as a default for a SQL type."""
    normalized = normalize_sql_type(str(raw_sql_type or ""))
    if _array_base(normalized) is not None:
        return "[]"
    return _lookup(normalized).default_value


def _to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return float("nan")


def _to_boolean(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return bool(value)


def _to_list(value: Any, item_type: str) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return [convert_value(item, item_type) for item in value]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [convert_value(item, item_type) for item in parsed]
        # PostgreSQL array literal {a,b,c}
        if value.startswith("{") and value.endswith("}"):
            inner = value[1:-1]
            if not inner:
                return []
            return [convert_value(item.strip(), item_type) for item in inner.split(",")]
    return []


def convert_value(value: Any, target_type: str) -> Any:
    """Coerce a decoded response value to the shape of a TypeScript type.

    ``None`` is passed through. Conversion never raises; values that cannot
    be coerced keep a best-effort representation.
    """
    if value is None:
        return None

    if target_type == TS_NUMBER:
        return _to_number(value)
    if target_type == TS_BOOLEAN:
        return _to_boolean(value)
    if target_type == TS_STRING:
        return value if isinstance(value, str) else str(value)
    if target_type == TS_JSON:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return {}
        return value
    if target_type.endswith("[]"):
        return _to_list(value, target_type[:-2])
    return value


def process_response_data(
    data: Mapping[str, Any],
    expected_types: Mapping[str, str],
) -> dict[str, Any]:
    """Convert the fields of a response row according to their TypeScript types."""
    return {
        key: convert_value(data[key], ts_type)
        for key, ts_type in expected_types.items()
        if key in data
    }
