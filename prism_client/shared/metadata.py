"""Schema metadata records returned by the prism metadata service.

The service has shipped both camelCase and snake_case field names over
time, so every ``from_dict`` accepts either spelling. Object mappings keep
insertion order; generated output depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Iterable, Mapping

from .errors import SchemaValidationError

INPUT_MODES: Final[frozenset[str]] = frozenset({"IN", "INOUT"})
OUTPUT_MODES: Final[frozenset[str]] = frozenset({"OUT", "INOUT"})

KIND_SCALAR: Final = "scalar"
KIND_SET: Final = "set"
KIND_TABLE: Final = "table"

OBJECT_FUNCTION: Final = "function"


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key out of several spellings."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _require(data: Any, key: str, record: str) -> str:
    if not isinstance(data, Mapping):
        raise SchemaValidationError(f"{record} record must be a mapping", field=key)
    value = data.get(key)
    if value is None or value == "":
        raise SchemaValidationError(
            f"{record} is missing required '{key}'",
            field=str(data.get("name", key)),
        )
    return str(value)


def _ordered(items: Any, parse: Any) -> dict[str, Any]:
    """Parse a name-keyed mapping or a list of records into an ordered dict."""
    if not items:
        return {}
    if isinstance(items, Mapping):
        records: Iterable[Any] = items.values()
    else:
        records = items
    parsed: dict[str, Any] = {}
    for raw in records:
        record = parse(raw)
        parsed[record.name] = record
    return parsed


@dataclass(frozen=True, slots=True)
class ColumnReference:
    """Foreign key target of a column."""

    schema: str
    table: str
    column: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColumnReference:
        return cls(
            schema=str(data.get("schema", "")),
            table=str(data.get("table", "")),
            column=str(data.get("column", "")),
        )

    def __str__(self) -> str:
        return f"{self.schema}.{self.table}.{self.column}"


@dataclass(frozen=True, slots=True)
class ColumnMetadata:
    name: str
    type: str
    nullable: bool = True
    is_primary_key: bool = False
    is_enum: bool = False
    references: ColumnReference | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColumnMetadata:
        name = _require(data, "name", "column")
        type_name = _require(data, "type", "column")
        references = data.get("references")
        return cls(
            name=name,
            type=type_name,
            nullable=bool(data.get("nullable", True)),
            is_primary_key=bool(_pick(data, "is_primary_key", "isPrimaryKey", "is_pk", default=False)),
            is_enum=bool(_pick(data, "is_enum", "isEnum", default=False)),
            references=ColumnReference.from_dict(references) if references else None,
        )


@dataclass(frozen=True, slots=True)
class TableMetadata:
    name: str
    schema: str
    columns: tuple[ColumnMetadata, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableMetadata:
        return cls(
            name=_require(data, "name", "table"),
            schema=str(data.get("schema", "")),
            columns=tuple(ColumnMetadata.from_dict(c) for c in data.get("columns") or ()),
        )


@dataclass(frozen=True, slots=True)
class ViewMetadata:
    name: str
    schema: str
    columns: tuple[ColumnMetadata, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ViewMetadata:
        return cls(
            name=_require(data, "name", "view"),
            schema=str(data.get("schema", "")),
            columns=tuple(ColumnMetadata.from_dict(c) for c in data.get("columns") or ()),
        )


@dataclass(frozen=True, slots=True)
class EnumMetadata:
    name: str
    schema: str
    values: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EnumMetadata:
        return cls(
            name=_require(data, "name", "enum"),
            schema=str(data.get("schema", "")),
            values=tuple(str(v) for v in data.get("values") or ()),
        )


@dataclass(frozen=True, slots=True)
class FunctionParameter:
    name: str
    type: str
    mode: str = "IN"
    has_default: bool = False
    default_value: str | None = None

    @property
    def is_input(self) -> bool:
        return self.mode in INPUT_MODES

    @property
    def is_output(self) -> bool:
        return self.mode in OUTPUT_MODES

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionParameter:
        default_value = _pick(data, "default_value", "defaultValue")
        return cls(
            name=_require(data, "name", "parameter"),
            type=_require(data, "type", "parameter"),
            mode=str(data.get("mode") or "IN").upper(),
            has_default=bool(_pick(data, "has_default", "hasDefault", default=False)),
            default_value=None if default_value is None else str(default_value),
        )


@dataclass(frozen=True, slots=True)
class ReturnColumn:
    name: str
    type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReturnColumn:
        return cls(
            name=_require(data, "name", "return column"),
            type=_require(data, "type", "return column"),
        )


@dataclass(frozen=True, slots=True)
class FunctionMetadata:
    """A database function, procedure or trigger function.

    ``kind`` describes the result shape (scalar, set or table) and
    ``object_kind`` the catalog object type. ``return_type`` of ``None``
    means the routine returns nothing.
    """

    name: str
    schema: str
    kind: str = KIND_SCALAR
    object_kind: str = OBJECT_FUNCTION
    parameters: tuple[FunctionParameter, ...] = ()
    return_type: str | None = None
    return_columns: tuple[ReturnColumn, ...] | None = None
    description: str | None = None
    is_strict: bool = False

    @property
    def input_parameters(self) -> list[FunctionParameter]:
        return [p for p in self.parameters if p.is_input]

    @property
    def output_parameters(self) -> list[FunctionParameter]:
        return [p for p in self.parameters if p.is_output]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionMetadata:
        raw_columns = _pick(data, "return_columns", "returnColumns")
        return_type = _pick(data, "return_type", "returnType")
        return cls(
            name=_require(data, "name", "function"),
            schema=str(data.get("schema", "")),
            kind=str(_pick(data, "kind", "type", default=KIND_SCALAR)).lower(),
            object_kind=str(
                _pick(data, "object_kind", "objectType", "object_type", default=OBJECT_FUNCTION)
            ).lower(),
            parameters=tuple(FunctionParameter.from_dict(p) for p in data.get("parameters") or ()),
            return_type=None if return_type is None else str(return_type),
            return_columns=(
                tuple(ReturnColumn.from_dict(c) for c in raw_columns)
                if raw_columns is not None
                else None
            ),
            description=_pick(data, "description"),
            is_strict=bool(_pick(data, "is_strict", "isStrict", default=False)),
        )


@dataclass(frozen=True, slots=True)
class SchemaMetadata:
    name: str
    tables: dict[str, TableMetadata] = field(default_factory=dict)
    views: dict[str, ViewMetadata] = field(default_factory=dict)
    enums: dict[str, EnumMetadata] = field(default_factory=dict)
    functions: dict[str, FunctionMetadata] = field(default_factory=dict)
    procedures: dict[str, FunctionMetadata] = field(default_factory=dict)
    triggers: dict[str, FunctionMetadata] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchemaMetadata:
        return cls(
            name=_require(data, "name", "schema"),
            tables=_ordered(data.get("tables"), TableMetadata.from_dict),
            views=_ordered(data.get("views"), ViewMetadata.from_dict),
            enums=_ordered(data.get("enums"), EnumMetadata.from_dict),
            functions=_ordered(data.get("functions"), FunctionMetadata.from_dict),
            procedures=_ordered(data.get("procedures"), FunctionMetadata.from_dict),
            triggers=_ordered(data.get("triggers"), FunctionMetadata.from_dict),
        )


@dataclass(frozen=True, slots=True)
class HealthStatus:
    status: str
    timestamp: str = ""
    version: str = ""
    uptime: float = 0.0
    database_connected: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HealthStatus:
        return cls(
            status=str(data.get("status", "")),
            timestamp=str(data.get("timestamp", "")),
            version=str(data.get("version", "")),
            uptime=float(data.get("uptime") or 0.0),
            database_connected=bool(
                _pick(data, "database_connected", "databaseConnected", default=False)
            ),
        )


@dataclass(frozen=True, slots=True)
class CacheStatus:
    last_updated: str = ""
    total_items: int = 0
    tables_cached: int = 0
    views_cached: int = 0
    enums_cached: int = 0
    functions_cached: int = 0
    procedures_cached: int = 0
    triggers_cached: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CacheStatus:
        def count(snake: str, camel: str) -> int:
            return int(_pick(data, snake, camel, default=0))

        return cls(
            last_updated=str(_pick(data, "last_updated", "lastUpdated", default="")),
            total_items=count("total_items", "totalItems"),
            tables_cached=count("tables_cached", "tablesCached"),
            views_cached=count("views_cached", "viewsCached"),
            enums_cached=count("enums_cached", "enumsCached"),
            functions_cached=count("functions_cached", "functionsCached"),
            procedures_cached=count("procedures_cached", "proceduresCached"),
            triggers_cached=count("triggers_cached", "triggersCached"),
        )
