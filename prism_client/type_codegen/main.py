"""
Type Code Generator - Generates TypeScript declarations from schema metadata.

This module provides deterministic code generation with:
- Template pre-compilation
- One declaration per table, view, enum, function and procedure
- Optional parallel rendering of independent schemas
- Byte-identical output for identical metadata
"""

from __future__ import annotations

import argparse
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Iterable, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from prism_client.shared import (
    PrismError,
    SchemaError,
    collect_metadata_paths,
    load_schemas,
    sanitize_enum_member,
    schema_module_name,
    to_pascal_case,
    ts_property_name,
    ts_string_literal,
)
from prism_client.shared.metadata import (
    KIND_SET,
    KIND_TABLE,
    ColumnMetadata,
    EnumMetadata,
    FunctionMetadata,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)
from prism_client.type_mapper import map_type, normalize_sql_type

logger = logging.getLogger(__name__)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"
DEFAULT_OUTPUT_DIR: Final[Path] = Path("src/gen")
DEFAULT_API_URL: Final[str] = "http://localhost:8000"
INDEX_FILE: Final[str] = "index.ts"
MODULE_SUFFIX: Final[str] = ".ts"

PROCEDURE_SUFFIX: Final[str] = "Procedure"
ROW_SEQUENCE_KINDS: Final[frozenset[str]] = frozenset({KIND_SET, KIND_TABLE})
VOID_TYPES: Final[frozenset[str]] = frozenset({"", "void"})

QUERY_PARAM_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("limit", "number"),
    ("offset", "number"),
    ("order_by", "string"),
    ("order_dir", '"asc" | "desc"'),
)


@dataclass(frozen=True, slots=True)
class Field:
    """A single property of a generated interface."""

    name: str
    ts_type: str
    optional: bool = False
    comment: str = ""

    def render(self) -> list[str]:
        comment = self.comment.replace("*/", "*\\/")
        lines = [f"  /** {comment} */"] if comment else []
        optional = "?" if self.optional else ""
        lines.append(f"  {ts_property_name(self.name)}{optional}: {self.ts_type};")
        return lines


@dataclass(frozen=True, slots=True)
class Section:
    """A commented group of declarations inside a schema module."""

    title: str
    declarations: tuple[str, ...]

    @property
    def body(self) -> str:
        return "\n".join(self.declarations)


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        # Pre-compile templates
        self._schema_template = self.template_env.get_template("schema.ts.j2")
        self._index_template = self.template_env.get_template("index.ts.j2")

    @property
    def schema_template(self):
        return self._schema_template

    @property
    def index_template(self):
        return self._index_template


def render_interface(name: str, fields: Iterable[Field]) -> str:
    """Render an exported TypeScript interface."""
    lines = [f"export interface {name} {{"]
    for item in fields:
        lines.extend(item.render())
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_type_alias(name: str, ts_type: str) -> str:
    return f"export type {name} = {ts_type};\n"


def column_comment(column: ColumnMetadata) -> str:
    """Build the JSDoc text describing a column's key and enum roles."""
    comments: list[str] = []
    if column.is_primary_key:
        comments.append("Primary key")
    if column.references is not None:
        comments.append(f"References {column.references}")
    if column.is_enum:
        comments.append("Enum type")
    return ". ".join(comments)


def _is_void(return_type: str | None) -> bool:
    return return_type is None or normalize_sql_type(return_type) in VOID_TYPES


class TypeGenerator:
    """Turns schema metadata into TypeScript source text.

    Every ``generate_*`` method is a pure function of its input; nothing is
    written to disk here. Use :func:`generate` to persist the output.
    """

    def __init__(self, ctx: GeneratorContext | None = None) -> None:
        self.ctx = ctx or GeneratorContext()

    def map_type(self, sql_type: str, sample_value: Any = None) -> str:
        return map_type(sql_type, sample_value)

    def generate_table_decl(self, table: TableMetadata) -> str:
        """Interface for a table row; nullable columns become optional."""
        return render_interface(
            to_pascal_case(table.name),
            (
                Field(
                    column.name,
                    self.map_type(column.type),
                    optional=column.nullable,
                    comment=column_comment(column),
                )
                for column in table.columns
            ),
        )

    def generate_view_decl(self, view: ViewMetadata) -> str:
        """Interface for a view row, suffixed to avoid clashing with tables."""
        return render_interface(
            f"{to_pascal_case(view.name)}View",
            (
                Field(column.name, self.map_type(column.type), optional=column.nullable)
                for column in view.columns
            ),
        )

    def generate_enum_decl(self, enum_meta: EnumMetadata) -> str:
        lines = [f"export enum {to_pascal_case(enum_meta.name)} {{"]
        for value in enum_meta.values:
            lines.append(f"  {sanitize_enum_member(value)} = {ts_string_literal(value)},")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def generate_query_params_decl(self, table: TableMetadata) -> str:
        """Pagination, ordering and per-column filter parameters for a table."""
        fields = [Field(name, ts_type, optional=True) for name, ts_type in QUERY_PARAM_FIELDS]
        fields.extend(
            Field(column.name, f"{self.map_type(column.type)} | null", optional=True)
            for column in table.columns
        )
        return render_interface(f"{to_pascal_case(table.name)}QueryParams", fields)

    def generate_function_decls(self, fn: FunctionMetadata, name_suffix: str = "") -> str:
        """Declarations for calling a function or procedure.

        Emits ``<Name>Params`` when the routine takes input, then the result
        shape, chosen in this order:

        1. ``return_columns`` present: a ``<Name>ResultRow`` interface, and the
           result is a row array for set/table functions, else a nullable row.
        2. a non-void ``return_type``: the mapped type, as an array for set
           functions, else nullable.
        3. otherwise a ``<Name>Result`` interface built from the OUT/INOUT
           parameters, or ``void`` when there are none.
        """
        base_name = f"{to_pascal_case(fn.name)}{name_suffix}"
        result_name = f"{base_name}Result"
        declarations: list[str] = []

        inputs = fn.input_parameters
        if inputs:
            declarations.append(
                render_interface(
                    f"{base_name}Params",
                    (
                        Field(param.name, self.map_type(param.type), optional=param.has_default)
                        for param in inputs
                    ),
                )
            )

        if fn.return_columns:
            row_name = f"{base_name}ResultRow"
            declarations.append(
                render_interface(
                    row_name,
                    (Field(column.name, self.map_type(column.type)) for column in fn.return_columns),
                )
            )
            if fn.kind in ROW_SEQUENCE_KINDS:
                declarations.append(render_type_alias(result_name, f"{row_name}[]"))
            else:
                declarations.append(render_type_alias(result_name, f"{row_name} | null"))
        elif not _is_void(fn.return_type):
            ts_type = self.map_type(fn.return_type)
            if fn.kind == KIND_SET:
                declarations.append(render_type_alias(result_name, f"{ts_type}[]"))
            else:
                declarations.append(render_type_alias(result_name, f"{ts_type} | null"))
        else:
            outputs = fn.output_parameters
            if outputs:
                declarations.append(
                    render_interface(
                        result_name,
                        (Field(param.name, self.map_type(param.type)) for param in outputs),
                    )
                )
            else:
                declarations.append(render_type_alias(result_name, "void"))

        return "\n".join(declarations)

    def _sections(self, schema: SchemaMetadata) -> list[Section]:
        sections: list[Section] = []

        if schema.tables:
            table_decls: list[str] = []
            for table in schema.tables.values():
                table_decls.append(self.generate_table_decl(table))
                table_decls.append(self.generate_query_params_decl(table))
            sections.append(Section("Table interfaces", tuple(table_decls)))

        if schema.views:
            sections.append(
                Section(
                    "View interfaces",
                    tuple(self.generate_view_decl(view) for view in schema.views.values()),
                )
            )

        if schema.enums:
            sections.append(
                Section(
                    "Enum types",
                    tuple(self.generate_enum_decl(enum) for enum in schema.enums.values()),
                )
            )

        if schema.functions:
            sections.append(
                Section(
                    "Function types",
                    tuple(self.generate_function_decls(fn) for fn in schema.functions.values()),
                )
            )

        if schema.procedures:
            sections.append(
                Section(
                    "Procedure types",
                    tuple(
                        self.generate_function_decls(proc, PROCEDURE_SUFFIX)
                        for proc in schema.procedures.values()
                    ),
                )
            )

        return sections

    def generate_schema_module(self, schema: SchemaMetadata) -> str:
        """Full TypeScript module for one schema."""
        return self.ctx.schema_template.render(
            schema_name=schema.name,
            sections=self._sections(schema),
        )

    def generate_index_module(self, schemas: Sequence[SchemaMetadata]) -> str:
        """Index module re-exporting every schema module."""
        return self.ctx.index_template.render(
            modules=[schema_module_name(schema.name) for schema in schemas],
        )


def _write_schema_module(
    generator: TypeGenerator,
    schema: SchemaMetadata,
    output_dir: Path,
) -> Path:
    output_path = output_dir / f"{schema_module_name(schema.name)}{MODULE_SUFFIX}"
    output_path.write_text(generator.generate_schema_module(schema), encoding="utf-8")
    logger.debug("Generated types for schema %s -> %s", schema.name, output_path)
    return output_path


def _check_module_names(schemas: Sequence[SchemaMetadata]) -> None:
    """Reject schemas whose generated module names coincide."""
    owners: dict[str, str] = {}
    for schema in schemas:
        module = schema_module_name(schema.name)
        if module in owners:
            raise SchemaError(
                f"Schemas '{owners[module]}' and '{schema.name}' both map to module '{module}'"
            )
        owners[module] = schema.name


def _module_error(schema_name: str, cause: Exception) -> SchemaError:
    return SchemaError(f"Failed to generate module for schema '{schema_name}': {cause}")


def generate(
    schemas: Sequence[SchemaMetadata],
    output_dir: Path,
    parallel: bool = True,
    max_workers: int | None = None,
) -> int:
    """Write one TypeScript module per schema plus an index module.

    Args:
        schemas: Schema metadata to generate from.
        output_dir: Destination directory, created if missing.
        parallel: Whether to render schemas in parallel.
        max_workers: Maximum number of parallel workers.

    Returns:
        Number of schema modules written.
    """
    _check_module_names(schemas)
    generator = TypeGenerator()
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Generating TypeScript types in %s", output_dir)

    if parallel and len(schemas) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_write_schema_module, generator, schema, output_dir): schema.name
                for schema in schemas
            }

            for future in as_completed(futures):
                schema_name = futures[future]
                try:
                    future.result()
                except Exception as e:
                    raise _module_error(schema_name, e) from e
    else:
        for schema in schemas:
            try:
                _write_schema_module(generator, schema, output_dir)
            except Exception as e:
                raise _module_error(schema.name, e) from e

    index_path = output_dir / INDEX_FILE
    index_path.write_text(generator.generate_index_module(schemas), encoding="utf-8")
    logger.debug("Generated index file: %s", index_path)

    module_count = len(schemas)
    logger.info("Successfully generated types for %d schema(s)", module_count)
    return module_count


def _fetch_schemas(url: str) -> list[SchemaMetadata]:
    from prism_client.client import BaseClient, MetadataClient

    with BaseClient(url) as client:
        return MetadataClient(client).get_schemas()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate TypeScript types from prism schema metadata",
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="*",
        help="Metadata file(s) or directories; when omitted the metadata service is queried",
    )
    parser.add_argument(
        "--url",
        default=os.environ.get("PRISM_API_URL", DEFAULT_API_URL),
        help="Base URL of the prism API (default: $PRISM_API_URL or %(default)s)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for the generated TypeScript modules",
    )
    parser.add_argument(
        "--schema",
        action="append",
        dest="schemas",
        default=None,
        help="Only generate the named schema (repeatable)",
    )
    parser.add_argument(
        "--no-parallel",
        action="store_true",
        help="Disable parallel processing",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of parallel workers",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.paths:
            metadata_paths = collect_metadata_paths(args.paths)
            if not metadata_paths:
                raise SystemExit("No metadata files found")
            schemas = load_schemas(metadata_paths)
            source = f"{len(metadata_paths)} metadata file(s)"
        else:
            schemas = _fetch_schemas(args.url)
            source = args.url

        if args.schemas:
            wanted = set(args.schemas)
            schemas = [schema for schema in schemas if schema.name in wanted]
        if not schemas:
            raise SystemExit("No schemas to generate")

        output_dir = args.output.resolve()
        module_count = generate(
            schemas,
            output_dir,
            parallel=not args.no_parallel,
            max_workers=args.workers,
        )

        print(
            f"Generated {module_count} schema module(s) from "
            f"{source} into {output_dir}"
        )
    except (SchemaError, PrismError, OSError) as e:
        raise SystemExit(f"Error: {e}") from e


if __name__ == "__main__":
    main()
