"""Type Code Generator - Generates TypeScript declarations from schema metadata."""

from .main import (
    Field,
    Section,
    GeneratorContext,
    TypeGenerator,
    column_comment,
    generate,
    render_interface,
    render_type_alias,
)

__all__ = [
    "Field",
    "Section",
    "GeneratorContext",
    "TypeGenerator",
    "column_comment",
    "generate",
    "render_interface",
    "render_type_alias",
]
