"""Naming utilities for code generation."""

from __future__ import annotations

import json
import re
from functools import lru_cache

_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")
_ENUM_MEMBER_INVALID = re.compile(r"[^A-Za-z0-9_]")
_TS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_MODULE_NAME_INVALID = re.compile(r"[^A-Za-z0-9_-]")

SCHEMA_MODULE_PREFIX = "types-"


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a schema object name to PascalCase.

    Every word is lowercased before its first letter is capitalized, so
    existing camel humps are not preserved.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_pascal_case("user_profiles")
        'UserProfiles'
        >>> to_pascal_case("api-keys")
        'ApiKeys'
        >>> to_pascal_case("CamelCaseAlready")
        'Camelcasealready'
    """
    return "".join(
        word[:1].upper() + word[1:].lower()
        for word in _WORD_SPLIT.split(value)
        if word
    )


@lru_cache(maxsize=1024)
def to_camel_case(value: str) -> str:
    """Convert a schema object name to camelCase.

    Uses caching for repeated calls with the same input.
    """
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


@lru_cache(maxsize=1024)
def sanitize_enum_member(value: str) -> str:
    """Turn an enum value into a TypeScript enum member identifier."""
    safe = _ENUM_MEMBER_INVALID.sub("_", value)
    if not safe:
        return "_"
    if safe[0].isdigit():
        safe = "_" + safe
    return safe


@lru_cache(maxsize=1024)
def ts_string_literal(value: str) -> str:
    """Quote a string for TypeScript literal embedding. Cached for performance."""
    return json.dumps(value)


@lru_cache(maxsize=1024)
def ts_property_name(name: str) -> str:
    """Return a property key usable inside a TypeScript interface body."""
    if _TS_IDENTIFIER.fullmatch(name):
        return name
    return ts_string_literal(name)


def schema_module_name(schema_name: str) -> str:
    """Name of the generated unit holding a schema's declarations.

    Used both as the file stem and in the index import path, so every
    character outside ``[A-Za-z0-9_-]`` is replaced with ``_``.

    Examples:
        >>> schema_module_name("public")
        'types-public'
        >>> schema_module_name("../a b")
        'types-___a_b'
    """
    return f"{SCHEMA_MODULE_PREFIX}{_MODULE_NAME_INVALID.sub('_', schema_name)}"
