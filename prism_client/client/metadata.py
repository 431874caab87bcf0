"""Client for the prism metadata endpoints describing the database structure."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from prism_client.shared.metadata import (
    CacheStatus,
    EnumMetadata,
    FunctionMetadata,
    HealthStatus,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)

from .base import BaseClient

T = TypeVar("T")


def _parse_list(payload: Any, parse: Callable[[Any], T]) -> list[T]:
    if not payload:
        return []
    if isinstance(payload, dict):
        payload = list(payload.values())
    return [parse(item) for item in payload]


class MetadataClient:
    """Typed access to ``/dt`` metadata and ``/health`` endpoints."""

    def __init__(self, client: BaseClient) -> None:
        self.client = client

    def get_schemas(self) -> list[SchemaMetadata]:
        return _parse_list(self.client.get("/dt/schemas"), SchemaMetadata.from_dict)

    def get_tables(self, schema: str) -> list[TableMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/tables"), TableMetadata.from_dict)

    def get_views(self, schema: str) -> list[ViewMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/views"), ViewMetadata.from_dict)

    def get_enums(self, schema: str) -> list[EnumMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/enums"), EnumMetadata.from_dict)

    def get_functions(self, schema: str) -> list[FunctionMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/functions"), FunctionMetadata.from_dict)

    def get_procedures(self, schema: str) -> list[FunctionMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/procedures"), FunctionMetadata.from_dict)

    def get_triggers(self, schema: str) -> list[FunctionMetadata]:
        return _parse_list(self.client.get(f"/dt/{schema}/triggers"), FunctionMetadata.from_dict)

    def get_health(self) -> HealthStatus:
        return HealthStatus.from_dict(self.client.get("/health") or {})

    def ping(self) -> str:
        """Simple liveness check, the server answers ``pong``."""
        return str(self.client.get("/health/ping"))

    def get_cache_status(self) -> CacheStatus:
        return CacheStatus.from_dict(self.client.get("/health/cache") or {})

    def clear_cache(self) -> dict[str, Any]:
        """Ask the server to drop and reload its metadata cache."""
        return self.client.post("/health/clear-cache") or {}
