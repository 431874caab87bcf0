"""High level entry point tying the metadata, CRUD and codegen layers together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from prism_client.shared.errors import PrismError
from prism_client.shared.metadata import FunctionMetadata, SchemaMetadata, TableMetadata
from prism_client.type_codegen import generate

from .base import BaseClient
from .crud import CrudOperations
from .metadata import MetadataClient

logger = logging.getLogger(__name__)


class Prism:
    """Client for a prism API.

    Usage:
        prism = Prism("http://localhost:8000")
        prism.initialize()

        users = prism.crud("public", "users").find_all()
        prism.generate_types(Path("src/gen"))
    """

    def __init__(self, client: BaseClient | str) -> None:
        self.client = BaseClient(client) if isinstance(client, str) else client
        self.metadata = MetadataClient(self.client)
        self._schemas: dict[str, SchemaMetadata] = {}

    @property
    def schemas(self) -> list[SchemaMetadata]:
        return list(self._schemas.values())

    def initialize(self) -> None:
        """Load and cache schema metadata from the server."""
        logger.info("Loading schema metadata from %s", self.client.base_url)
        self._schemas = {schema.name: schema for schema in self.metadata.get_schemas()}
        logger.info("Loaded %d schema(s)", len(self._schemas))

    def get_schema(self, name: str) -> SchemaMetadata | None:
        return self._schemas.get(name)

    def get_table(self, schema: str, table: str) -> TableMetadata | None:
        meta = self._schemas.get(schema)
        return meta.tables.get(table) if meta else None

    def get_function(self, schema: str, name: str) -> FunctionMetadata | None:
        meta = self._schemas.get(schema)
        return meta.functions.get(name) if meta else None

    def crud(self, schema: str, table: str) -> CrudOperations:
        return CrudOperations(self.client, schema, table)

    def execute_function(
        self,
        schema: str,
        name: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.client.post(f"/{schema}/fn/{name}", dict(params or {}))

    def execute_procedure(
        self,
        schema: str,
        name: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.client.post(f"/{schema}/proc/{name}", dict(params or {}))

    def generate_types(self, output_dir: Path = Path("src/gen")) -> int:
        """Write TypeScript declarations for every loaded schema.

        Raises:
            PrismError: If :meth:`initialize` has not loaded any schema.
        """
        if not self._schemas:
            raise PrismError("No schema metadata loaded; call initialize() first", "NOT_INITIALIZED")
        return generate(self.schemas, output_dir)

    def close(self) -> None:
        self.client.close()
