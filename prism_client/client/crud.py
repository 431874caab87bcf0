"""CRUD operations for database tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from prism_client.shared.errors import PrismError

from .base import BaseClient, param_value

OrderDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class FilterOptions:
    """Filtering, ordering and pagination for table queries."""

    where: Mapping[str, Any] = field(default_factory=dict)
    order_by: str | None = None
    order_dir: OrderDirection | None = None
    limit: int | None = None
    offset: int | None = None

    def to_params(self) -> dict[str, str]:
        """Flatten the filter into query parameters."""
        params: dict[str, str] = {}
        for key, value in self.where.items():
            if value is None:
                continue
            params[key] = param_value(value)

        if self.order_by:
            params["order_by"] = self.order_by
        if self.order_dir:
            params["order_dir"] = self.order_dir
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.offset is not None:
            params["offset"] = str(self.offset)
        return params


class CrudOperations:
    """Standard CRUD operations for one table, served at ``/<schema>/<table>``."""

    def __init__(self, client: BaseClient, schema: str, table: str) -> None:
        self.client = client
        self.schema = schema
        self.table = table
        self.base_path = f"/{schema}/{table}"

    def find_all(self, filter: FilterOptions | None = None) -> list[dict[str, Any]]:
        params = (filter or FilterOptions()).to_params()
        return self.client.get(self.base_path, params=params) or []

    def find_many(self, filter: FilterOptions) -> list[dict[str, Any]]:
        return self.find_all(filter)

    def find_one(self, id: str | int) -> dict[str, Any]:
        """Fetch a single record by its ``id`` column.

        Raises:
            PrismError: ``NOT_FOUND`` when no record matches.
        """
        results = self.find_all(FilterOptions(where={"id": str(id)}))
        if not results:
            raise PrismError(f"No record found with ID: {id}", "NOT_FOUND", status=404)
        return results[0]

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self.client.post(self.base_path, dict(data))

    def update(self, id: str | int, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update a record and return its new state.

        Raises:
            PrismError: ``UPDATE_FAILED`` when the server reports no updated row.
        """
        response = self.client.put(self.base_path, dict(data), params={"id": str(id)}) or {}
        updated = response.get("updated_data") or []
        if not updated:
            raise PrismError(f"Update failed for ID: {id}", "UPDATE_FAILED")
        return updated[0]

    def delete(self, id: str | int) -> None:
        self.client.delete(self.base_path, params={"id": str(id)})

    def count(self, filter: FilterOptions | None = None) -> int:
        params = (filter or FilterOptions()).to_params()
        response = self.client.get(f"{self.base_path}/count", params=params) or {}
        return int(response.get("count", 0))
