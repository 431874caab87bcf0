"""Schema metadata file loading with caching support.

Metadata files are snapshots of the ``/dt/schemas`` response, so code
generation can run without a live API.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

import yaml

from .errors import SchemaError, SchemaValidationError
from .metadata import SchemaMetadata

logger = logging.getLogger(__name__)

METADATA_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True, slots=True)
class FileStamp:
    """Identity of a metadata file's current contents."""

    path: Path
    mtime: float
    size: int

    @classmethod
    def from_path(cls, path: Path) -> FileStamp:
        stat = path.stat()
        return cls(path=path.resolve(), mtime=stat.st_mtime, size=stat.st_size)


@dataclass(frozen=True, slots=True)
class CachedSchemas:
    """Schema records parsed from one file, valid while its stamp matches."""

    schemas: tuple[SchemaMetadata, ...]
    stamp: FileStamp


class SchemaCache:
    """Parsed schema records per metadata file.

    Records are immutable, so a cached tuple is handed out as is. An entry
    is replaced once the file's mtime or size changes; the oldest entry is
    dropped when ``max_size`` files are held. Files that fail to parse are
    never cached.
    """

    __slots__ = ("_entries", "_max_size")

    def __init__(self, max_size: int = 100) -> None:
        self._entries: dict[Path, CachedSchemas] = {}
        self._max_size = max_size

    def get(self, path: Path) -> tuple[SchemaMetadata, ...]:
        """Return the schemas defined in ``path``, parsing the file if needed.

        Raises:
            SchemaError: If the file cannot be read or holds invalid metadata.
        """
        stamp = FileStamp.from_path(path)
        entry = self._entries.get(stamp.path)
        if entry is not None and entry.stamp == stamp:
            return entry.schemas

        schemas = tuple(parse_metadata_file(stamp.path))
        logger.debug("Parsed %d schema(s) from %s", len(schemas), stamp.path)

        self._entries.pop(stamp.path, None)
        if len(self._entries) >= self._max_size:
            del self._entries[next(iter(self._entries))]
        self._entries[stamp.path] = CachedSchemas(schemas=schemas, stamp=stamp)
        return schemas

    def invalidate(self, path: Path | None = None) -> None:
        """Drop one file's entry, or every entry when ``path`` is None."""
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(path.resolve(), None)

    def __len__(self) -> int:
        return len(self._entries)


def load_metadata_file(path: Path) -> list[dict[str, Any]]:
    """Load raw schema documents from a YAML or JSON file.

    The root may be a list of schemas, a single schema mapping, or a
    mapping holding the list under ``schemas``.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read metadata file: {e}", str(path)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SchemaError(f"Invalid metadata document: {e}", str(path)) from e

    if isinstance(data, dict) and "schemas" in data:
        data = data["schemas"]
    elif isinstance(data, dict):
        data = [data]

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise SchemaError("Metadata root must be a schema mapping or a list of them", str(path))

    return data


def parse_metadata_file(path: Path) -> list[SchemaMetadata]:
    """Load a metadata file and parse every schema document in it.

    Raises:
        SchemaError: If the file cannot be read or parsed.
        SchemaValidationError: If a record is malformed; carries ``path``.
    """
    schemas: list[SchemaMetadata] = []
    for document in load_metadata_file(path):
        try:
            schemas.append(SchemaMetadata.from_dict(document))
        except SchemaValidationError as e:
            raise SchemaValidationError(str(e), str(path)) from e
    return schemas


def collect_metadata_paths(inputs: Sequence[Path]) -> list[Path]:
    """Collect all metadata files from the given inputs.

    Args:
        inputs: Paths to metadata files or directories.

    Returns:
        List of unique, resolved metadata file paths.

    Raises:
        FileNotFoundError: If any input path doesn't exist.
    """

    def _iter_paths() -> Iterator[Path]:
        for raw in inputs:
            path = raw.resolve()
            if not path.exists():
                raise FileNotFoundError(f"Metadata path '{raw}' does not exist")
            if path.is_dir():
                yield from sorted(
                    p
                    for p in path.iterdir()
                    if p.is_file() and p.suffix.lower() in METADATA_SUFFIXES
                )
            else:
                yield path

    # Use dict to preserve order while deduplicating
    seen: dict[Path, None] = {}
    for path in _iter_paths():
        seen.setdefault(path, None)

    return list(seen.keys())


def load_schemas(
    paths: Sequence[Path],
    cache: SchemaCache | None = None,
) -> list[SchemaMetadata]:
    """Parse every schema found in the given metadata files, in file order."""
    if cache is None:
        cache = get_global_cache()
    schemas: list[SchemaMetadata] = []
    for path in paths:
        schemas.extend(cache.get(path))
    return schemas


_global_cache: SchemaCache | None = None


def get_global_cache() -> SchemaCache:
    """Get the global metadata cache instance."""
    global _global_cache
    if _global_cache is None:
        _global_cache = SchemaCache()
    return _global_cache
