#!/usr/bin/env python3
"""
Command line tools for prism APIs.

Usage:
    python -m prism_client <command> [options]

Commands:
    codegen     Generate TypeScript types from schema metadata
    schemas     Fetch schema metadata and print or save a snapshot
    health      Show API health and metadata cache status

Examples:
    python -m prism_client codegen --url http://localhost:8000 --output src/gen
    python -m prism_client codegen snapshot.yaml --schema public
    python -m prism_client schemas --output snapshot.yaml
    python -m prism_client health
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from prism_client.type_codegen.main import DEFAULT_API_URL


def _url_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--url",
        default=os.environ.get("PRISM_API_URL", DEFAULT_API_URL),
        help="Base URL of the prism API (default: $PRISM_API_URL or %(default)s)",
    )


def _plain(record: Any) -> Any:
    """Convert metadata records to JSON/YAML friendly builtins."""
    return json.loads(json.dumps(asdict(record)))


def cmd_codegen(args: list[str]) -> int:
    """Generate TypeScript types."""
    from prism_client.type_codegen.main import main as codegen_main

    try:
        codegen_main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, str):
            print(e.code, file=sys.stderr)
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1


def cmd_schemas(args: list[str]) -> int:
    """Fetch schema metadata."""
    from prism_client.client import BaseClient, MetadataClient
    from prism_client.shared import PrismError

    parser = argparse.ArgumentParser(description="Fetch schema metadata")
    _url_argument(parser)
    parser.add_argument(
        "--schema",
        action="append",
        dest="schemas",
        default=None,
        help="Only include the named schema (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["summary", "yaml", "json"],
        default="summary",
        help="Output format when printing",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a metadata snapshot (YAML or JSON by suffix) usable by 'codegen'",
    )
    parsed = parser.parse_args(args)

    try:
        with BaseClient(parsed.url) as client:
            schemas = MetadataClient(client).get_schemas()
    except PrismError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.schemas:
        schemas = [schema for schema in schemas if schema.name in parsed.schemas]

    documents = [_plain(schema) for schema in schemas]

    if parsed.output is not None:
        parsed.output.parent.mkdir(parents=True, exist_ok=True)
        if parsed.output.suffix.lower() == ".json":
            content = json.dumps({"schemas": documents}, indent=2)
        else:
            content = yaml.safe_dump({"schemas": documents}, sort_keys=False)
        parsed.output.write_text(content, encoding="utf-8")
        print(f"Saved {len(documents)} schema(s) -> {parsed.output}")
        return 0

    if parsed.format == "json":
        print(json.dumps(documents, indent=2))
    elif parsed.format == "yaml":
        print(yaml.safe_dump(documents, sort_keys=False))
    else:
        for schema in schemas:
            print(
                f"{schema.name:20} tables={len(schema.tables)} views={len(schema.views)} "
                f"enums={len(schema.enums)} functions={len(schema.functions)} "
                f"procedures={len(schema.procedures)} triggers={len(schema.triggers)}"
            )
    return 0


def cmd_health(args: list[str]) -> int:
    """Show API health."""
    from prism_client.client import BaseClient, MetadataClient
    from prism_client.shared import PrismError

    parser = argparse.ArgumentParser(description="Show API health and cache status")
    _url_argument(parser)
    parsed = parser.parse_args(args)

    try:
        with BaseClient(parsed.url) as client:
            metadata = MetadataClient(client)
            health = metadata.get_health()
            cache = metadata.get_cache_status()
    except PrismError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Status:     {health.status}")
    print(f"Version:    {health.version}")
    print(f"Uptime:     {health.uptime:.0f}s")
    print(f"Database:   {'connected' if health.database_connected else 'disconnected'}")
    print(f"Cache:      {cache.total_items} item(s), last updated {cache.last_updated or 'never'}")
    return 0 if health.database_connected else 1


COMMANDS = {
    "codegen": (cmd_codegen, "Generate TypeScript types from schema metadata"),
    "schemas": (cmd_schemas, "Fetch schema metadata and print or save a snapshot"),
    "health": (cmd_health, "Show API health and metadata cache status"),
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = argv[0]
    args = argv[1:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
