"""
================================================================================
Schema Registry
================================================================================

Named store for contract schemas.

A registry is an ordinary object owned by whoever needs it (a fixture, a
validator, a generator); there is no hidden process-wide state. Schemas are
parsed on registration, so a broken schema fails at setup time rather than in
the middle of a test.

Features:
    - Thread-safe registration and lookup
    - Loading of *.json / *.yaml / *.yml schema files
    - Snapshot access to every registered schema

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from loguru import logger

from .schema_model import MalformedSchema, Schema, SchemaNotFound, parse_schema


SCHEMA_FILE_SUFFIXES = (".json", ".yaml", ".yml")


class SchemaRegistry:
    """
    Thread-safe name -> schema map.

    Usage:
        >>> registry = SchemaRegistry()
        >>> registry.add_schema("user", {"type": "object", "properties": {}})
        >>> registry.get("user").type
        'object'
        >>> registry.load_directory("testsuites/contract_testing/schemas")
        ['employee', 'user']
    """

    def __init__(self, schemas: Optional[Mapping[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            schemas: Optional initial name -> schema mapping
        """
        self._lock = threading.Lock()
        self._schemas: Dict[str, Schema] = {}

        for name, schema in (schemas or {}).items():
            self.add_schema(name, schema)

    def add_schema(self, name: str, schema: Union[Schema, Mapping[str, Any]]) -> Schema:
        """
        Register a schema under a name.

        Registering an existing name replaces the previous schema.

        Args:
            name: Lookup name
            schema: Raw schema mapping or parsed schema

        Returns:
            The parsed schema

        Raises:
            MalformedSchema: If the schema breaks an authoring rule
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Schema name must be a non-empty string")

        parsed = parse_schema(schema, location=name)

        with self._lock:
            if name in self._schemas:
                logger.warning(f"Replacing registered schema: {name}")
            self._schemas[name] = parsed

        logger.debug(f"Registered schema '{name}' (type: {parsed.type})")
        return parsed

    def get(self, name: str) -> Schema:
        """
        Look up a schema by name.

        Raises:
            SchemaNotFound: If no schema is registered under the name
        """
        with self._lock:
            schema = self._schemas.get(name)
        if schema is None:
            raise SchemaNotFound(name)
        return schema

    def names(self) -> List[str]:
        """Return registered schema names in sorted order."""
        with self._lock:
            return sorted(self._schemas)

    def schemas(self) -> Dict[str, Schema]:
        """Return a snapshot of every registered schema."""
        with self._lock:
            return dict(self._schemas)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)

    # ----------------------------------------------------------------------
    # File loading
    # ----------------------------------------------------------------------

    def load_file(self, path: Union[str, Path], name: Optional[str] = None) -> Schema:
        """
        Load and register a single schema file.

        Args:
            path: Path to a .json, .yaml or .yml file
            name: Registration name; defaults to the file name without its
                  suffix and a trailing ".schema" (user.schema.json -> user)

        Returns:
            The parsed schema
        """
        path = Path(path)
        name = name or schema_name_for(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix == ".json":
                    raw = json.load(f)
                else:
                    raw = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise MalformedSchema(f"Invalid schema document {path.name}: {e}", name) from e

        return self.add_schema(name, raw)

    def load_directory(self, directory: Union[str, Path]) -> List[str]:
        """
        Load every schema file found directly in a directory.

        Args:
            directory: Directory containing schema files

        Returns:
            Names of the loaded schemas, sorted

        Raises:
            SchemaNotFound: If the directory does not exist
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise SchemaNotFound(str(directory))

        loaded = []
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix in SCHEMA_FILE_SUFFIXES:
                self.load_file(path)
                loaded.append(schema_name_for(path))

        logger.info(f"Loaded {len(loaded)} schemas from {directory}")
        return sorted(loaded)


def schema_name_for(path: Path) -> str:
    """Derive the registration name of a schema file."""
    stem = path.stem
    if stem.endswith(".schema"):
        stem = stem[: -len(".schema")]
    return stem


__all__ = [
    "SchemaRegistry",
    "SCHEMA_FILE_SUFFIXES",
    "schema_name_for",
]
