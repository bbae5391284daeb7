"""
================================================================================
Contract Testing Pytest Configuration
================================================================================

Shared fixtures for contract tests.

Fixtures:
    - config: Configuration loader instance
    - schema_registry: Registry preloaded with the project schemas
    - validator: SchemaValidator bound to the registry
    - generator: Seeded PayloadGenerator bound to the registry

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from ..framework import ConfigLoader, PayloadGenerator, SchemaRegistry, SchemaValidator


def pytest_configure(config):
    """Register contract-test markers."""
    config.addinivalue_line("markers", "validator: SchemaValidator behaviour")
    config.addinivalue_line("markers", "round_trip: generate-then-validate contract")


# =============================================================================
# Session-Scoped Fixtures (Shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """
    Provide configuration loader instance.

    Session-scoped to ensure configuration is loaded only once.
    """
    return ConfigLoader()


@pytest.fixture(scope="session")
def schema_dir(config: ConfigLoader) -> Path:
    """Directory holding the project contract schemas."""
    return config.get_path(
        "schemas.directory", "testsuites/contract_testing/schemas"
    )


# =============================================================================
# Function-Scoped Fixtures (Fresh for each test)
# =============================================================================

@pytest.fixture
def schema_registry(schema_dir: Path) -> SchemaRegistry:
    """Registry preloaded with every schema file in the schema directory."""
    registry = SchemaRegistry()
    names = registry.load_directory(schema_dir)
    logger.debug(f"Schema registry ready: {names}")
    return registry


@pytest.fixture
def validator(schema_registry: SchemaRegistry) -> SchemaValidator:
    """Validator resolving names through the shared registry."""
    return SchemaValidator(schema_registry)


@pytest.fixture
def generator(schema_registry: SchemaRegistry) -> PayloadGenerator:
    """Seeded generator so failures are reproducible."""
    return PayloadGenerator(seed=1234, registry=schema_registry)
