"""
================================================================================
Contract Testing Framework
================================================================================

Schema-driven validation and test data generation for API automation.

Modules:
    - schema_model: Typed schema nodes and schema parsing
    - formats: email / uri / date-time string predicates
    - schema_registry: Named schema store with file loading
    - schema_validator: Value validation with path-aware error reporting
    - payload_generator: Conforming payload synthesis with overrides
    - config_loader: YAML configuration management
    - logging_config: Loguru setup

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .logging_config import init_logger
from .payload_generator import PayloadGenerator, deep_merge, generate_payload
from .schema_model import ContractError, MalformedSchema, Schema, SchemaNotFound, parse_schema
from .schema_registry import SchemaRegistry
from .schema_validator import (
    SchemaValidator,
    ValidationError,
    ValidationResult,
    add_schema,
    get_default_validator,
    validate,
)

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "init_logger",
    "PayloadGenerator",
    "deep_merge",
    "generate_payload",
    "ContractError",
    "MalformedSchema",
    "Schema",
    "SchemaNotFound",
    "parse_schema",
    "SchemaRegistry",
    "SchemaValidator",
    "ValidationError",
    "ValidationResult",
    "add_schema",
    "get_default_validator",
    "validate",
]
