# ================================================================================
# Schema Validator
# ================================================================================
#
# This module validates arbitrary values (usually parsed API response bodies)
# against contract schemas and reports every violation as data.
#
# Key Features:
#   - Type, enum, format, required-property and bound checks
#   - Dotted/bracketed paths to each offending value (user.id, [1].id)
#   - Named schema lookup through an injectable SchemaRegistry
#   - httpx response body validation
#   - Allure integration for test reporting
#
# ================================================================================

import threading
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

import allure
import httpx
from loguru import logger

from .formats import check_format
from .schema_model import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    SchemaNotFound,
    StringSchema,
    json_equals,
    json_type_name,
    matches_type,
    parse_schema,
)
from .schema_registry import SchemaRegistry


SchemaRef = Union[str, Schema, Mapping[str, Any]]


@dataclass(frozen=True)
class ValidationError:
    """
    A single schema violation.

    Attributes:
        message: Human-readable description of the violation
        path: Accessor of the offending value, e.g. "user.id" or "[1].id";
              empty for the root value
    """
    message: str
    path: str = ""

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass
class ValidationResult:
    """
    Outcome of validating one value.

    Attributes:
        valid: Whether the value satisfies the schema
        errors: Ordered violations, or None when the value is valid
    """
    valid: bool
    errors: Optional[List[ValidationError]] = None

    @property
    def messages(self) -> List[str]:
        """Error messages only, in report order."""
        return [error.message for error in self.errors or []]

    @property
    def paths(self) -> List[str]:
        """Error paths only, in report order."""
        return [error.path for error in self.errors or []]


class SchemaValidator:
    """
    Validate values against contract schemas.

    Bad values never raise: every problem ends up in
    ``ValidationResult.errors``. Only bad schemas (MalformedSchema) and unknown
    schema names (SchemaNotFound) raise.

    Example:
        validator = SchemaValidator(registry)
        validator.add_schema("user", user_schema)

        result = validator.validate("user", response.json())
        assert result.valid, result.messages
    """

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        """
        Initialize the validator.

        Args:
            registry: Registry used to resolve schema names. A private one is
                      created when omitted.
        """
        self.registry = registry if registry is not None else SchemaRegistry()

        # boolean and null nodes need nothing beyond the type and enum checks
        self._node_handlers = {
            "string": self._validate_string,
            "number": self._validate_number,
            "integer": self._validate_number,
            "object": self._validate_object,
            "array": self._validate_array,
        }

    def add_schema(self, name: str, schema: Union[Schema, Mapping[str, Any]]) -> Schema:
        """Register a named schema in this validator's registry."""
        return self.registry.add_schema(name, schema)

    def resolve(self, schema_or_name: SchemaRef) -> Schema:
        """
        Turn a schema name, raw mapping or parsed schema into a schema node.

        Raises:
            SchemaNotFound: For an unregistered name
            MalformedSchema: For a raw mapping that breaks an authoring rule
        """
        if isinstance(schema_or_name, str):
            return self.registry.get(schema_or_name)
        return parse_schema(schema_or_name)

    def validate(self, schema_or_name: SchemaRef, value: Any) -> ValidationResult:
        """
        Validate a value against a schema.

        Args:
            schema_or_name: Registered schema name, raw schema or parsed schema
            value: Any value, including None and wrongly shaped data

        Returns:
            ValidationResult; errors is None when the value is valid
        """
        label = schema_or_name if isinstance(schema_or_name, str) else "inline schema"
        schema = self.resolve(schema_or_name)

        with allure.step(f"Validating value against {label}"):
            errors = self.collect_errors(schema, value)
            result = ValidationResult(valid=not errors, errors=errors or None)

            if result.valid:
                logger.debug(f"✅ {label}: value is valid")
            else:
                logger.warning(
                    f"❌ {label}: {len(errors)} validation error(s) - "
                    + "; ".join(str(e) for e in errors)
                )

            self._attach_validation_summary(label, result)

        return result

    def collect_errors(self, schema: Schema, value: Any) -> List[ValidationError]:
        """Run every node check against a parsed schema, without logging or reporting."""
        errors: List[ValidationError] = []
        self._validate_node(schema, value, "", None, errors)
        return errors

    def validate_and_assert(self, schema_or_name: SchemaRef, value: Any) -> None:
        """
        Validate a value and raise AssertionError if it does not conform.

        Raises:
            AssertionError: Listing every violation
        """
        result = self.validate(schema_or_name, value)
        if not result.valid:
            error_text = "\n".join(f"- {error}" for error in result.errors)
            raise AssertionError(
                f"Schema validation failed ({len(result.errors)} errors):\n{error_text}"
            )

    def validate_response(
        self,
        response: httpx.Response,
        schema_or_name: SchemaRef,
    ) -> ValidationResult:
        """
        Validate the JSON body of an HTTP response.

        A body that is not JSON is reported as a validation error.
        """
        try:
            body = response.json()
        except ValueError as e:
            schema = self.resolve(schema_or_name)
            logger.warning(f"Response body is not valid JSON: {e}")
            return ValidationResult(
                valid=False,
                errors=[ValidationError(f"Expected type {schema.type} but got invalid JSON")],
            )
        return self.validate(schema_or_name, body)

    # ----------------------------------------------------------------------
    # Traversal
    # ----------------------------------------------------------------------

    def _validate_node(
        self,
        schema: Schema,
        value: Any,
        path: str,
        property_name: Optional[str],
        errors: List[ValidationError],
    ) -> None:
        """Depth-first, pre-order check of one node and its children."""
        if not matches_type(schema.type, value):
            errors.append(ValidationError(
                f"Expected type {schema.type} but got {json_type_name(value)}", path
            ))
            return

        if schema.enum is not None and not any(
            json_equals(value, member) for member in schema.enum
        ):
            allowed = ", ".join(str(member) for member in schema.enum)
            if property_name is not None:
                message = f"Property {property_name} should be one of: {allowed}"
            else:
                message = f"Invalid enum value: {value!r}. Expected one of: {allowed}"
            errors.append(ValidationError(message, path))

        handler = self._node_handlers.get(schema.type)
        if handler is not None:
            handler(schema, value, path, errors)

    def _validate_string(
        self, schema: StringSchema, value: str, path: str, errors: List[ValidationError]
    ) -> None:
        if schema.format and not check_format(schema.format, value):
            errors.append(ValidationError(f"Invalid format: {schema.format}", path))

    def _validate_number(
        self, schema: NumberSchema, value: Any, path: str, errors: List[ValidationError]
    ) -> None:
        if schema.minimum is not None and value < schema.minimum:
            errors.append(ValidationError(
                f"Value {value} is less than minimum {schema.minimum}", path
            ))
        if schema.maximum is not None and value > schema.maximum:
            errors.append(ValidationError(
                f"Value {value} is greater than maximum {schema.maximum}", path
            ))

    def _validate_object(
        self, schema: ObjectSchema, value: Mapping, path: str, errors: List[ValidationError]
    ) -> None:
        for name in schema.required:
            if name not in value:
                errors.append(ValidationError(
                    f"Missing required property: {name}", _join_key(path, name)
                ))

        for name, prop_schema in schema.properties.items():
            if name in value:
                self._validate_node(
                    prop_schema, value[name], _join_key(path, name), name, errors
                )

    def _validate_array(
        self, schema: ArraySchema, value: list, path: str, errors: List[ValidationError]
    ) -> None:
        if schema.min_items is not None and len(value) < schema.min_items:
            errors.append(ValidationError(
                f"Expected at least {schema.min_items} items but got {len(value)}", path
            ))
        if schema.max_items is not None and len(value) > schema.max_items:
            errors.append(ValidationError(
                f"Expected at most {schema.max_items} items but got {len(value)}", path
            ))

        if schema.items is not None:
            for index, item in enumerate(value):
                self._validate_node(schema.items, item, f"{path}[{index}]", None, errors)

    # ----------------------------------------------------------------------
    # Reporting
    # ----------------------------------------------------------------------

    def _attach_validation_summary(self, label: str, result: ValidationResult) -> None:
        """Attach validation summary to Allure report."""
        summary_lines = [
            f"Schema: {label}",
            f"Result: {'✅ PASS' if result.valid else '❌ FAIL'}",
            f"Errors: {len(result.errors or [])}",
        ]

        if result.errors:
            summary_lines.extend(["", "Details:", "-" * 40])
            for error in result.errors:
                summary_lines.append(f"❌ {error.path or '<root>'} | {error.message}")

        allure.attach(
            "\n".join(summary_lines),
            name="Validation Summary",
            attachment_type=allure.attachment_type.TEXT
        )


def _join_key(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


# ================================================================================
# Convenience Functions
# ================================================================================

_default_validator: Optional[SchemaValidator] = None
_default_validator_lock = threading.Lock()


def get_default_validator() -> SchemaValidator:
    """Return the shared validator used by the module-level helpers."""
    global _default_validator
    with _default_validator_lock:
        if _default_validator is None:
            _default_validator = SchemaValidator()
    return _default_validator


def add_schema(name: str, schema: Union[Schema, Mapping[str, Any]]) -> Schema:
    """Quick helper to register a schema with the shared validator."""
    return get_default_validator().add_schema(name, schema)


def validate(schema_or_name: SchemaRef, value: Any) -> ValidationResult:
    """Quick helper to validate with the shared validator."""
    return get_default_validator().validate(schema_or_name, value)


__all__ = [
    "SchemaValidator",
    "ValidationError",
    "ValidationResult",
    "SchemaNotFound",
    "get_default_validator",
    "add_schema",
    "validate",
]
