"""
================================================================================
Schema Model
================================================================================

Typed representation of the declarative contract schemas used by the
validator and the payload generator.

A schema arrives as a plain nested mapping (usually loaded from a JSON or
YAML file) and is converted once by ``parse_schema`` into an immutable tree
of schema nodes. Each node type carries only the keywords that apply to it:

    StringSchema   -> enum, format
    NumberSchema   -> enum, minimum, maximum
    IntegerSchema  -> enum, minimum, maximum
    BooleanSchema  -> enum
    NullSchema     -> enum
    ObjectSchema   -> enum, properties, required
    ArraySchema    -> enum, items, min_items, max_items

Schemas that break the authoring rules (unknown type, orphaned required
name, enum member its own node rejects, ...) raise ``MalformedSchema`` here, so
validation and generation never have to second-guess the schema.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple


# ================================================================================
# Errors
# ================================================================================

class ContractError(Exception):
    """Base class for contract schema errors."""
    pass


class MalformedSchema(ContractError):
    """Raised when a schema violates the authoring rules."""

    def __init__(self, message: str, location: str = "$"):
        self.location = location
        super().__init__(f"{message} (at {location})")


class SchemaNotFound(ContractError):
    """Raised when a schema name is not present in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Schema not found: {name}")


# ================================================================================
# JSON Type Helpers
# ================================================================================

SCHEMA_TYPES = ("string", "number", "integer", "boolean", "object", "array", "null")


def json_type_name(value: Any) -> str:
    """
    Return the JSON type name of a Python value.

    ``bool`` is checked before ``int`` because it is a subclass of it.
    Values that have no JSON counterpart report their Python type name.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def matches_type(schema_type: str, value: Any) -> bool:
    """Check whether ``value`` is an instance of the JSON ``schema_type``."""
    actual = json_type_name(value)
    if schema_type == "number":
        if actual == "number":
            return math.isfinite(value)
        return actual == "integer"
    if schema_type == "integer":
        if actual == "number":
            return math.isfinite(value) and float(value).is_integer()
        return actual == "integer"
    return actual == schema_type


def json_equals(left: Any, right: Any) -> bool:
    """
    Strict JSON equality.

    Unlike ``==``, ``True`` never equals ``1``; ``1`` and ``1.0`` are equal
    because JSON has a single number type.
    """
    left_type = json_type_name(left)
    right_type = json_type_name(right)
    numeric = ("integer", "number")
    if left_type in numeric and right_type in numeric:
        return left == right
    if left_type != right_type:
        return False
    if left_type == "object":
        if set(left) != set(right):
            return False
        return all(json_equals(left[key], right[key]) for key in left)
    if left_type == "array":
        if len(left) != len(right):
            return False
        return all(json_equals(a, b) for a, b in zip(left, right))
    return left == right


# ================================================================================
# Schema Nodes
# ================================================================================

@dataclass(frozen=True)
class Schema:
    """Common base for every schema node."""
    enum: Optional[Tuple[Any, ...]] = None
    description: Optional[str] = None

    type: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        """Render the node back to its plain mapping form."""
        data: Dict[str, Any] = {"type": self.type}
        if self.description is not None:
            data["description"] = self.description
        if self.enum is not None:
            data["enum"] = list(self.enum)
        data.update(self._keywords())
        return data

    def _keywords(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class StringSchema(Schema):
    format: Optional[str] = None

    type: ClassVar[str] = "string"

    def _keywords(self) -> Dict[str, Any]:
        return {"format": self.format} if self.format else {}


@dataclass(frozen=True)
class NumberSchema(Schema):
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    type: ClassVar[str] = "number"

    def _keywords(self) -> Dict[str, Any]:
        data = {}
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.maximum is not None:
            data["maximum"] = self.maximum
        return data


@dataclass(frozen=True)
class IntegerSchema(NumberSchema):
    type: ClassVar[str] = "integer"


@dataclass(frozen=True)
class BooleanSchema(Schema):
    type: ClassVar[str] = "boolean"


@dataclass(frozen=True)
class NullSchema(Schema):
    type: ClassVar[str] = "null"


@dataclass(frozen=True)
class ObjectSchema(Schema):
    properties: Mapping[str, Schema] = field(default_factory=dict)
    required: Tuple[str, ...] = ()

    type: ClassVar[str] = "object"

    def _keywords(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.required:
            data["required"] = list(self.required)
        data["properties"] = {
            name: prop.to_dict() for name, prop in self.properties.items()
        }
        return data


@dataclass(frozen=True)
class ArraySchema(Schema):
    items: Optional[Schema] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    type: ClassVar[str] = "array"

    def _keywords(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.min_items is not None:
            data["minItems"] = self.min_items
        if self.max_items is not None:
            data["maxItems"] = self.max_items
        return data


# ================================================================================
# Parsing
# ================================================================================

def parse_schema(raw: Any, location: str = "$") -> Schema:
    """
    Convert a plain schema mapping into a typed schema tree.

    Args:
        raw: Schema mapping (e.g. the result of ``json.load``), or an
             already parsed ``Schema`` which is returned unchanged
        location: Location of this node inside the root schema, used in
                  error messages

    Returns:
        The parsed schema node

    Raises:
        MalformedSchema: If the schema breaks an authoring rule
    """
    if isinstance(raw, Schema):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedSchema(
            f"Schema must be a mapping, got {json_type_name(raw)}", location
        )

    schema_type = raw.get("type")
    if schema_type not in SCHEMA_TYPES:
        raise MalformedSchema(
            f"Schema type must be one of {', '.join(SCHEMA_TYPES)}, got {schema_type!r}",
            location,
        )

    if "format" in raw and schema_type != "string":
        raise MalformedSchema(
            f"format is only allowed on string schemas, not {schema_type}", location
        )

    description = raw.get("description")
    parser = _PARSERS[schema_type]
    schema = parser(raw, location, description)

    enum = _parse_enum(raw.get("enum"), location)
    if enum is not None:
        _check_enum_members(schema, enum, location)
        schema = replace(schema, enum=enum)

    return schema


def _parse_enum(enum: Any, location: str) -> Optional[Tuple[Any, ...]]:
    if enum is None:
        return None
    if not isinstance(enum, (list, tuple)):
        raise MalformedSchema("enum must be a list", location)
    # An empty enum places no constraint on the value
    return tuple(enum) or None


def _check_enum_members(schema: Schema, enum: Tuple[Any, ...], location: str) -> None:
    # Members must pass every check of their node, bounds and children included
    from .schema_validator import SchemaValidator

    validator = SchemaValidator()
    for index, member in enumerate(enum):
        errors = validator.collect_errors(schema, member)
        if errors:
            raise MalformedSchema(
                f"enum member {member!r} is invalid: {errors[0]}",
                f"{location}.enum[{index}]",
            )


def _parse_bound(raw: Mapping, key: str, location: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    if json_type_name(value) not in ("integer", "number") or not math.isfinite(value):
        raise MalformedSchema(f"{key} must be a finite number", location)
    return value


def _parse_string(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    from .formats import SUPPORTED_FORMATS

    fmt = raw.get("format")
    if fmt is not None and fmt not in SUPPORTED_FORMATS:
        raise MalformedSchema(
            f"Unsupported format {fmt!r}, expected one of {', '.join(SUPPORTED_FORMATS)}",
            location,
        )
    return StringSchema(description=description, format=fmt)


def _parse_number(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    minimum = _parse_bound(raw, "minimum", location)
    maximum = _parse_bound(raw, "maximum", location)
    if minimum is not None and maximum is not None and minimum > maximum:
        raise MalformedSchema(
            f"minimum {minimum} is greater than maximum {maximum}", location
        )

    if raw["type"] == "integer":
        low = math.ceil(minimum) if minimum is not None else None
        high = math.floor(maximum) if maximum is not None else None
        if low is not None and high is not None and low > high:
            raise MalformedSchema(
                f"No integer lies between {minimum} and {maximum}", location
            )
        return IntegerSchema(description=description, minimum=minimum, maximum=maximum)

    return NumberSchema(description=description, minimum=minimum, maximum=maximum)


def _parse_boolean(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    return BooleanSchema(description=description)


def _parse_null(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    return NullSchema(description=description)


def _parse_object(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    raw_properties = raw.get("properties") or {}
    if not isinstance(raw_properties, Mapping):
        raise MalformedSchema("properties must be a mapping", location)

    properties = {
        str(name): parse_schema(prop, f"{location}.properties.{name}")
        for name, prop in raw_properties.items()
    }

    raw_required = raw.get("required") or []
    if not isinstance(raw_required, (list, tuple)) or not all(
        isinstance(name, str) for name in raw_required
    ):
        raise MalformedSchema("required must be a list of property names", location)

    for name in raw_required:
        if name not in properties:
            raise MalformedSchema(
                f"Required property {name!r} is not defined in properties", location
            )

    # Preserve order, drop duplicates
    required = tuple(dict.fromkeys(raw_required))
    return ObjectSchema(description=description, properties=properties, required=required)


def _parse_array(raw: Mapping, location: str, description: Optional[str]) -> Schema:
    raw_items = raw.get("items")
    items = parse_schema(raw_items, f"{location}.items") if raw_items is not None else None

    bounds = {}
    for key in ("minItems", "maxItems"):
        value = raw.get(key)
        if value is not None and (json_type_name(value) != "integer" or value < 0):
            raise MalformedSchema(f"{key} must be a non-negative integer", location)
        bounds[key] = value

    min_items, max_items = bounds["minItems"], bounds["maxItems"]
    if min_items is not None and max_items is not None and min_items > max_items:
        raise MalformedSchema(
            f"minItems {min_items} is greater than maxItems {max_items}", location
        )

    return ArraySchema(
        description=description,
        items=items,
        min_items=min_items,
        max_items=max_items,
    )


_PARSERS = {
    "string": _parse_string,
    "number": _parse_number,
    "integer": _parse_number,
    "boolean": _parse_boolean,
    "null": _parse_null,
    "object": _parse_object,
    "array": _parse_array,
}


__all__ = [
    "ContractError",
    "MalformedSchema",
    "SchemaNotFound",
    "SCHEMA_TYPES",
    "json_type_name",
    "matches_type",
    "json_equals",
    "Schema",
    "StringSchema",
    "NumberSchema",
    "IntegerSchema",
    "BooleanSchema",
    "NullSchema",
    "ObjectSchema",
    "ArraySchema",
    "parse_schema",
]
