"""
================================================================================
Payload Generator
================================================================================

This module synthesizes request payloads that satisfy a contract schema.
Generated payloads are meant to be sent as test input, or to be fed straight
back into the SchemaValidator.

Features:
- Schema-driven generation for every schema type
- Enum-aware, format-aware strings (email, uri, date-time)
- Guaranteed coverage of required properties
- Deep-merged caller overrides
- Reproducible output with a seed

================================================================================
"""

import copy
import math
import random
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger

from .schema_model import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
    parse_schema,
)
from .schema_registry import SchemaRegistry


# ================================================================================
# Override Merging
# ================================================================================

def deep_merge(generated: Any, overrides: Any) -> Any:
    """
    Merge overrides onto a generated value.

    Mappings merge key by key, recursively. Any other override value, lists
    included, replaces the generated value wholesale. Keys that only exist in
    the overrides are carried through.
    """
    if isinstance(generated, dict) and isinstance(overrides, Mapping):
        merged = dict(generated)
        for key, value in overrides.items():
            merged[key] = deep_merge(merged[key], value) if key in merged else copy.deepcopy(value)
        return merged
    return copy.deepcopy(overrides)


# ================================================================================
# Payload Generator
# ================================================================================

class PayloadGenerator:
    """
    Generate payloads that conform to a contract schema.

    Usage:
        generator = PayloadGenerator(seed=42)
        payload = generator.generate(user_schema, {"username": "testuser123"})

        # Named schemas resolve through the registry
        generator = PayloadGenerator(registry=registry)
        users = generator.generate_many("user", 5)
    """

    # Prefix for all auto-generated strings
    PREFIX = "autotest_"
    EMAIL_DOMAINS = ["example.com", "test.org", "demo.net", "sample.io"]

    def __init__(
        self,
        seed: Optional[int] = None,
        registry: Optional[SchemaRegistry] = None,
        array_min_items: int = 1,
        array_max_items: int = 3,
        number_minimum: float = 0,
        number_maximum: float = 1000,
    ):
        """
        Initialize the generator.

        Args:
            seed: Random seed for reproducible payloads
            registry: Registry used to resolve schema names
            array_min_items: Default minimum array length
            array_max_items: Default maximum array length
            number_minimum: Default lower bound for numbers
            number_maximum: Default upper bound for numbers
        """
        if array_min_items > array_max_items:
            raise ValueError("array_min_items must not exceed array_max_items")
        if number_minimum > number_maximum:
            raise ValueError("number_minimum must not exceed number_maximum")

        self._random = random.Random(seed)
        self.registry = registry
        self.array_min_items = array_min_items
        self.array_max_items = array_max_items
        self.number_minimum = number_minimum
        self.number_maximum = number_maximum

        self._generators = {
            "string": self._generate_string,
            "number": self._generate_number,
            "integer": self._generate_number,
            "boolean": self._generate_boolean,
            "null": self._generate_null,
            "object": self._generate_object,
            "array": self._generate_array,
        }

    @classmethod
    def from_config(cls, config, registry: Optional[SchemaRegistry] = None) -> "PayloadGenerator":
        """
        Build a generator from the ``generator`` configuration section.

        Args:
            config: Object with a ``get(key, default)`` method (ConfigLoader)
            registry: Registry used to resolve schema names
        """
        seed = config.get("generator.seed")
        return cls(
            seed=int(seed) if seed is not None else None,
            registry=registry,
            array_min_items=config.get("generator.array_min_items", 1),
            array_max_items=config.get("generator.array_max_items", 3),
            number_minimum=config.get("generator.number_minimum", 0.0),
            number_maximum=config.get("generator.number_maximum", 1000.0),
        )

    def generate(
        self,
        schema: Union[str, Schema, Mapping[str, Any]],
        overrides: Optional[Any] = None,
    ) -> Any:
        """
        Generate a payload for a schema.

        Args:
            schema: Raw schema, parsed schema, or a name registered in the
                    generator's registry
            overrides: Partial value merged over the generated payload; it
                       takes precedence at every path it covers

        Returns:
            A plain value (dict/list/scalar) conforming to the schema
        """
        node = self._resolve(schema)
        payload = self._generate_value(node)

        if overrides is not None and overrides != {}:
            payload = deep_merge(payload, overrides)

        logger.debug(f"Generated {node.type} payload: {payload}")
        return payload

    def generate_many(
        self,
        schema: Union[str, Schema, Mapping[str, Any]],
        count: int,
        overrides: Optional[Any] = None,
    ) -> List[Any]:
        """Generate ``count`` independent payloads for the same schema."""
        node = self._resolve(schema)
        return [self.generate(node, overrides) for _ in range(count)]

    def _resolve(self, schema: Union[str, Schema, Mapping[str, Any]]) -> Schema:
        if isinstance(schema, str):
            if self.registry is None:
                raise ValueError(
                    f"Cannot resolve schema name '{schema}' without a registry"
                )
            return self.registry.get(schema)
        return parse_schema(schema)

    # ----------------------------------------------------------------------
    # Value generation
    # ----------------------------------------------------------------------

    def _generate_value(self, schema: Schema) -> Any:
        """Generate one value; enum members always win over synthesis."""
        if schema.enum is not None:
            return copy.deepcopy(self._random_choice(list(schema.enum)))
        return self._generators[schema.type](schema)

    def _generate_string(self, schema: StringSchema) -> str:
        if schema.format == "email":
            return self._random_email()
        if schema.format == "uri":
            return self._random_url()
        if schema.format == "date-time":
            return self._random_timestamp()
        return f"{self.PREFIX}{self._random_string(8)}"

    def _generate_number(self, schema: NumberSchema) -> Union[int, float]:
        minimum = schema.minimum if schema.minimum is not None else self.number_minimum
        maximum = schema.maximum if schema.maximum is not None else self.number_maximum
        # A bound from the schema may sit outside the configured default range
        if minimum > maximum:
            if schema.minimum is not None:
                maximum = minimum + (self.number_maximum - self.number_minimum)
            else:
                minimum = maximum - (self.number_maximum - self.number_minimum)

        if schema.type == "integer":
            low, high = math.ceil(minimum), math.floor(maximum)
            # A narrow default range may hold no integer; widen on the unbounded side
            if low > high:
                if schema.maximum is None:
                    high = low
                else:
                    low = high
            return self._random.randint(low, high)

        value = round(self._random.uniform(minimum, maximum), 2)
        return min(max(value, minimum), maximum)

    def _generate_boolean(self, schema: Schema) -> bool:
        return self._random.choice([True, False])

    def _generate_null(self, schema: Schema) -> None:
        return None

    def _generate_object(self, schema: ObjectSchema) -> Dict[str, Any]:
        payload = {
            name: self._generate_value(prop_schema)
            for name, prop_schema in schema.properties.items()
        }

        for name in schema.required:
            if name not in payload:
                payload[name] = self._generate_value(schema.properties[name])

        return payload

    def _generate_array(self, schema: ArraySchema) -> List[Any]:
        min_items = schema.min_items if schema.min_items is not None else self.array_min_items
        max_items = schema.max_items if schema.max_items is not None else max(
            self.array_max_items, min_items
        )
        min_items = min(min_items, max_items)

        count = self._random.randint(min_items, max_items)
        if schema.items is None:
            return [self._random_string(6) for _ in range(count)]
        return [self._generate_value(schema.items) for _ in range(count)]

    # ----------------------------------------------------------------------
    # Random helpers
    # ----------------------------------------------------------------------

    def _random_string(self, length: int = 10) -> str:
        """Generate random alphanumeric string."""
        chars = string.ascii_lowercase + string.digits
        return ''.join(self._random.choice(chars) for _ in range(length))

    def _random_email(self) -> str:
        """Generate random email address."""
        return f"{self._random_string(8)}@{self._random_choice(self.EMAIL_DOMAINS)}"

    def _random_url(self, path: str = "") -> str:
        """Generate random URL."""
        domain = self._random_string(8)
        return f"https://{domain}.example.com/{path}"

    def _random_timestamp(self) -> str:
        """Generate an RFC 3339 UTC timestamp within the last 30 days."""
        # Anchored to the start of the day so a seed reproduces the same value
        today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        offset = timedelta(milliseconds=self._random.randint(0, 30 * 24 * 3600 * 1000))
        moment = today - offset
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

    def _random_choice(self, options: List[Any]) -> Any:
        """Select random item from list."""
        return self._random.choice(options)


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_payload(
    schema: Union[Schema, Mapping[str, Any]],
    overrides: Optional[Any] = None,
) -> Any:
    """Quick helper to generate a payload from a schema."""
    return PayloadGenerator().generate(schema, overrides)


__all__ = [
    "PayloadGenerator",
    "deep_merge",
    "generate_payload",
]
