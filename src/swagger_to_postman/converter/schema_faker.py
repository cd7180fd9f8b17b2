"""Generate example values from JSON Schemas.

Used for request bodies, response examples, and parameter values. Two modes
are supported (see :class:`~swagger_to_postman.models.ParametersResolution`):

* ``Schema`` -- type placeholders such as ``<string>`` or ``<dateTime>``.
* ``Example`` -- declared ``example``/``default``/``enum`` values first,
  placeholders only where nothing is declared.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from swagger_to_postman.models import ParametersResolution
from swagger_to_postman.parser.resolver import CIRCULAR_REF_KEY

MAX_SCHEMA_DEPTH = 8

_FORMAT_PLACEHOLDERS = {
    "int32": "<integer>",
    "int64": "<long>",
    "float": "<float>",
    "double": "<double>",
    "binary": "<binary>",
    "byte": "<byte>",
}


def placeholder(schema_type: str, schema_format: Optional[str] = None) -> str:
    """Return a ``<type>`` placeholder for a primitive schema.

    Formats win over types, so ``integer``/``int64`` gives ``<long>`` and
    ``string``/``date-time`` gives ``<dateTime>``.
    """
    if schema_format:
        if schema_format in _FORMAT_PLACEHOLDERS:
            return _FORMAT_PLACEHOLDERS[schema_format]
        return f"<{_camel(schema_format)}>"
    return f"<{schema_type or 'string'}>"


def _camel(value: str) -> str:
    head, *rest = re.split(r"[-_ ]+", value)
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _schema_type(schema: dict[str, Any]) -> str:
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        type_value = non_null[0] if non_null else None
    if type_value:
        return str(type_value)
    if "properties" in schema or "additionalProperties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "string"


def _declared_value(schema: dict[str, Any]) -> tuple[bool, Any]:
    """Return ``(found, value)`` for the first declared example-like value."""
    if "example" in schema:
        return True, schema["example"]
    examples = schema.get("examples")
    if isinstance(examples, list) and examples:
        return True, examples[0]
    if "default" in schema:
        return True, schema["default"]
    if "const" in schema:
        return True, schema["const"]
    return False, None


def generate_example(
    schema: Any,
    resolution: ParametersResolution = ParametersResolution.SCHEMA,
    depth: int = 0,
) -> Any:
    """Build an example value for *schema*.

    Schemas must already be ``$ref``-resolved; circular placeholders left by
    the resolver produce an empty object.

    Args:
        schema: A JSON Schema dict.
        resolution: Placeholder or declared-example mode.
        depth: Current nesting depth; generation stops at
            :data:`MAX_SCHEMA_DEPTH`.

    Returns:
        A JSON-serializable example value.
    """
    if not isinstance(schema, dict) or depth > MAX_SCHEMA_DEPTH:
        return None
    if CIRCULAR_REF_KEY in schema:
        return {}

    if resolution == ParametersResolution.EXAMPLE:
        found, value = _declared_value(schema)
        if found:
            return value

    if "allOf" in schema:
        merged: dict[str, Any] = {}
        for sub in schema["allOf"]:
            part = generate_example(sub, resolution, depth + 1)
            if isinstance(part, dict):
                merged.update(part)
        return merged

    for keyword in ("oneOf", "anyOf"):
        options = schema.get(keyword)
        if isinstance(options, list) and options:
            return generate_example(options[0], resolution, depth + 1)

    enum_values = schema.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return enum_values[0]

    schema_type = _schema_type(schema)

    if schema_type == "object":
        return {
            name: generate_example(prop, resolution, depth + 1)
            for name, prop in (schema.get("properties") or {}).items()
        }

    if schema_type == "array":
        return [generate_example(schema.get("items") or {}, resolution, depth + 1)]

    return placeholder(schema_type, schema.get("format"))
