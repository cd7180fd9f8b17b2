"""Resolve ``$ref`` JSON Reference pointers in OpenAPI and Swagger documents.

API descriptions use ``$ref`` pointers (``#/components/schemas/Pet`` in
OpenAPI 3.x, ``#/definitions/Pet`` in Swagger 2.0) to avoid repetition.  This
module performs a recursive deep-copy traversal of the document, replacing
every ``$ref`` with the object it points to.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~swagger_to_postman.exceptions.ConversionError`.

Circular references are detected via a ``seen`` set.  At the cycle point the
reference is replaced by a placeholder ``{"type": "object",
"x-circular-ref": "<ref>"}`` so that consumers never see a raw ``$ref``.

The single public function is :func:`resolve_refs`.
"""

from __future__ import annotations

import copy
from typing import Any

from swagger_to_postman.exceptions import ConversionError

CIRCULAR_REF_KEY = "x-circular-ref"


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with every internal ``$ref`` inlined.

    Keys that sit next to a ``$ref`` (allowed for ``description`` and
    ``summary`` in OpenAPI 3.1) are laid over the resolved target.

    Args:
        spec: The decoded API description.

    Returns:
        A **new** dictionary with all ``$ref`` pointers replaced.

    Raises:
        ConversionError: If a ``$ref`` is external or points to a path that
            does not exist in the document.

    Example::

        resolved = resolve_refs(raw)
        # resolved["paths"]["/pets"]["get"]["responses"]["200"] now holds the
        # inlined schema instead of a $ref pointer.
    """
    root = copy.deepcopy(spec)
    return _deep_resolve(root, root, frozenset())


def _lookup(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single JSON Pointer ``ref`` from *root*.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``).
    """
    if not ref.startswith("#/"):
        raise ConversionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            raise ConversionError(
                f"Cannot resolve $ref '{ref}': '{segment}' not found"
            )
    return current


def _deep_resolve(obj: Any, root: dict[str, Any], seen: frozenset[str]) -> Any:
    """Recursively resolve all ``$ref`` pointers within *obj*.

    *seen* holds the references on the current resolution stack; sibling
    branches get their own copy so repeated (non-circular) use of the same
    schema is inlined every time.
    """
    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    if not isinstance(obj, dict):
        return obj

    ref = obj.get("$ref")
    if not isinstance(ref, str):
        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if ref in seen:
        return {"type": "object", CIRCULAR_REF_KEY: ref}

    target = _deep_resolve(_lookup(ref, root), root, seen | {ref})
    siblings = {k: v for k, v in obj.items() if k != "$ref"}
    if siblings and isinstance(target, dict):
        target = {**target, **_deep_resolve(siblings, root, seen)}
    return target
