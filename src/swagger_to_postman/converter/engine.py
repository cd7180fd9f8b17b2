"""Callback-style conversion entry point.

:func:`convert` never raises. Every outcome is delivered through
``callback(error, result)``:

* ``callback(exc, None)`` -- something went wrong while converting (for
  example an unresolvable ``$ref``).
* ``callback(None, ConversionResult(result=False, reason=...))`` -- the
  input was rejected as not being an API description.
* ``callback(None, ConversionResult(result=True, output=[...]))`` -- the
  collection is in ``output[0].data``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from swagger_to_postman.converter.postman import build_collection
from swagger_to_postman.models import (
    ConversionOutput,
    ConversionResult,
    ConverterInput,
    ConverterOptions,
)
from swagger_to_postman.parser.extractor import extract_spec
from swagger_to_postman.parser.loader import DecodeFailure, decode_document

logger = logging.getLogger(__name__)

ConversionCallback = Callable[[Optional[BaseException], Optional[ConversionResult]], None]

_SUPPORTED_MAJOR_VERSIONS = ("2", "3")


def convert(
    input: ConverterInput,
    options: Union[ConverterOptions, Mapping[str, Any], None],
    callback: ConversionCallback,
) -> None:
    """Convert an API description into a Postman collection.

    Args:
        input: The document to convert.
        options: Converter options, as a model or a plain mapping
            (``{}`` for defaults).
        callback: Called exactly once with ``(error, result)``.
    """
    try:
        if not isinstance(options, ConverterOptions):
            options = ConverterOptions.model_validate(dict(options or {}))
        result = _convert(input, options)
    except Exception as exc:
        logger.debug("Conversion raised %s: %s", type(exc).__name__, exc)
        callback(exc, None)
        return
    callback(None, result)


def _rejected(reason: str) -> ConversionResult:
    logger.debug("Input rejected: %s", reason)
    return ConversionResult(result=False, reason=reason)


def validate_document(document: Any) -> tuple[Optional[str], Optional[str]]:
    """Check that *document* looks like an OpenAPI 3.x or Swagger 2.0 description.

    Returns:
        ``(version, None)`` when acceptable, otherwise ``(None, reason)``.
    """
    if not isinstance(document, dict):
        return None, "Input must be an object describing the API"

    version = document.get("openapi", document.get("swagger"))
    if version is None:
        return None, (
            "Specification must contain a semantic version number of the "
            "OAS specification ('openapi' or 'swagger' field)"
        )

    version = str(version)
    if not version.startswith(_SUPPORTED_MAJOR_VERSIONS):
        return None, f"Unsupported specification version: {version}"

    if not isinstance(document.get("info"), dict):
        return None, "Specification must contain an Info Object for the meta-data of the API"

    if not isinstance(document.get("paths"), dict):
        return None, "Specification must contain a Paths Object for the available operational paths"

    return version, None


def _convert(input: ConverterInput, options: ConverterOptions) -> ConversionResult:
    if input.type == "string":
        if not isinstance(input.data, str):
            return _rejected("Input of type 'string' must carry text")
        decoded = decode_document(input.data)
        if isinstance(decoded, DecodeFailure):
            return _rejected(decoded.message)
        document = decoded.value
    elif input.type == "json":
        document = input.data
    else:
        return _rejected(f"Invalid input type '{input.type}'. Expected 'json' or 'string'")

    version, reason = validate_document(document)
    if reason is not None:
        return _rejected(reason)

    parsed = extract_spec(document, version)
    logger.debug(
        "Parsed %s v%s: %d operation(s)",
        parsed.info.title,
        parsed.info.version,
        len(parsed.operations),
    )

    collection = build_collection(parsed, options)
    return ConversionResult(
        result=True,
        output=[ConversionOutput(type="collection", data=collection)],
    )
