"""API description parser -- load, resolve ``$ref`` pointers, and extract operations.

Typical usage::

    from swagger_to_postman.parser import load_spec, extract_spec

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    parsed = extract_spec(raw, raw["openapi"])

Sub-modules:

* :mod:`~swagger_to_postman.parser.loader` -- I/O layer (URL, file) plus the
  JSON-then-YAML decode policy.
* :mod:`~swagger_to_postman.parser.resolver` -- Recursive ``$ref`` resolution
  with circular-reference detection.
* :mod:`~swagger_to_postman.parser.extractor` -- Normalizes OpenAPI 3.x and
  Swagger 2.0 documents into a :class:`~swagger_to_postman.models.ParsedSpec`.
"""

from swagger_to_postman.parser.extractor import extract_spec
from swagger_to_postman.parser.loader import decode_document, load_spec

__all__ = ["load_spec", "decode_document", "extract_spec"]
