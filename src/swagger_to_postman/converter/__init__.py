"""OpenAPI/Swagger to Postman Collection v2.1 converter.

Sub-modules:

* :mod:`~swagger_to_postman.converter.engine` -- the callback-style
  :func:`convert` entry point and input validation.
* :mod:`~swagger_to_postman.converter.postman` -- collection assembly.
* :mod:`~swagger_to_postman.converter.schema_faker` -- example values from
  JSON Schemas.
"""

from swagger_to_postman.converter.engine import convert, validate_document
from swagger_to_postman.converter.postman import POSTMAN_SCHEMA, build_collection

__all__ = ["convert", "validate_document", "build_collection", "POSTMAN_SCHEMA"]
