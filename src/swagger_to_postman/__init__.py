"""swagger-to-postman -- Convert OpenAPI/Swagger documents into Postman collections.

The package fetches an API description (local file or HTTP(S) URL), decodes it
as JSON or YAML, converts it into a Postman Collection v2.1 document, and
writes the result to disk.

Typical usage::

    swagger-to-postman -i https://petstore3.swagger.io/api/v3/openapi.json
    swagger-to-postman -i ./openapi.yaml -o petstore.postman.json -H "Authorization: Bearer abc"

Modules:
    app: Typer application and console-script entry point.
    headers: ``"Key: Value"`` header string parsing.
    collection: Runs the converter and writes the collection file.
    config: Converter option resolution.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"
