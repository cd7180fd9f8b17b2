"""Extract operations, parameters, and security schemes from API descriptions.

This module walks a ``$ref``-resolved OpenAPI 3.x or Swagger 2.0 document and
builds a :class:`~swagger_to_postman.models.ParsedSpec`, the single
normalized shape the collection builder consumes.

The public entry point is :func:`extract_spec`.  The two document families
differ in a handful of places, handled by private helpers:

* **servers** -- ``servers[]`` in 3.x; ``schemes`` + ``host`` + ``basePath``
  in 2.0.
* **request bodies** -- ``requestBody.content`` in 3.x; ``in: body`` and
  ``in: formData`` parameters plus ``consumes`` in 2.0.
* **responses** -- ``content`` maps in 3.x; ``schema`` + ``examples`` plus
  ``produces`` in 2.0.
* **security schemes** -- ``components/securitySchemes`` in 3.x;
  ``securityDefinitions`` in 2.0.

Parameter merging follows both specifications: path-level parameters provide
defaults, and operation-level parameters override them when they share the
same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any

from swagger_to_postman.models import (
    APIInfo,
    APIOperation,
    APIParameter,
    HTTPMethod,
    ParameterLocation,
    ParsedSpec,
    RequestBodyInfo,
    ResponseInfo,
    SecurityScheme,
    ServerInfo,
    TagInfo,
)
from swagger_to_postman.parser.resolver import resolve_refs

# Path-item keys in the order requests are emitted
_HTTP_METHODS = tuple(m.value for m in HTTPMethod)

# Swagger 2.0 parameter keys that describe the value's schema
_SWAGGER2_SCHEMA_KEYS = (
    "type",
    "format",
    "items",
    "enum",
    "default",
    "minimum",
    "maximum",
    "pattern",
    "minLength",
    "maxLength",
)

_FORM_URLENCODED = "application/x-www-form-urlencoded"
_MULTIPART = "multipart/form-data"
_JSON = "application/json"


def is_swagger2(spec_version: str) -> bool:
    """Return True for Swagger 2.x version strings."""
    return spec_version.startswith("2")


def extract_spec(raw_spec: dict[str, Any], spec_version: str) -> ParsedSpec:
    """Extract a :class:`~swagger_to_postman.models.ParsedSpec` from a raw document.

    Resolves all ``$ref`` pointers via
    :func:`~swagger_to_postman.parser.resolver.resolve_refs` first.

    Args:
        raw_spec: The decoded API description.
        spec_version: The ``openapi`` or ``swagger`` version string.

    Returns:
        The normalized spec.
    """
    spec = resolve_refs(raw_spec)
    swagger2 = is_swagger2(spec_version)
    return ParsedSpec(
        info=_extract_info(spec),
        servers=_extract_swagger2_servers(spec) if swagger2 else _extract_servers(spec),
        operations=_extract_operations(spec, swagger2),
        security_schemes=_extract_security_schemes(spec, swagger2),
        tags=_extract_tags(spec),
        spec_version=spec_version,
    )


def _extract_info(spec: dict[str, Any]) -> APIInfo:
    info = spec.get("info") or {}
    return APIInfo(
        title=str(info.get("title") or "Untitled API"),
        version=str(info.get("version") or "0.0.0"),
        description=info.get("description"),
    )


def _extract_servers(spec: dict[str, Any]) -> list[ServerInfo]:
    """Extract entries from the OpenAPI 3.x ``servers`` array."""
    return [
        ServerInfo(
            url=server.get("url", "/"),
            description=server.get("description"),
            variables=server.get("variables") or {},
        )
        for server in spec.get("servers") or []
        if isinstance(server, dict)
    ]


def _extract_swagger2_servers(spec: dict[str, Any]) -> list[ServerInfo]:
    """Build server entries from Swagger 2.0 ``schemes``, ``host`` and ``basePath``.

    Without a ``host`` the URL is just the base path, which Postman treats
    as relative to whatever the user puts in ``baseUrl``.
    """
    host = spec.get("host")
    base_path = (spec.get("basePath") or "").rstrip("/")
    if not host:
        return [ServerInfo(url=base_path)] if base_path else []

    schemes = spec.get("schemes") or ["https"]
    return [ServerInfo(url=f"{scheme}://{host}{base_path}") for scheme in schemes]


def _extract_tags(spec: dict[str, Any]) -> list[TagInfo]:
    return [
        TagInfo(name=tag["name"], description=tag.get("description"))
        for tag in spec.get("tags") or []
        if isinstance(tag, dict) and tag.get("name")
    ]


def _extract_operations(spec: dict[str, Any], swagger2: bool) -> list[APIOperation]:
    """Extract all operations from the ``paths`` object.

    Security requirements follow the override rule of both specs: an
    operation-level ``security`` array replaces the global one and an
    explicit empty array means "no auth required".
    """
    paths = spec.get("paths") or {}
    global_security = spec.get("security") or []
    global_consumes = spec.get("consumes") or [_JSON]
    global_produces = spec.get("produces") or [_JSON]
    operations: list[APIOperation] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters") or []

        for method_str in _HTTP_METHODS:
            operation = path_item.get(method_str)
            if not isinstance(operation, dict):
                continue

            merged_params = _merge_parameters(path_params, operation.get("parameters") or [])

            if swagger2:
                request_body = _extract_swagger2_body(
                    merged_params, operation.get("consumes") or global_consumes
                )
                responses = _extract_swagger2_responses(
                    operation.get("responses") or {},
                    operation.get("produces") or global_produces,
                )
            else:
                request_body = _extract_request_body(operation.get("requestBody"))
                responses = _extract_responses(operation.get("responses") or {})

            op_security = operation.get("security")
            security = op_security if op_security is not None else global_security

            operations.append(
                APIOperation(
                    path=path,
                    method=HTTPMethod(method_str),
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    tags=operation.get("tags") or [],
                    parameters=_extract_parameters(merged_params),
                    request_body=request_body,
                    responses=responses,
                    security=security,
                    deprecated=bool(operation.get("deprecated")),
                )
            )

    return operations


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters win over path-level ones with the same
    ``name`` and ``in``.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params if isinstance(p, dict)}
    merged = [
        p
        for p in path_params
        if isinstance(p, dict) and (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(p for p in op_params if isinstance(p, dict))
    return merged


def _parameter_schema(param: dict[str, Any]) -> dict[str, Any]:
    """Return the schema of a parameter.

    OpenAPI 3.x nests it under ``schema``; Swagger 2.0 puts the schema keys
    on the parameter itself.
    """
    schema = param.get("schema")
    if isinstance(schema, dict):
        return schema
    return {key: param[key] for key in _SWAGGER2_SCHEMA_KEYS if key in param}


def _extract_parameters(params_list: list[dict[str, Any]]) -> list[APIParameter]:
    """Convert raw parameter dicts into :class:`~swagger_to_postman.models.APIParameter` models.

    ``body`` and ``formData`` parameters (Swagger 2.0) are handled by
    :func:`_extract_swagger2_body`; other unrecognised locations are
    skipped.  Path parameters are always required.
    """
    parameters: list[APIParameter] = []

    for param in params_list:
        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            continue

        schema = _parameter_schema(param)
        required = bool(param.get("required", False)) or location == ParameterLocation.PATH

        parameters.append(
            APIParameter(
                name=param.get("name", ""),
                location=location,
                required=required,
                description=param.get("description"),
                schema_type=_extract_schema_type(schema),
                schema_format=schema.get("format"),
                default=schema.get("default"),
                enum_values=schema.get("enum"),
                example=param.get("example", param.get("x-example")),
                deprecated=bool(param.get("deprecated")),
                schema=schema or None,
            )
        )

    return parameters


def _extract_schema_type(schema: Any) -> str:
    """Extract the type string from a schema object.

    OpenAPI 3.1 type arrays (``["string", "null"]``) yield the first
    non-null entry.  Falls back to ``"string"``.
    """
    if not isinstance(schema, dict):
        return "string"

    type_value = schema.get("type", "string")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return non_null[0] if non_null else "string"
    return str(type_value)


def _first_media_example(media: dict[str, Any]) -> Any:
    """Pick ``example`` or the first ``examples[*].value`` of a media type object."""
    if "example" in media:
        return media["example"]
    for example in (media.get("examples") or {}).values():
        if isinstance(example, dict) and "value" in example:
            return example["value"]
    return None


def _extract_request_body(body: dict[str, Any] | None) -> RequestBodyInfo | None:
    """Extract an OpenAPI 3.x ``requestBody``.

    The schema and example come from the first content type that declares
    a schema.
    """
    if not isinstance(body, dict):
        return None

    content = body.get("content") or {}
    schema: dict[str, Any] | None = None
    example: Any = None
    for media in content.values():
        if isinstance(media, dict) and "schema" in media:
            schema = media["schema"]
            example = _first_media_example(media)
            break

    return RequestBodyInfo(
        required=bool(body.get("required")),
        description=body.get("description"),
        content_types=list(content.keys()),
        schema=schema,
        example=example,
    )


def _extract_swagger2_body(
    params: list[dict[str, Any]], consumes: list[str]
) -> RequestBodyInfo | None:
    """Build a request body from Swagger 2.0 ``body`` or ``formData`` parameters."""
    body_param = next((p for p in params if p.get("in") == "body"), None)
    if body_param is not None:
        return RequestBodyInfo(
            required=bool(body_param.get("required")),
            description=body_param.get("description"),
            content_types=list(consumes),
            schema=body_param.get("schema"),
            example=body_param.get("x-example"),
        )

    form_params = [p for p in params if p.get("in") == "formData"]
    if not form_params:
        return None

    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in form_params:
        prop = _parameter_schema(param)
        if param.get("description"):
            prop["description"] = param["description"]
        properties[param.get("name", "")] = prop
        if param.get("required"):
            required.append(param.get("name", ""))

    has_file = any(p.get("type") == "file" for p in form_params)
    if has_file or _MULTIPART in consumes:
        content_type = _MULTIPART
    else:
        content_type = _FORM_URLENCODED

    return RequestBodyInfo(
        required=bool(required),
        content_types=[content_type],
        schema={"type": "object", "properties": properties, "required": required},
    )


def _extract_responses(responses: dict[str, Any]) -> list[ResponseInfo]:
    """Extract OpenAPI 3.x response metadata for every declared status code."""
    result: list[ResponseInfo] = []

    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue

        content = response.get("content") or {}
        schema: dict[str, Any] | None = None
        example: Any = None
        for media in content.values():
            if isinstance(media, dict) and "schema" in media:
                schema = media["schema"]
                example = _first_media_example(media)
                break

        result.append(
            ResponseInfo(
                status_code=str(status_code),
                description=response.get("description"),
                content_types=list(content.keys()),
                schema=schema,
                example=example,
            )
        )

    return result


def _extract_swagger2_responses(
    responses: dict[str, Any], produces: list[str]
) -> list[ResponseInfo]:
    """Extract Swagger 2.0 responses, using ``produces`` as their content types."""
    result: list[ResponseInfo] = []

    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue

        schema = response.get("schema")
        examples = response.get("examples") or {}
        example = next(iter(examples.values()), None) if isinstance(examples, dict) else None

        result.append(
            ResponseInfo(
                status_code=str(status_code),
                description=response.get("description"),
                content_types=list(produces) if schema is not None else [],
                schema=schema,
                example=example,
            )
        )

    return result


def _extract_security_schemes(
    spec: dict[str, Any], swagger2: bool
) -> dict[str, SecurityScheme]:
    """Extract security scheme definitions.

    Swagger 2.0 ``basic`` schemes are normalized to ``http``/``basic`` so
    the collection builder only has to understand the 3.x vocabulary.
    """
    if swagger2:
        schemes_raw = spec.get("securityDefinitions") or {}
    else:
        schemes_raw = (spec.get("components") or {}).get("securitySchemes") or {}

    schemes: dict[str, SecurityScheme] = {}
    for name, data in schemes_raw.items():
        if not isinstance(data, dict):
            continue

        scheme_type = data.get("type", "")
        scheme = data.get("scheme")
        if scheme_type == "basic":
            scheme_type, scheme = "http", "basic"

        flows = data.get("flows")
        if swagger2 and scheme_type == "oauth2":
            flows = {
                data.get("flow", "implicit"): {
                    "authorizationUrl": data.get("authorizationUrl"),
                    "tokenUrl": data.get("tokenUrl"),
                    "scopes": data.get("scopes") or {},
                }
            }

        schemes[name] = SecurityScheme(
            name=name,
            type=scheme_type,
            description=data.get("description"),
            in_name=data.get("name"),
            in_location=data.get("in"),
            scheme=scheme.lower() if isinstance(scheme, str) else None,
            bearer_format=data.get("bearerFormat"),
            flows=flows,
            openid_connect_url=data.get("openIdConnectUrl"),
        )

    return schemes
