"""Assemble a Postman Collection v2.1 document from a :class:`ParsedSpec`.

Every :class:`~swagger_to_postman.models.APIOperation` becomes one request
item. Items are grouped into folders either by URL path segment or by the
operation's first tag, depending on
:attr:`~swagger_to_postman.models.ConverterOptions.folder_strategy`.

Request URLs are relative to a ``{{baseUrl}}`` collection variable seeded
from the first declared server, so switching environments only means
editing one variable in Postman.
"""

from __future__ import annotations

import copy
import datetime
import json
import re
import uuid
from http import HTTPStatus
from typing import Any

from swagger_to_postman.converter.schema_faker import generate_example, placeholder
from swagger_to_postman.models import (
    APIOperation,
    APIParameter,
    ConverterOptions,
    FolderStrategy,
    IndentCharacter,
    ParameterLocation,
    ParametersResolution,
    ParsedSpec,
    RequestBodyInfo,
    RequestNameSource,
    ResponseInfo,
    SecurityScheme,
)

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
BASE_URL_VARIABLE = "baseUrl"

_PATH_PARAM = re.compile(r"\{([^}]+)\}")
_SERVER_VARIABLE = re.compile(r"\{([^}]+)\}")


def build_collection(spec: ParsedSpec, options: ConverterOptions) -> dict[str, Any]:
    """Build the collection dict for *spec*.

    Args:
        spec: The normalized API description.
        options: Converter options controlling naming, folders, and examples.

    Returns:
        A JSON-serializable Postman Collection v2.1 document.
    """
    operations = [
        op for op in spec.operations if options.include_deprecated or not op.deprecated
    ]
    items = [(op, _request_item(op, spec, options)) for op in operations]

    if options.folder_strategy == FolderStrategy.TAGS:
        top_level = _group_by_tag(items, spec)
    else:
        top_level = _group_by_path(items)

    if options.collapse_folders:
        top_level = collapse_single_child_folders(top_level)

    info: dict[str, Any] = {
        "_postman_id": str(uuid.uuid4()),
        "name": spec.info.title,
        "schema": POSTMAN_SCHEMA,
    }
    if spec.info.description:
        info["description"] = spec.info.description

    return {
        "info": info,
        "item": top_level,
        "variable": [
            {"key": BASE_URL_VARIABLE, "value": base_url(spec), "type": "string"}
        ],
    }


def base_url(spec: ParsedSpec) -> str:
    """Return the first server URL with server variables set to their defaults."""
    if not spec.servers:
        return "/"
    server = spec.servers[0]

    def _default(match: re.Match[str]) -> str:
        variable = server.variables.get(match.group(1)) or {}
        return str(variable.get("default", match.group(0)))

    url = _SERVER_VARIABLE.sub(_default, server.url).rstrip("/")
    return url or "/"


# --- Folders ---


def _new_node() -> dict[str, Any]:
    return {"requests": [], "children": {}}


def _group_by_path(items: list[tuple[APIOperation, dict[str, Any]]]) -> list[dict[str, Any]]:
    """Nest each request under one folder per URL path segment."""
    tree = _new_node()
    for op, item in items:
        node = tree
        for segment in (s for s in op.path.split("/") if s):
            node = node["children"].setdefault(segment, _new_node())
        node["requests"].append(item)
    return _tree_to_items(tree)


def _tree_to_items(tree: dict[str, Any]) -> list[dict[str, Any]]:
    """Convert a folder tree into Postman items: requests first, then folders."""
    items: list[dict[str, Any]] = list(tree["requests"])
    for name, subtree in tree["children"].items():
        items.append({"name": name, "item": _tree_to_items(subtree)})
    return items


def _group_by_tag(
    items: list[tuple[APIOperation, dict[str, Any]]], spec: ParsedSpec
) -> list[dict[str, Any]]:
    """Group requests into one folder per first tag; untagged ones stay at the root.

    Declared tags come first in declaration order, then tags that are only
    used on operations, in order of first use.
    """
    descriptions = {tag.name: tag.description for tag in spec.tags}
    folders: dict[str, list[dict[str, Any]]] = {tag.name: [] for tag in spec.tags}
    untagged: list[dict[str, Any]] = []

    for op, item in items:
        if op.tags:
            folders.setdefault(op.tags[0], []).append(item)
        else:
            untagged.append(item)

    result: list[dict[str, Any]] = []
    for name, children in folders.items():
        if not children:
            continue
        folder: dict[str, Any] = {"name": name, "item": children}
        if descriptions.get(name):
            folder["description"] = descriptions[name]
        result.append(folder)
    return result + untagged


def _is_folder(item: dict[str, Any]) -> bool:
    return "item" in item and "request" not in item


def collapse_single_child_folders(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Merge a folder with its only child when that child is also a folder.

    ``pets`` > ``{petId}`` becomes a single ``pets/{petId}`` folder.
    """
    result = []
    for item in items:
        if _is_folder(item):
            item["item"] = collapse_single_child_folders(item["item"])
            while len(item["item"]) == 1 and _is_folder(item["item"][0]):
                child = item["item"][0]
                item["name"] = f"{item['name']}/{child['name']}"
                item["item"] = child["item"]
                if "description" not in item and "description" in child:
                    item["description"] = child["description"]
        result.append(item)
    return result


# --- Requests ---


def _request_name(op: APIOperation, options: ConverterOptions) -> str:
    url_name = f"{{{{{BASE_URL_VARIABLE}}}}}{op.path}"
    if options.request_name_source == RequestNameSource.URL:
        return url_name
    return op.summary or op.operation_id or url_name


def _request_item(
    op: APIOperation, spec: ParsedSpec, options: ConverterOptions
) -> dict[str, Any]:
    """Assemble a complete request item (request plus response examples)."""
    body_content_type = _body_content_type(op.request_body)
    request: dict[str, Any] = {
        "method": op.method.value.upper(),
        "header": _headers(op, body_content_type, options),
        "url": _url(op, options),
    }

    if op.request_body is not None:
        body = _body(op.request_body, body_content_type, options)
        if body is not None:
            request["body"] = body

    if options.include_auth:
        auth = _auth(op, spec.security_schemes)
        if auth is not None:
            request["auth"] = auth

    description = op.description or op.summary
    if description:
        request["description"] = description

    return {
        "name": _request_name(op, options),
        "request": request,
        "response": [_response_example(resp, request, options) for resp in op.responses],
    }


def _param_value(param: APIParameter, options: ConverterOptions) -> str:
    """Render a parameter value as a string, as Postman stores them."""
    if options.parameters_resolution == ParametersResolution.EXAMPLE:
        for candidate in (param.example, param.default):
            if candidate is not None:
                return _stringify(candidate)
    if param.enum_values:
        return _stringify(param.enum_values[0])
    if param.schema_type in ("object", "array") and param.schema_:
        return _stringify(generate_example(param.schema_, options.parameters_resolution))
    return placeholder(param.schema_type, param.schema_format)


def _json_default(value: Any) -> Any:
    """Serialize the date and time values YAML decodes from unquoted timestamps."""
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dumps(value: Any, indent: int | str | None = None) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False, default=_json_default)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return _dumps(value)
    return str(value)


def _url(op: APIOperation, options: ConverterOptions) -> dict[str, Any]:
    """Build the Postman URL object.

    A segment that is exactly ``{name}`` becomes ``:name`` (a path variable);
    a placeholder embedded in a longer segment becomes ``{{name}}``.
    """
    path: list[str] = []
    for segment in (s for s in op.path.split("/") if s):
        whole = _PATH_PARAM.fullmatch(segment)
        if whole:
            path.append(f":{whole.group(1)}")
        else:
            path.append(_PATH_PARAM.sub(r"{{\1}}", segment))

    host = f"{{{{{BASE_URL_VARIABLE}}}}}"
    raw = host + "/" + "/".join(path)

    url: dict[str, Any] = {"raw": raw, "host": [host], "path": path}

    variables = []
    query = []
    for param in op.parameters:
        entry: dict[str, Any] = {"key": param.name, "value": _param_value(param, options)}
        if param.description:
            entry["description"] = param.description
        if param.location == ParameterLocation.PATH:
            variables.append(entry)
        elif param.location == ParameterLocation.QUERY:
            if not param.required:
                entry["disabled"] = True
            query.append(entry)

    if query:
        url["query"] = query
        enabled = [f"{q['key']}={q['value']}" for q in query if not q.get("disabled")]
        if enabled:
            url["raw"] = raw + "?" + "&".join(enabled)
    if variables:
        url["variable"] = variables
    return url


def _headers(
    op: APIOperation, body_content_type: str | None, options: ConverterOptions
) -> list[dict[str, Any]]:
    headers: list[dict[str, Any]] = []
    if body_content_type:
        headers.append({"key": "Content-Type", "value": body_content_type})

    accept = next((ct for resp in op.responses for ct in resp.content_types), None)
    if accept:
        headers.append({"key": "Accept", "value": accept})

    for param in op.parameters:
        if param.location != ParameterLocation.HEADER:
            continue
        entry: dict[str, Any] = {"key": param.name, "value": _param_value(param, options)}
        if param.description:
            entry["description"] = param.description
        if not param.required:
            entry["disabled"] = True
        headers.append(entry)

    cookies = [
        f"{p.name}={_param_value(p, options)}"
        for p in op.parameters
        if p.location == ParameterLocation.COOKIE
    ]
    if cookies:
        headers.append({"key": "Cookie", "value": "; ".join(cookies)})
    return headers


def _body_content_type(body: RequestBodyInfo | None) -> str | None:
    """Prefer a JSON content type; otherwise take the first declared one."""
    if body is None or not body.content_types:
        return None
    for content_type in body.content_types:
        if "json" in content_type:
            return content_type
    return body.content_types[0]


def _indent(options: ConverterOptions) -> int | str:
    return "\t" if options.indent_character == IndentCharacter.TAB else 2


def _example_value(
    schema: dict[str, Any] | None, declared: Any, options: ConverterOptions
) -> Any:
    if declared is not None and options.parameters_resolution == ParametersResolution.EXAMPLE:
        return declared
    if schema is not None:
        return generate_example(schema, options.parameters_resolution)
    return declared


def _body(
    body: RequestBodyInfo, content_type: str | None, options: ConverterOptions
) -> dict[str, Any] | None:
    """Build a request body in ``raw``, ``urlencoded`` or ``formdata`` mode."""
    if content_type == "application/x-www-form-urlencoded" or content_type == "multipart/form-data":
        properties = (body.schema_ or {}).get("properties") or {}
        fields = []
        for name, prop in properties.items():
            field: dict[str, Any] = {"key": name}
            if content_type == "multipart/form-data" and (
                prop.get("type") == "file" or prop.get("format") == "binary"
            ):
                field.update({"type": "file", "src": []})
            else:
                value = generate_example(prop, options.parameters_resolution)
                field["value"] = _stringify(value)
                if content_type == "multipart/form-data":
                    field["type"] = "text"
            if prop.get("description"):
                field["description"] = prop["description"]
            fields.append(field)
        mode = "urlencoded" if content_type.endswith("urlencoded") else "formdata"
        return {"mode": mode, mode: fields}

    value = _example_value(body.schema_, body.example, options)
    if value is None:
        return None

    if content_type and "json" in content_type:
        return {
            "mode": "raw",
            "raw": _dumps(value, _indent(options)),
            "options": {"raw": {"language": "json"}},
        }

    language = "xml" if content_type and "xml" in content_type else "text"
    return {
        "mode": "raw",
        "raw": _stringify(value),
        "options": {"raw": {"language": language}},
    }


# --- Auth ---


def _auth(op: APIOperation, schemes: dict[str, SecurityScheme]) -> dict[str, Any] | None:
    """Translate the first usable security requirement into a Postman auth block.

    Credentials are left as ``{{variables}}`` for the user to fill in.
    """
    for requirement in op.security:
        for name in requirement:
            scheme = schemes.get(name)
            if scheme is None:
                continue
            auth = _scheme_auth(scheme)
            if auth is not None:
                return auth
    return None


def _kv(key: str, value: str) -> dict[str, str]:
    return {"key": key, "value": value, "type": "string"}


def _scheme_auth(scheme: SecurityScheme) -> dict[str, Any] | None:
    if scheme.type == "http" and scheme.scheme == "bearer":
        return {"type": "bearer", "bearer": [_kv("token", "{{bearerToken}}")]}
    if scheme.type == "http" and scheme.scheme == "basic":
        return {
            "type": "basic",
            "basic": [
                _kv("username", "{{basicAuthUsername}}"),
                _kv("password", "{{basicAuthPassword}}"),
            ],
        }
    if scheme.type == "apiKey":
        return {
            "type": "apikey",
            "apikey": [
                _kv("key", scheme.param_name or scheme.name),
                _kv("value", "{{apiKey}}"),
                _kv("in", "query" if scheme.location == "query" else "header"),
            ],
        }
    if scheme.type in ("oauth2", "openIdConnect"):
        return {"type": "oauth2", "oauth2": [_kv("accessToken", "{{oauth2AccessToken}}")]}
    return None


# --- Responses ---


def _status(status_code: str) -> tuple[int, str]:
    """Map an OpenAPI status key (``200``, ``4XX``, ``default``) to a code and reason."""
    if status_code.isdigit():
        code = int(status_code)
    elif len(status_code) == 3 and status_code[0].isdigit():
        code = int(status_code[0]) * 100
    else:
        code = 500
    try:
        return code, HTTPStatus(code).phrase
    except ValueError:
        return code, "Unknown"


def _response_example(
    response: ResponseInfo, request: dict[str, Any], options: ConverterOptions
) -> dict[str, Any]:
    code, status_text = _status(response.status_code)
    content_type = response.content_types[0] if response.content_types else None

    body = ""
    value = _example_value(response.schema_, response.example, options)
    if value is not None:
        if content_type is None or "json" in content_type:
            body = _dumps(value, _indent(options))
        else:
            body = _stringify(value)

    original = {k: copy.deepcopy(v) for k, v in request.items() if k != "description"}

    if content_type is None or "json" in content_type:
        preview = "json"
    elif "xml" in content_type:
        preview = "xml"
    else:
        preview = "text"

    return {
        "name": response.description or status_text,
        "originalRequest": original,
        "status": status_text,
        "code": code,
        "_postman_previewlanguage": preview,
        "header": [{"key": "Content-Type", "value": content_type}] if content_type else [],
        "cookie": [],
        "body": body,
    }
