"""Canonical Pydantic models shared across all swagger-to-postman modules.

The models fall into three groups:

**Run configuration** -- built once by the CLI and passed explicitly through
the pipeline:
    :class:`Configuration` and :class:`ConverterOptions`.

**Converter contract** -- what goes into and comes out of
:func:`~swagger_to_postman.converter.convert`:
    :class:`ConverterInput`, :class:`ConversionOutput`, and
    :class:`ConversionResult`.

**Parsed spec models** -- the normalized view of an OpenAPI 3.x or Swagger
2.0 document that the collection builder consumes:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`APIParameter`,
    :class:`RequestBodyInfo`, :class:`ResponseInfo`, :class:`SecurityScheme`,
    :class:`APIOperation`, :class:`APIInfo`, :class:`ServerInfo`,
    :class:`TagInfo`, and :class:`ParsedSpec`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_OUTPUT = "collection.postman.json"


# --- Converter options ---


class FolderStrategy(str, enum.Enum):
    """How requests are grouped into folders in the generated collection."""

    PATHS = "Paths"
    TAGS = "Tags"


class RequestNameSource(str, enum.Enum):
    """Where request names come from.

    ``FALLBACK`` uses the summary, then the operationId, then the URL.
    """

    FALLBACK = "Fallback"
    URL = "URL"


class ParametersResolution(str, enum.Enum):
    """How example values are generated for parameters and bodies."""

    SCHEMA = "Schema"
    EXAMPLE = "Example"


class IndentCharacter(str, enum.Enum):
    """Indentation used inside raw JSON request and response bodies."""

    SPACE = "Space"
    TAB = "Tab"


class ConverterOptions(BaseModel):
    """Options accepted by the converter.

    Loaded from a JSON file by :func:`~swagger_to_postman.config.load_converter_options`.
    Keys may be given in snake_case or camelCase (``folderStrategy``).
    Unknown keys are rejected so that typos surface as a :class:`ConfigError`.

    Example::

        {"folderStrategy": "Tags", "requestNameSource": "URL"}
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    folder_strategy: FolderStrategy = Field(
        default=FolderStrategy.PATHS, alias="folderStrategy"
    )
    request_name_source: RequestNameSource = Field(
        default=RequestNameSource.FALLBACK, alias="requestNameSource"
    )
    parameters_resolution: ParametersResolution = Field(
        default=ParametersResolution.SCHEMA, alias="parametersResolution"
    )
    indent_character: IndentCharacter = Field(
        default=IndentCharacter.SPACE, alias="indentCharacter"
    )
    collapse_folders: bool = Field(default=True, alias="collapseFolders")
    include_deprecated: bool = Field(default=True, alias="includeDeprecated")
    include_auth: bool = Field(default=True, alias="includeAuthInfoInExample")


class Configuration(BaseModel):
    """Immutable run configuration produced by the CLI.

    Lives for the duration of one invocation and is handed to each pipeline
    step as a parameter.
    """

    model_config = ConfigDict(frozen=True)

    input: str = Field(description="URL or file path of the API description")
    output: str = DEFAULT_OUTPUT
    headers: tuple[str, ...] = Field(
        default=(), description='Raw "Key: Value" header strings, in order'
    )
    converter: ConverterOptions = Field(default_factory=ConverterOptions)


# --- Converter contract ---


class ConverterInput(BaseModel):
    """Document handed to the converter.

    ``type="json"`` carries an already decoded document; ``type="string"``
    carries raw JSON or YAML text that the converter decodes itself.
    """

    type: str = "json"
    data: Any = None


class ConversionOutput(BaseModel):
    """One artifact produced by the converter."""

    type: str = "collection"
    data: dict[str, Any]


class ConversionResult(BaseModel):
    """Outcome reported by the converter through its callback.

    ``result`` is ``False`` when the input was rejected; ``reason`` then says
    why and ``output`` is empty.
    """

    result: bool
    reason: Optional[str] = None
    output: list[ConversionOutput] = Field(default_factory=list)


# --- Parsed spec models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised in OpenAPI/Swagger path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per the ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class APIParameter(BaseModel):
    """A single parameter extracted from an operation.

    Path parameters become Postman path variables; query parameters become
    ``url.query`` entries; header parameters become request headers.
    """

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_type: str = Field(default="string", description="JSON Schema type")
    schema_format: Optional[str] = None
    default: Any = None
    enum_values: Optional[list[Any]] = None
    example: Any = None
    deprecated: bool = False
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class RequestBodyInfo(BaseModel):
    """Parsed request body metadata for an :class:`APIOperation`."""

    required: bool = False
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Any = None

    model_config = {"populate_by_name": True}


class ResponseInfo(BaseModel):
    """Parsed response metadata for a single HTTP status code."""

    status_code: str
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Any = None

    model_config = {"populate_by_name": True}


class SecurityScheme(BaseModel):
    """A security scheme extracted from ``components/securitySchemes``
    (or ``securityDefinitions`` in Swagger 2.0).

    ``type`` is one of ``apiKey``, ``http``, ``oauth2``, ``openIdConnect``.
    Swagger 2.0 ``basic`` schemes are normalized to ``http``/``basic``.
    """

    name: str
    type: str
    description: Optional[str] = None
    param_name: Optional[str] = Field(default=None, alias="in_name")
    location: Optional[str] = Field(default=None, alias="in_location")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[dict[str, Any]] = None
    openid_connect_url: Optional[str] = None

    model_config = {"populate_by_name": True}


class APIOperation(BaseModel):
    """A single parsed API operation (one URL path + HTTP method pair).

    Each operation becomes exactly one request item in the collection.
    """

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[APIParameter] = Field(default_factory=list)
    request_body: Optional[RequestBodyInfo] = None
    responses: list[ResponseInfo] = Field(default_factory=list)
    security: list[dict[str, list[str]]] = Field(
        default_factory=list, description="Security requirements"
    )
    deprecated: bool = False


class APIInfo(BaseModel):
    """API metadata extracted from the spec's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None


class ServerInfo(BaseModel):
    """A server entry. The first one becomes the collection's ``baseUrl``."""

    url: str
    description: Optional[str] = None
    variables: dict[str, Any] = Field(default_factory=dict)


class TagInfo(BaseModel):
    """A top-level tag declaration, used to describe tag folders."""

    name: str
    description: Optional[str] = None


class ParsedSpec(BaseModel):
    """Normalized representation of an OpenAPI 3.x or Swagger 2.0 document."""

    info: APIInfo
    servers: list[ServerInfo] = Field(default_factory=list)
    operations: list[APIOperation] = Field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict)
    tags: list[TagInfo] = Field(default_factory=list)
    spec_version: str = Field(
        description="Original version string (e.g., '3.0.3', '2.0')"
    )
