"""Load API description documents from a URL or a local file.

This module handles all I/O for fetching raw OpenAPI/Swagger documents and
decoding them into Python values. It supports both JSON and YAML: strict JSON
is attempted first and YAML is the fallback.

The public functions are:

* :func:`load_spec` -- Fetch and decode a spec from a URL or file path.
* :func:`decode_document` -- Decode text into a :class:`DecodedDocument` or
  a :class:`DecodeFailure`, never raising.
* :func:`is_remote` -- Whether a location selects remote mode.

The decoded value is not validated here; the converter decides whether it
looks like an API description.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import httpx
import yaml

from swagger_to_postman.exceptions import SpecFetchError, SpecParseError
from swagger_to_postman.output import debug

_REMOTE_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class DecodedDocument:
    """Successfully decoded document and the format that decoded it."""

    value: Any
    format: str


@dataclass(frozen=True)
class DecodeFailure:
    """Both decoders rejected the text; their messages are kept verbatim."""

    json_error: str
    yaml_error: str

    @property
    def message(self) -> str:
        return (
            "Failed to parse spec as JSON or YAML"
            f"\n  JSON error: {self.json_error}"
            f"\n  YAML error: {self.yaml_error}"
        )


DecodeResult = Union[DecodedDocument, DecodeFailure]


def is_remote(source: str) -> bool:
    """Return True when *source* starts with ``http://`` or ``https://`` (any case)."""
    return bool(_REMOTE_PATTERN.match(source))


def load_spec(source: str, headers: Optional[Mapping[str, str]] = None) -> Any:
    """Load an API description from a URL or file path.

    Args:
        source: An HTTP(S) URL or a local file path.
        headers: Extra request headers, only used in remote mode.

    Returns:
        The decoded document (usually a dict).

    Raises:
        SpecFetchError: If the URL or file cannot be read.
        SpecParseError: If the content is neither JSON nor YAML.
    """
    if is_remote(source):
        content = _load_from_url(source, headers or {})
    else:
        content = _load_from_file(source)

    result = decode_document(content)
    if isinstance(result, DecodeFailure):
        raise SpecParseError(
            result.message,
            json_error=result.json_error,
            yaml_error=result.yaml_error,
        )
    debug(f"Decoded spec as {result.format.upper()}")
    return result.value


def _load_from_url(url: str, headers: Mapping[str, str]) -> str:
    """Fetch spec text from *url* with a single GET request.

    Args:
        url: The HTTP(S) URL to fetch.
        headers: Header mapping attached to the request.

    Returns:
        The response body as text, decoded with the response charset.

    Raises:
        SpecFetchError: On transport failures and non-2xx responses.
    """
    debug(f"GET {url} ({len(headers)} extra header(s))")
    try:
        response = httpx.get(url, headers=dict(headers), follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecFetchError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecFetchError(f"Failed to fetch spec from {url}: {exc}") from exc

    return response.text


def _load_from_file(path: str) -> str:
    """Read spec text from a local file.

    The file is read as UTF-8; a leading byte order mark is dropped.

    Raises:
        SpecFetchError: If the file is missing, unreadable, or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecFetchError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecFetchError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecFetchError(f"Spec file is empty: {path}")

    return content


def decode_document(content: str) -> DecodeResult:
    """Decode *content* as JSON, falling back to YAML.

    Valid JSON is returned without touching the YAML decoder. YAML is only
    tried after JSON has failed. JSON is strict: the non-standard ``NaN``
    and ``Infinity`` constants count as a JSON failure.

    Args:
        content: The raw document text.

    Returns:
        A :class:`DecodedDocument` on success, or a :class:`DecodeFailure`
        holding both decoder messages.
    """
    try:
        return DecodedDocument(
            value=json.loads(content, parse_constant=_reject_constant), format="json"
        )
    except ValueError as exc:
        json_error = str(exc)

    try:
        return DecodedDocument(value=yaml.safe_load(content), format="yaml")
    except yaml.YAMLError as exc:
        return DecodeFailure(json_error=json_error, yaml_error=str(exc))


def _reject_constant(name: str) -> Any:
    """Refuse ``NaN``, ``Infinity`` and ``-Infinity``, which strict JSON does not allow."""
    raise ValueError(f"Invalid JSON constant: {name}")
