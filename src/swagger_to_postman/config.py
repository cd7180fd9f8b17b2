"""Converter option resolution.

Converter options (:class:`~swagger_to_postman.models.ConverterOptions`) can
come from a JSON file. The file is located with this precedence, first match
wins:

1. the ``--config`` CLI flag,
2. the ``SWAGGER_TO_POSTMAN_CONFIG`` environment variable,
3. a project-local ``swagger-to-postman.json`` in the working directory.

When none is present, the defaults are used. An explicitly named file (flag
or environment variable) must exist; the project-local file is optional.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from swagger_to_postman.exceptions import ConfigError
from swagger_to_postman.models import ConverterOptions

CONFIG_ENV_VAR = "SWAGGER_TO_POSTMAN_CONFIG"
PROJECT_CONFIG_FILENAME = "swagger-to-postman.json"


def find_config_file(cli_path: Optional[str] = None) -> Optional[Path]:
    """Return the options file to use, or ``None`` for defaults.

    Raises:
        ConfigError: If the flag or environment variable names a missing file.
    """
    explicit = cli_path or os.environ.get(CONFIG_ENV_VAR, "")
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return path

    project = Path.cwd() / PROJECT_CONFIG_FILENAME
    return project if project.is_file() else None


def load_converter_options(cli_path: Optional[str] = None) -> ConverterOptions:
    """Resolve and load converter options.

    Args:
        cli_path: Value of the ``--config`` flag, if given.

    Returns:
        The validated options.

    Raises:
        ConfigError: If the file is missing, is not a JSON object, or holds
            unknown keys or invalid values.
    """
    path = find_config_file(cli_path)
    if path is None:
        return ConverterOptions()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")

    try:
        return ConverterOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
