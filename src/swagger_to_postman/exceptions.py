"""Exception hierarchy for swagger-to-postman.

All exceptions inherit from :class:`SwaggerToPostmanError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`swagger_to_postman.exit_codes`. The ``convert`` command catches
``SwaggerToPostmanError``, prints the message to stderr, and exits with the
error's code.

Subclass hierarchy::

    SwaggerToPostmanError (exit 1)
    +-- SpecFetchError      (exit 1)
    +-- SpecParseError      (exit 1)
    +-- ConversionError     (exit 1)
    +-- OutputWriteError    (exit 1)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from swagger_to_postman.exit_codes import EXIT_FAILURE


class SwaggerToPostmanError(Exception):
    """Base exception for all swagger-to-postman errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SpecFetchError(SwaggerToPostmanError):
    """Raised when the spec cannot be retrieved (network failure, non-2xx, missing file)."""


class SpecParseError(SwaggerToPostmanError):
    """Raised when the spec text is neither valid JSON nor valid YAML.

    Both underlying decoder messages are kept for diagnostics.
    """

    def __init__(
        self,
        message: str,
        json_error: str | None = None,
        yaml_error: str | None = None,
    ):
        super().__init__(message)
        self.json_error = json_error
        self.yaml_error = yaml_error


class ConversionError(SwaggerToPostmanError):
    """Raised when the converter reports a failure or produces no output."""


class OutputWriteError(SwaggerToPostmanError):
    """Raised when the collection file cannot be written."""


class ConfigError(SwaggerToPostmanError):
    """Raised for converter option problems (missing file, invalid JSON, unknown keys)."""
