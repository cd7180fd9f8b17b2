"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Every failure (usage, fetch, decode, conversion, write) collapses to
:data:`EXIT_FAILURE`.

Example::

    $ swagger-to-postman -i http://unreachable.invalid/openapi.json
    Error: Failed to fetch spec from http://unreachable.invalid/openapi.json: ...
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The collection was written successfully."""

EXIT_FAILURE = 1
"""The command was misused, or the spec could not be fetched, decoded, converted, or written."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
