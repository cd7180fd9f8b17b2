"""Typer application and CLI entry point for swagger-to-postman.

The application has a single command that runs the whole pipeline::

    options -> header mapping -> load spec -> convert -> write collection

:func:`run_pipeline` holds the pipeline itself and takes an explicit
:class:`~swagger_to_postman.models.Configuration`, so it can be driven
without the CLI. :func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Any, List, Optional

import click
import typer
from typer.core import TyperCommand

from swagger_to_postman import __version__
from swagger_to_postman.exit_codes import EXIT_FAILURE, EXIT_INTERRUPTED
from swagger_to_postman.models import DEFAULT_OUTPUT, Configuration

app = typer.Typer(
    name="swagger-to-postman",
    help="Fetch an OpenAPI spec and convert it to a Postman Collection.",
    add_completion=False,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagger-to-postman {__version__}")
        raise typer.Exit()


class _ConvertCommand(TyperCommand):
    """Report usage errors such as a missing ``--input`` with exit status 1."""

    def make_context(
        self,
        info_name: Optional[str],
        args: list[str],
        parent: Optional[click.Context] = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = EXIT_FAILURE
            raise


def run_pipeline(configuration: Configuration) -> Path:
    """Load the spec named by *configuration*, convert it, and write the collection.

    Args:
        configuration: The parsed run configuration.

    Returns:
        Path of the written collection file.

    Raises:
        SwaggerToPostmanError: Any fetch, decode, conversion, or write
            failure, unmodified.
    """
    from swagger_to_postman.collection import convert_spec
    from swagger_to_postman.headers import build_headers
    from swagger_to_postman.output import debug, info
    from swagger_to_postman.parser import load_spec

    headers = build_headers(configuration.headers)
    if headers:
        debug(f"Request headers: {', '.join(headers)}")

    info(f"Fetching spec from: {configuration.input}")
    document = load_spec(configuration.input, headers)

    return convert_spec(document, configuration.output, configuration.converter)


@app.command(cls=_ConvertCommand)
def convert_command(
    input: str = typer.Option(
        ...,
        "--input",
        "-i",
        metavar="PATH_OR_URL",
        help="Spec URL or file path.",
    ),
    output: str = typer.Option(
        DEFAULT_OUTPUT,
        "--output",
        "-o",
        help="Output filename.",
    ),
    header: Optional[List[str]] = typer.Option(
        None,
        "--header",
        "-H",
        help='Additional HTTP header as "Key: Value". Repeatable.',
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Converter options JSON file.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Fetch an OpenAPI spec and convert it to a Postman Collection.

    Every failure (usage, network, file, parse, conversion, write) prints a
    single error line to stderr and exits with status 1.

    Example::

        swagger-to-postman -i https://api.example.com/openapi.json
        swagger-to-postman -i ./openapi.yaml -o api.postman.json -H "Authorization: Bearer abc"
    """
    from swagger_to_postman.config import load_converter_options
    from swagger_to_postman.exceptions import SwaggerToPostmanError
    from swagger_to_postman.output import OutputManager, error, set_output

    output_manager = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output_manager)
    output_manager.configure_logging()

    try:
        configuration = Configuration(
            input=input,
            output=output,
            headers=tuple(header or ()),
            converter=load_converter_options(config_file),
        )
        run_pipeline(configuration)
    except SwaggerToPostmanError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``swagger-to-postman`` console script.

    Known errors are handled inside the command. Anything else is reported
    as an unexpected error with exit status 1.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from swagger_to_postman.output import error

        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_FAILURE)
