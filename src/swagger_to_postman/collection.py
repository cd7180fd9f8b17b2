"""Run the converter and write its collection to disk.

The converter reports through a callback (see
:func:`swagger_to_postman.converter.convert`). :func:`run_conversion` wraps
that callback in a :class:`concurrent.futures.Future` so callers get a
plain return value or a raised :class:`~swagger_to_postman.exceptions.ConversionError`.

Only the first output artifact is used; converters that emit several
artifacts have the rest ignored.
"""

from __future__ import annotations

import json
import os
import tempfile
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Optional, Union

from swagger_to_postman.converter import convert
from swagger_to_postman.exceptions import ConversionError, OutputWriteError
from swagger_to_postman.models import ConversionResult, ConverterInput, ConverterOptions
from swagger_to_postman.output import debug, success, warning


def run_conversion(
    document: Any, options: Optional[ConverterOptions] = None
) -> ConversionResult:
    """Convert *document* and return the successful result.

    Args:
        document: The decoded API description.
        options: Converter options; defaults when ``None``.

    Returns:
        A :class:`~swagger_to_postman.models.ConversionResult` with
        ``result=True`` and at least one output artifact.

    Raises:
        ConversionError: If the converter reports an error, rejects the
            input, or produces no output.
    """
    future: Future[ConversionResult] = Future()

    def _on_done(err: Optional[BaseException], result: Optional[ConversionResult]) -> None:
        if err is not None:
            future.set_exception(ConversionError(f"Conversion failed: {err}"))
        elif result is None or not result.result:
            reason = result.reason if result is not None else None
            future.set_exception(ConversionError(reason or "Conversion failed"))
        elif not result.output:
            future.set_exception(ConversionError("Converter produced no output"))
        else:
            future.set_result(result)

    convert(ConverterInput(type="json", data=document), options or ConverterOptions(), _on_done)
    return future.result()


def convert_spec(
    document: Any,
    output_path: Union[str, Path],
    options: Optional[ConverterOptions] = None,
) -> Path:
    """Convert *document* and write the first artifact to *output_path*.

    The file is overwritten without confirmation. It is only touched once
    the conversion has succeeded.

    Args:
        document: The decoded API description.
        output_path: Destination file.
        options: Converter options.

    Returns:
        The path written.

    Raises:
        ConversionError: If conversion fails.
        OutputWriteError: If the file cannot be written.
    """
    result = run_conversion(document, options)
    if len(result.output) > 1:
        debug(f"Converter produced {len(result.output)} artifacts; writing the first")

    collection = result.output[0].data
    if not collection.get("item"):
        warning("The spec declares no operations; the collection is empty")

    path = Path(output_path)
    write_collection(collection, path)
    success(f"Collection saved to {path}")
    return path


def write_collection(collection: dict[str, Any], path: Path) -> None:
    """Serialize *collection* as two-space indented UTF-8 JSON at *path*.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    data = json.dumps(collection, indent=2, ensure_ascii=False, default=str)
    try:
        _atomic_write(path, data)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write collection to {path}: {exc}") from exc


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives next to *path* so ``os.replace`` is a rename on
    the same filesystem. A failed write leaves any existing file untouched.
    """
    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
