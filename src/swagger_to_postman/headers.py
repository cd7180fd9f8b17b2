"""Turn raw ``"Key: Value"`` strings from ``--header`` into a header mapping."""

from __future__ import annotations

from collections.abc import Iterable


def build_headers(raw_headers: Iterable[str]) -> dict[str, str]:
    """Build an HTTP header mapping from raw ``"Key: Value"`` entries.

    Each entry is split on its first colon and both halves are stripped.
    Entries without a colon, or with an empty key, are skipped without
    error. Later entries overwrite earlier ones with the same key.

    Args:
        raw_headers: Header strings in the order they were given.

    Returns:
        The header mapping, suitable for ``httpx.get(headers=...)``.

    Example::

        >>> build_headers(["Authorization: Bearer abc", "bogus", "X-Trace:1"])
        {'Authorization': 'Bearer abc', 'X-Trace': '1'}
    """
    headers: dict[str, str] = {}
    for entry in raw_headers:
        key, sep, value = entry.partition(":")
        if not sep:
            continue
        key = key.strip()
        if key:
            headers[key] = value.strip()
    return headers
