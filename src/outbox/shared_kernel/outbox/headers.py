"""Query-string encoding for outbox headers.

Headers are stored in a single text column as ``key=value&key=value``,
with keys and values escaped the way HTML form data is. Keys are written
in sorted order and may repeat.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import parse_qsl, urlencode

HeaderValues = str | Sequence[str]


def encode_headers(headers: Mapping[str, HeaderValues]) -> str:
    """Encode a header mapping into its stored string form.

    Args:
        headers: Mapping of header name to a single value or a sequence of
            values (a sequence produces a repeated key)

    Returns:
        The encoded string, or an empty string for an empty mapping
    """
    pairs: list[tuple[str, str]] = []
    for key in sorted(headers):
        value = headers[key]
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return urlencode(pairs)


def decode_headers(raw: str | None) -> dict[str, list[str]]:
    """Decode a stored header string.

    Never raises: a missing or empty string decodes to an empty mapping and
    fragments that cannot be split are skipped.

    Args:
        raw: The stored header string

    Returns:
        Mapping of header name to every value stored for it, in order
    """
    decoded: dict[str, list[str]] = {}
    if not raw:
        return decoded
    for key, value in parse_qsl(raw, keep_blank_values=True):
        decoded.setdefault(key, []).append(value)
    return decoded


def get_header(headers: Mapping[str, Sequence[str]], key: str) -> str:
    """Return the first value stored for ``key``, or an empty string."""
    values = headers.get(key)
    if not values:
        return ""
    return values[0]
