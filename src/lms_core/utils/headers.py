"""Header filtering and lookup utilities for the idempotency gate.

This module provides functions for:
- Dropping transfer-framing headers before a response is cached
- Case-insensitive header lookup and replacement
- Collapsing raw header pairs into a single-valued mapping
"""

from collections.abc import Iterable

# Headers whose name starts with this prefix describe how the original body
# was framed on the wire and must not be replayed
TRANSFER_HEADER_PREFIX = "transfer-"


def filter_transfer_headers(headers: dict[str, str]) -> dict[str, str]:
    """Remove Transfer-* headers from a response header mapping.

    Args:
        headers: Original response headers

    Returns:
        Headers without any name starting with "Transfer-" (case-insensitive)

    Example:
        >>> filter_transfer_headers({
        ...     "Content-Type": "application/json",
        ...     "Transfer-Encoding": "chunked",
        ... })
        {'Content-Type': 'application/json'}
    """
    return {
        key: value
        for key, value in headers.items()
        if not key.lower().startswith(TRANSFER_HEADER_PREFIX)
    }


def collect_headers(raw_headers: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse header pairs into a dict, joining repeated names with ", ".

    Args:
        raw_headers: (name, value) pairs, possibly with repeated names

    Returns:
        Mapping with one entry per header name (first-seen spelling kept)

    Example:
        >>> collect_headers([("vary", "accept"), ("Vary", "origin")])
        {'vary': 'accept, origin'}
    """
    result: dict[str, str] = {}
    canonical_keys: dict[str, str] = {}

    for key, value in raw_headers:
        key_lower = key.lower()
        if key_lower in canonical_keys:
            existing = canonical_keys[key_lower]
            result[existing] = f"{result[existing]}, {value}"
        else:
            canonical_keys[key_lower] = key
            result[key] = value

    return result


def get_header_value(
    headers: dict[str, str],
    header_name: str,
    default: str | None = None,
) -> str | None:
    """Get header value with case-insensitive lookup.

    Args:
        headers: Headers dictionary
        header_name: Name of header to find (case-insensitive)
        default: Default value if header not found

    Returns:
        Header value or default

    Example:
        >>> get_header_value({"Content-Type": "application/json"}, "content-type")
        'application/json'
    """
    header_name_lower = header_name.lower()

    for key, value in headers.items():
        if key.lower() == header_name_lower:
            return value

    return default


def set_header_value(headers: dict[str, str], header_name: str, value: str) -> dict[str, str]:
    """Return a copy of ``headers`` with one header replaced case-insensitively.

    Example:
        >>> set_header_value({"content-type": "text/plain"}, "Content-Type", "text/html")
        {'Content-Type': 'text/html'}
    """
    header_name_lower = header_name.lower()
    result = {key: val for key, val in headers.items() if key.lower() != header_name_lower}
    result[header_name] = value
    return result
