"""
Module: headers.py
Description: Header handling for relayed deliveries.

Inbound headers are flattened to a plain mapping and stripped of the
transport-only headers that describe the inbound connection rather
than the delivery itself.
"""

from typing import Dict, Iterable, Mapping, Tuple

# Describe the inbound hop; the forwarder recomputes host and length
EXCLUDED_HEADERS = frozenset({"host", "content-length", "connection"})


def flatten_headers(items: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """
    Collapse raw header pairs into a single mapping.

    Repeated headers are joined with ", " in arrival order.

    Args:
        items: Header (name, value) pairs, e.g. ``request.headers.items()``

    Returns:
        Mapping of header name to value
    """
    flattened: Dict[str, str] = {}
    for name, value in items:
        if name in flattened:
            flattened[name] = f"{flattened[name]}, {value}"
        else:
            flattened[name] = value
    return flattened


def sanitize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Copy headers, dropping transport-only ones.

    The excluded names are matched case-insensitively; every other
    header is kept with its original name and value.

    Args:
        headers: Inbound headers

    Returns:
        New mapping safe to forward
    """
    return {
        name: value
        for name, value in headers.items()
        if name.lower() not in EXCLUDED_HEADERS
    }
