"""Shared query parameter parsing utilities for framework adapters.

This module provides utilities for parsing and validating query parameters
that are common across the ASGI and FastAPI adapters.
"""


def _parse_name_param(params: dict[str, list[str]]) -> str | None:
    """Parse the 'name' query parameter.

    Args:
        params: Parsed query string parameters (as returned by urllib.parse.parse_qs).

    Returns:
        Frame name with surrounding whitespace removed, or None if missing
        or blank.
    """
    name_list = params.get("name", [None])
    name_raw = name_list[0] if name_list else None
    if name_raw and name_raw.strip():
        return name_raw.strip()
    return None
