"""Tag set validation and merging.

A tag set maps tag names to string values, e.g. ``{"group": "db"}``.
Names cannot be numeric: the engine aggregates by name, and positional
keys would collide across timers.
"""

from collections.abc import Mapping
from typing import Any

from .errors import InvalidTagError

HOSTNAME_TAG = "__hostname"
SERVER_NAME_TAG = "__server_name"

Tags = dict[str, str]


def _is_valid_name(name: Any) -> bool:
    if not isinstance(name, str) or not name:
        return False
    return not name.lstrip("-+").isdigit()


def validate_tags(tags: Mapping[str, Any] | None) -> Tags:
    """Check tag names and coerce values to strings.

    Args:
        tags: Caller tag set, may be None.

    Returns:
        A new dict of string names to string values.

    Raises:
        InvalidTagError: If a name is empty, numeric or not a string.
    """
    if not tags:
        return {}

    result: Tags = {}
    for name, value in tags.items():
        if not _is_valid_name(name):
            raise InvalidTagError(name)
        result[name] = str(value)
    return result


def merge_tags(
    tags: Mapping[str, Any] | None,
    defaults: Mapping[str, str],
    defaults_override: bool = False,
) -> Tags:
    """Merge process default tags into a caller tag set.

    Caller tags win over defaults of the same name unless
    ``defaults_override`` is set, which restores the older behaviour of
    appending defaults last.

    Args:
        tags: Caller tag set.
        defaults: Default tags (hostname, server name).
        defaults_override: Let defaults replace same-named caller tags.

    Returns:
        The merged, validated tag set.
    """
    caller = validate_tags(tags)
    if defaults_override:
        return {**caller, **defaults}
    return {**defaults, **caller}


__all__ = [
    "HOSTNAME_TAG",
    "SERVER_NAME_TAG",
    "Tags",
    "validate_tags",
    "merge_tags",
]
