from __future__ import annotations

"""Validation helpers shared by the config domain loaders.

Every helper takes the dotted key path of the value it checks (for example
``facets[2].limit``) and puts it in the error message.
"""

from typing import Any, Mapping

_MISSING = object()


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return the mapping stored under ``key``.

    Args:
        raw: Parent mapping.
        key: Section name, also used as the key path in errors.
        required: Raise instead of returning ``{}`` when the section is absent.

    Raises:
        ValueError: If a required section is absent.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    return expect_mapping(section, key)


def get_list(raw: Mapping[str, Any], key: str) -> list[Any]:
    """Return the list stored under ``key``, or ``[]`` when absent.

    Raises:
        TypeError: If the value is not a list.
    """
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise _type_error(key, "a list")
    return value


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    """Return ``section[field]``; raise ValueError naming ``config_key`` if absent."""
    value = section.get(field, _MISSING)
    if value is _MISSING:
        raise ValueError(f"Missing required config: {config_key}")
    return value


def get_optional_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    return section.get(field, default)


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise _type_error(config_key, "a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise _type_error(config_key, "a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    """Accept ints only; YAML booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise _type_error(config_key, "an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    """Accept ints and floats, returned as float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _type_error(config_key, "a number")
    return float(value)


def expect_mapping(value: Any, config_key: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _type_error(config_key, "an object")
    return value


def _type_error(config_key: str, expected: str) -> TypeError:
    return TypeError(f"{config_key} must be {expected}")
