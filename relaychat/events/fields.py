"""Field readers for camelCase wire payloads."""

from __future__ import annotations

from typing import Any

from relaychat.errors import ProtocolViolationError


def as_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ProtocolViolationError(f"{what} must be an object")
    return value


def require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ProtocolViolationError(f"missing non-empty '{key}'")
    return value


def optional_str(data: dict[str, Any], key: str, default: str | None = None) -> str | None:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ProtocolViolationError(f"'{key}' must be a string")
    return value


def optional_bool(data: dict[str, Any], key: str, default: bool | None = None) -> bool | None:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ProtocolViolationError(f"'{key}' must be a boolean")
    return value


def optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; it is never a valid count.
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ProtocolViolationError(f"'{key}' must be a number")
    return int(value)


def optional_object(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    return as_object(value, f"'{key}'")


def optional_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProtocolViolationError(f"'{key}' must be a list")
    return value


__all__ = [
    "as_object",
    "optional_bool",
    "optional_int",
    "optional_list",
    "optional_object",
    "optional_str",
    "require_str",
]
