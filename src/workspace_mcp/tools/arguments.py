"""Argument validation shared by the built-in tools."""

from __future__ import annotations

from workspace_mcp.errors import InvalidArgumentsError


def text_result(text: str) -> dict[str, object]:
    """Wrap text in the tool result content shape."""
    return {"content": [{"type": "text", "text": text}]}


def require_string(arguments: dict[str, object], key: str, tool: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidArgumentsError(f"{tool} {key} must be a non-empty string.")
    return value


def require_text(arguments: dict[str, object], key: str, tool: str) -> str:
    """Return a string argument that may be empty."""
    value = arguments.get(key)
    if not isinstance(value, str):
        raise InvalidArgumentsError(f"{tool} {key} must be a string.")
    return value


def optional_string(arguments: dict[str, object], key: str, tool: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentsError(f"{tool} {key} must be a string.")
    return value or None


def require_positive_int(arguments: dict[str, object], key: str, tool: str) -> int:
    value = optional_positive_int(arguments, key, tool)
    if value is None:
        raise InvalidArgumentsError(f"{tool} {key} is required.")
    return value


def optional_int(arguments: dict[str, object], key: str, tool: str) -> int | None:
    """Return an integer argument without range checks; editors report bad ranges."""
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentsError(f"{tool} {key} must be an integer.")
    return value


def optional_positive_int(arguments: dict[str, object], key: str, tool: str) -> int | None:
    value = optional_int(arguments, key, tool)
    if value is None:
        return None
    if value < 1:
        raise InvalidArgumentsError(f"{tool} {key} must be >= 1.")
    return value


def optional_bool(arguments: dict[str, object], key: str, tool: str, default: bool) -> bool:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidArgumentsError(f"{tool} {key} must be a boolean.")
    return value
