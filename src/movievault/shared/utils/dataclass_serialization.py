"""Dataclass serialization utilities for MovieVault.

Converts TMDB JSON payloads into the read-only dataclasses in
``movievault.shared.models`` and back into plain dictionaries for the
response cache.

Design Principles:
- Unknown keys from the API are ignored
- JSON null on a field with a default falls back to that default
- Nested dataclasses and lists of dataclasses are converted recursively
"""

from __future__ import annotations

from dataclasses import MISSING, fields, is_dataclass
from datetime import datetime
from typing import Any, get_args, get_origin, get_type_hints


def to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass to dictionary.

    Supports nested dataclasses, lists and datetime (ISO 8601 string).

    Args:
        obj: Dataclass instance to convert

    Returns:
        Dictionary representation of the dataclass

    Raises:
        TypeError: If obj is not a dataclass

    Example:
        >>> @dataclass
        ... class Genre:
        ...     id: int
        ...     name: str
        >>> to_dict(Genre(id=18, name="Drama"))
        {'id': 18, 'name': 'Drama'}
    """
    if not is_dataclass(obj) or isinstance(obj, type):
        error_msg = f"{type(obj).__name__} is not a dataclass instance"
        raise TypeError(error_msg)

    return {field.name: _convert_value(getattr(obj, field.name)) for field in fields(obj)}


def _convert_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, dict):
        return {key: _convert_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert_value(item) for item in value]
    return str(value)


def _unwrap_optional(field_type: Any) -> Any:
    """Return T for Optional[T] / T | None, else the type unchanged."""
    args = get_args(field_type)
    if get_origin(field_type) in (list, dict) or not args:
        return field_type
    non_none = [arg for arg in args if arg is not type(None)]
    return non_none[0] if len(non_none) == 1 else field_type


def from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Create dataclass instance from dictionary.

    Args:
        cls: Dataclass class to instantiate
        data: Dictionary with field values (extra keys are ignored)

    Returns:
        Dataclass instance

    Raises:
        TypeError: If cls is not a dataclass or data is not a dict
        KeyError: If a required field is missing

    Example:
        >>> from_dict(Genre, {"id": 18, "name": "Drama", "extra": 1})
        Genre(id=18, name='Drama')
    """
    if not is_dataclass(cls):
        error_msg = f"{cls.__name__} is not a dataclass"
        raise TypeError(error_msg)
    if not isinstance(data, dict):
        error_msg = f"Expected dict for {cls.__name__}, got {type(data).__name__}"
        raise TypeError(error_msg)

    type_hints = get_type_hints(cls)
    result: dict[str, Any] = {}

    for field in fields(cls):
        has_default = field.default is not MISSING or field.default_factory is not MISSING
        value = data.get(field.name)

        if value is None:
            if has_default:
                continue
            if field.name not in data:
                raise KeyError(f"Missing required field: {field.name}")
            result[field.name] = None
            continue

        field_type = _unwrap_optional(type_hints.get(field.name, Any))
        origin = get_origin(field_type)

        if field_type is datetime and isinstance(value, str):
            result[field.name] = datetime.fromisoformat(value)
        elif is_dataclass(field_type) and isinstance(value, dict):
            result[field.name] = from_dict(field_type, value)
        elif origin is list and isinstance(value, list):
            args = get_args(field_type)
            item_type = args[0] if args else None
            if item_type is not None and is_dataclass(item_type):
                result[field.name] = [
                    from_dict(item_type, item) for item in value if isinstance(item, dict)
                ]
            else:
                result[field.name] = list(value)
        else:
            result[field.name] = value

    return cls(**result)


__all__ = ["from_dict", "to_dict"]
