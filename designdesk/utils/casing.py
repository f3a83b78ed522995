"""
Key casing conversion between the API convention (camelCase) and the
storage convention (snake_case).

Conversions walk arbitrarily nested data: mappings get every key
rewritten and their values converted, sequences are converted
element-wise, anything else is returned untouched.
"""

import re
from typing import Any, Callable, Mapping

_SNAKE_BOUNDARY = re.compile(r"_([a-z])")
_CAMEL_BOUNDARY = re.compile(r"[A-Z]")


def to_camel_case(key: str) -> str:
    """created_at -> createdAt"""
    return _SNAKE_BOUNDARY.sub(lambda match: match.group(1).upper(), key)


def to_snake_case(key: str) -> str:
    """createdAt -> created_at"""
    return _CAMEL_BOUNDARY.sub(lambda match: f"_{match.group(0).lower()}", key)


def _convert_keys(value: Any, convert_key: Callable[[str], str]) -> Any:
    if isinstance(value, Mapping):
        return {
            convert_key(key): _convert_keys(item, convert_key)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_convert_keys(item, convert_key) for item in value]
    return value


def convert_keys_to_camel(value: Any) -> Any:
    """Recursively rewrite mapping keys from snake_case to camelCase"""
    return _convert_keys(value, to_camel_case)


def convert_keys_to_snake(value: Any) -> Any:
    """Recursively rewrite mapping keys from camelCase to snake_case"""
    return _convert_keys(value, to_snake_case)
