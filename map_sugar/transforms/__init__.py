"""Synchronous and concurrent dictionary transforms."""

from .concurrent import map_keys_and_values_async, map_keys_async, map_values_async, map_values_with_key_async
from .sync import map_keys, map_keys_and_values, map_values_with_key


__all__ = [
    "map_keys",
    "map_keys_and_values",
    "map_keys_and_values_async",
    "map_keys_async",
    "map_values_async",
    "map_values_with_key",
    "map_values_with_key_async",
]
