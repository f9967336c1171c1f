"""map-sugar - small helpers for transforming dictionaries, sync and async"""

from ._version import version as __version__
from .bridge import AsyncLoopBridge, run_sync
from .transforms import (
    map_keys,
    map_keys_and_values,
    map_keys_and_values_async,
    map_keys_async,
    map_values_async,
    map_values_with_key,
    map_values_with_key_async,
)


__all__ = [
    "AsyncLoopBridge",
    "__version__",
    "map_keys",
    "map_keys_and_values",
    "map_keys_and_values_async",
    "map_keys_async",
    "map_values_async",
    "map_values_with_key",
    "map_values_with_key_async",
    "run_sync",
]
