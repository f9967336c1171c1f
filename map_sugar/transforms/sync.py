"""Synchronous key/value transforms that build a new dict."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping


logger = logging.getLogger(__name__)

_K = TypeVar("_K", bound="Hashable")
_V = TypeVar("_V")
_NK = TypeVar("_NK", bound="Hashable")
_NV = TypeVar("_NV")

_PAIR_SIZE = 2


def as_pair(result: Any) -> tuple[Any, Any]:
    """Return ``result`` as a ``(key, value)`` tuple or raise ``TypeError``."""
    if not isinstance(result, tuple | list) or len(result) != _PAIR_SIZE:
        msg = f"transform must return a (key, value) pair, got {result!r}"
        raise TypeError(msg)
    key, value = result
    return key, value


def map_keys(mapping: Mapping[_K, _V], transform: Callable[[_K], _NK]) -> dict[_NK, _V]:
    """Return a new dict with every key passed through ``transform``.

    Values are carried over untouched. When two keys transform to the same
    new key the entry visited last (in ``mapping`` iteration order) wins and
    the earlier value is dropped without error.

    >>> map_keys({"a": 1, "b": 2}, str.upper)
    {'A': 1, 'B': 2}
    """
    result: dict[_NK, _V] = {}
    for key, value in mapping.items():
        result[transform(key)] = value
    if len(result) != len(mapping):
        logger.debug("map_keys collapsed %d colliding keys", len(mapping) - len(result))
    return result


def map_values_with_key(mapping: Mapping[_K, _V], transform: Callable[[_V, _K], _NV]) -> dict[_K, _NV]:
    """Return a new dict with each value replaced by ``transform(value, key)``.

    >>> map_values_with_key({"a": 1, "b": 2}, lambda value, key: f"{key}{value}")
    {'a': 'a1', 'b': 'b2'}
    """
    return {key: transform(value, key) for key, value in mapping.items()}


def map_keys_and_values(
    mapping: Mapping[_K, _V],
    transform: Callable[[_K, _V], tuple[_NK, _NV]],
) -> dict[_NK, _NV]:
    """Return a new dict built from the ``(key, value)`` pairs ``transform`` returns.

    Colliding keys follow the same last-write-wins rule as :func:`map_keys`.
    """
    result: dict[_NK, _NV] = {}
    for key, value in mapping.items():
        new_key, new_value = as_pair(transform(key, value))
        result[new_key] = new_value
    if len(result) != len(mapping):
        logger.debug("map_keys_and_values collapsed %d colliding keys", len(mapping) - len(result))
    return result
