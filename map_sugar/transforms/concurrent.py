"""Concurrent (asyncio) variants of the dict transforms.

Every entry's transform runs in its own task inside an ``asyncio.TaskGroup``.
All tasks are created before any of them is awaited and the output dict is
assembled only after the group has joined, by the calling coroutine alone.

Transforms may be coroutine functions or plain callables; awaitable results
are awaited, anything else is used as returned.

Failure handling follows ``TaskGroup``: the first failing transform cancels the
remaining tasks and the call raises an ``ExceptionGroup`` holding the
failure(s). No partial dict is ever returned.

Results are merged in submission order (the input's iteration order), so key
collisions resolve exactly like the synchronous helpers: the entry visited
last wins.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, nullcontext
from functools import partial
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, TypeVar

from .sync import as_pair


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Hashable, Mapping


logger = logging.getLogger(__name__)

_K = TypeVar("_K", bound="Hashable")
_V = TypeVar("_V")
_NK = TypeVar("_NK", bound="Hashable")
_NV = TypeVar("_NV")


def _gate(limit: int | None) -> AbstractAsyncContextManager[Any]:
    if limit is None:
        return nullcontext()
    if isinstance(limit, bool) or not isinstance(limit, int):
        msg = f"limit must be an int or None, got {type(limit).__name__}"
        raise TypeError(msg)
    if limit < 1:
        msg = f"limit must be a positive integer, got {limit}"
        raise ValueError(msg)
    return asyncio.Semaphore(limit)


async def _resolve(value: Any) -> Any:
    if isawaitable(value):
        return await value
    return value


async def _run_all(calls: list[Callable[[], Any]], limit: int | None) -> list[Any]:
    """Run every call concurrently and return results in submission order."""
    gate = _gate(limit)

    async def run_one(call: Callable[[], Any]) -> Any:
        async with gate:
            return await _resolve(call())

    logger.debug("fanning out %d transforms (limit=%s)", len(calls), limit)
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(run_one(call)) for call in calls]
    except ExceptionGroup as error:
        logger.debug("transform group failed with %d error(s)", len(error.exceptions))
        raise
    return [task.result() for task in tasks]


def _assemble(pairs: list[tuple[Any, Any]], source_size: int, operation: str) -> dict[Any, Any]:
    result = dict(pairs)
    if len(result) != source_size:
        logger.debug("%s collapsed %d colliding keys", operation, source_size - len(result))
    return result


async def map_keys_async(
    mapping: Mapping[_K, _V],
    transform: Callable[[_K], Awaitable[_NK] | _NK],
    *,
    limit: int | None = None,
) -> dict[_NK, _V]:
    """Concurrently transform every key; values are carried over.

    >>> asyncio.run(map_keys_async({"a": 1, "b": 2}, str.upper))
    {'A': 1, 'B': 2}
    """
    items = list(mapping.items())
    new_keys = await _run_all([partial(transform, key) for key, _ in items], limit)
    pairs = [(new_key, value) for new_key, (_, value) in zip(new_keys, items, strict=True)]
    return _assemble(pairs, len(items), "map_keys_async")


async def map_values_async(
    mapping: Mapping[_K, _V],
    transform: Callable[[_V], Awaitable[_NV] | _NV],
    *,
    limit: int | None = None,
) -> dict[_K, _NV]:
    """Concurrently transform every value, keeping the keys."""
    items = list(mapping.items())
    new_values = await _run_all([partial(transform, value) for _, value in items], limit)
    return {key: new_value for (key, _), new_value in zip(items, new_values, strict=True)}


async def map_values_with_key_async(
    mapping: Mapping[_K, _V],
    transform: Callable[[_V, _K], Awaitable[_NV] | _NV],
    *,
    limit: int | None = None,
) -> dict[_K, _NV]:
    """Concurrently compute ``transform(value, key)`` for every entry."""
    items = list(mapping.items())
    new_values = await _run_all([partial(transform, value, key) for key, value in items], limit)
    return {key: new_value for (key, _), new_value in zip(items, new_values, strict=True)}


async def map_keys_and_values_async(
    mapping: Mapping[_K, _V],
    transform: Callable[[_K, _V], Awaitable[tuple[_NK, _NV]] | tuple[_NK, _NV]],
    *,
    limit: int | None = None,
) -> dict[_NK, _NV]:
    """Concurrently compute a new ``(key, value)`` pair for every entry.

    A transform returning anything other than a two-item pair fails the call
    with a ``TypeError`` once every task has finished.
    """
    items = list(mapping.items())
    results = await _run_all([partial(transform, key, value) for key, value in items], limit)
    return _assemble([as_pair(result) for result in results], len(items), "map_keys_and_values_async")
