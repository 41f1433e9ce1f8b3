"""
Request-scoped batching loader.

A thin layer over strawberry's ``DataLoader``: load calls issued during one pass
of the event loop are collected into a window and served by a single call to
the batch fetch function. Every outcome, including "not found" (``None``) and
fetch failures, is cached for the lifetime of the loader.

Each caller gets its own handle on the shared result, so a caller that times
out or is cancelled never cancels the lookup for anyone else, and the fetched
value is still cached.

Loaders are not thread-safe. Create one per request and drop it at the end of
the request so cached rows never leak between callers.
"""
from __future__ import annotations

import asyncio
import logging
from typing import (
    Awaitable,
    Callable,
    Generic,
    Hashable,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
)

from strawberry.dataloader import DataLoader

from roster_api.core.errors import FetchError, ValidationError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

BatchFetch = Callable[[List[K]], Awaitable[Mapping[K, V]]]


class BatchLoader(Generic[K, V]):
    """
    Batch and cache lookups by key.

    Parameters:
        batch_fetch: coroutine function receiving the deduplicated keys of one
            window (in first-requested order) and returning a mapping of the
            keys that exist. Keys missing from the mapping resolve to None.
        name: label used in log messages.
    """

    def __init__(self, batch_fetch: BatchFetch, *, name: str = "loader") -> None:
        self._batch_fetch = batch_fetch
        self.name = name
        self._loader: DataLoader[K, Optional[V]] = DataLoader(self._load_window)

    async def _load_window(self, keys: List[K]) -> List[Optional[V]]:
        keys = list(keys)
        logger.debug("%s: dispatching batch of %d key(s)", self.name, len(keys))
        try:
            results = await self._batch_fetch(keys)
        except FetchError as exc:
            logger.warning("%s: batch fetch of %d key(s) failed: %s", self.name, len(keys), exc)
            raise
        except Exception as exc:
            logger.warning("%s: batch fetch of %d key(s) failed: %s", self.name, len(keys), exc)
            raise FetchError(f"{self.name}: batch fetch failed") from exc
        return [results.get(key) for key in keys]

    # PUBLIC_INTERFACE
    def load(self, key: K) -> "asyncio.Future[Optional[V]]":
        """
        Return a handle resolving to the value for ``key``, or None when absent.

        Cancelling the handle only affects this caller.

        Raises:
            ValidationError: immediately, for an empty key.
        """
        self._check_key(key)
        return asyncio.shield(self._loader.load(key))

    # PUBLIC_INTERFACE
    async def load_many(self, keys: Sequence[K]) -> List[Optional[V]]:
        """Load several keys; the result follows input order, duplicates included."""
        for key in keys:
            self._check_key(key)
        handles = [self.load(key) for key in keys]
        if not handles:
            return []
        return list(await asyncio.gather(*handles))

    # PUBLIC_INTERFACE
    def prime(self, key: K, value: Optional[V]) -> None:
        """Seed the cache with a known value. Existing entries are left untouched."""
        self._check_key(key)
        self._loader.prime(key, value)

    # PUBLIC_INTERFACE
    def clear(self, key: K) -> None:
        """Forget the cached outcome for ``key`` so the next load fetches it again."""
        self._loader.clear(key)

    # PUBLIC_INTERFACE
    def clear_all(self) -> None:
        self._loader.clear_all()

    def _check_key(self, key: K) -> None:
        if key is None or key == "":
            raise ValidationError(f"{self.name}: cannot load an empty key")

    def __contains__(self, key: object) -> bool:
        return self._loader.cache_map.get(key) is not None
