from __future__ import annotations

import asyncio
from typing import Dict, List

import pytest

from roster_api.core.errors import FetchError, ValidationError
from roster_api.loaders import BatchLoader


class RecordingFetch:
    def __init__(self, data: Dict[str, object], error: Exception | None = None) -> None:
        self.data = data
        self.error = error
        self.calls: List[List[str]] = []

    async def __call__(self, keys: List[str]):
        self.calls.append(list(keys))
        if self.error is not None:
            raise self.error
        return {k: self.data[k] for k in keys if k in self.data}


class SlowFetch(RecordingFetch):
    def __init__(self, data: Dict[str, object], delay: float) -> None:
        super().__init__(data)
        self.delay = delay

    async def __call__(self, keys: List[str]):
        self.calls.append(list(keys))
        await asyncio.sleep(self.delay)
        return {k: self.data[k] for k in keys if k in self.data}


@pytest.fixture
def fetch() -> RecordingFetch:
    return RecordingFetch({"a": {"id": "a"}, "b": {"id": "b"}, "c": {"id": "c"}})


@pytest.mark.asyncio
async def test_one_window_is_one_deduplicated_fetch(fetch):
    loader = BatchLoader(fetch)

    results = await asyncio.gather(loader.load("a"), loader.load("b"), loader.load("a"), loader.load("a"))

    assert fetch.calls == [["a", "b"]]
    assert results[0] is results[2] is results[3]
    assert results[1] == {"id": "b"}


@pytest.mark.asyncio
async def test_fetch_count_equals_window_count(fetch):
    loader = BatchLoader(fetch)

    await asyncio.gather(loader.load("a"), loader.load("a"))
    await asyncio.gather(loader.load("b"), loader.load("c"), loader.load("b"))

    assert fetch.calls == [["a"], ["b", "c"]]


@pytest.mark.asyncio
async def test_cached_key_is_not_fetched_again(fetch):
    loader = BatchLoader(fetch)

    first = await loader.load("a")
    second = await loader.load("a")

    assert first is second
    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_load_many_keeps_order_and_duplicates(fetch):
    loader = BatchLoader(fetch)

    results = await loader.load_many(["a", "a", "b"])

    assert len(results) == 3
    assert results[0] is results[1]
    assert results[2] == {"id": "b"}
    assert len(fetch.calls) == 1
    assert set(fetch.calls[0]) == {"a", "b"}


@pytest.mark.asyncio
async def test_load_many_of_nothing_does_not_fetch(fetch):
    loader = BatchLoader(fetch)

    assert await loader.load_many([]) == []
    assert fetch.calls == []


@pytest.mark.asyncio
async def test_fetch_failure_fails_whole_window():
    boom = RuntimeError("connection reset")
    fetch = RecordingFetch({}, error=boom)
    loader = BatchLoader(fetch)

    results = await asyncio.gather(
        loader.load("x"), loader.load("y"), loader.load("z"), return_exceptions=True
    )

    assert len(fetch.calls) == 1
    assert all(isinstance(r, FetchError) for r in results)
    assert results[0] is results[1] is results[2]
    assert results[0].__cause__ is boom


@pytest.mark.asyncio
async def test_fetch_error_from_store_is_passed_through():
    error = FetchError("store offline")
    loader = BatchLoader(RecordingFetch({}, error=error))

    with pytest.raises(FetchError) as info:
        await loader.load("x")

    assert info.value is error


@pytest.mark.asyncio
async def test_failure_is_cached(fetch):
    fetch.error = RuntimeError("down")
    loader = BatchLoader(fetch)

    with pytest.raises(FetchError):
        await loader.load("a")
    fetch.error = None
    with pytest.raises(FetchError):
        await loader.load("a")

    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_missing_key_resolves_to_none_and_is_cached(fetch):
    loader = BatchLoader(fetch)

    assert await loader.load("missing") is None
    assert await loader.load("missing") is None
    assert fetch.calls == [["missing"]]
    assert "missing" in loader


@pytest.mark.asyncio
@pytest.mark.parametrize("key", [None, ""])
async def test_empty_key_never_reaches_fetch(fetch, key):
    loader = BatchLoader(fetch)

    with pytest.raises(ValidationError):
        loader.load(key)
    with pytest.raises(ValidationError):
        await loader.load_many(["a", key])

    await asyncio.sleep(0)
    assert fetch.calls == []


@pytest.mark.asyncio
async def test_clear_and_clear_all_force_refetch(fetch):
    loader = BatchLoader(fetch)

    await loader.load_many(["a", "b"])
    loader.clear("a")
    await loader.load_many(["a", "b"])
    loader.clear_all()
    await loader.load("b")

    assert fetch.calls == [["a", "b"], ["a"], ["b"]]


@pytest.mark.asyncio
async def test_prime_skips_fetch(fetch):
    loader = BatchLoader(fetch)

    loader.prime("p", {"id": "p"})
    loader.prime("p", {"id": "other"})

    assert await loader.load("p") == {"id": "p"}
    assert fetch.calls == []


@pytest.mark.asyncio
async def test_cancelled_waiter_keeps_fetched_value_cached(fetch):
    loader = BatchLoader(fetch)

    pending = loader.load("a")
    await asyncio.sleep(0)
    pending.cancel()
    await asyncio.sleep(0.01)

    assert await loader.load("a") == {"id": "a"}
    assert fetch.calls == [["a"]]


@pytest.mark.asyncio
async def test_cancelled_before_dispatch_still_fetches_once(fetch):
    loader = BatchLoader(fetch)

    pending = loader.load("a")
    pending.cancel()
    await asyncio.sleep(0)

    assert await loader.load("a") == {"id": "a"}
    assert fetch.calls == [["a"]]


@pytest.mark.asyncio
async def test_one_caller_timing_out_does_not_cancel_the_others():
    fetch = SlowFetch({"a": {"id": "a"}}, delay=0.01)
    loader = BatchLoader(fetch)

    async def patient():
        await asyncio.sleep(0)
        return await loader.load("a")

    impatient, waited = await asyncio.gather(
        asyncio.wait_for(loader.load("a"), 0.001), patient(), return_exceptions=True
    )

    assert isinstance(impatient, asyncio.TimeoutError)
    assert waited == {"id": "a"}
    assert fetch.calls == [["a"]]


@pytest.mark.asyncio
async def test_nested_loads_form_a_new_window(fetch):
    loader = BatchLoader(fetch)

    async def resolve(key: str):
        value = await loader.load(key)
        # Follow-up lookups issued after the first batch resolved
        return value, await loader.load("c")

    await asyncio.gather(resolve("a"), resolve("b"))

    assert fetch.calls == [["a", "b"], ["c"]]


@pytest.mark.asyncio
async def test_loaders_do_not_share_caches(fetch):
    first, second = BatchLoader(fetch), BatchLoader(fetch)

    await first.load("a")
    await second.load("a")

    assert fetch.calls == [["a"], ["a"]]
