import asyncio

import pytest

from adapters.batch import BestEffortBatch
from domain.errors import PartialWriteError, UpstreamFailure


async def _ok(value):
    return value


async def _fail(message):
    raise UpstreamFailure(message)


def test_all_writes_succeed():
    batch = BestEffortBatch("demo")
    batch.add("a", _ok(1)).add("b", _ok(2))
    result = asyncio.run(batch.run())

    assert result.ok
    assert sorted(result.succeeded) == ["a", "b"]
    assert result.values == {"a": 1, "b": 2}
    result.raise_for_failures("demo")


def test_failures_are_reported_without_undoing_successes():
    applied = []

    async def write(label):
        applied.append(label)
        return label

    batch = BestEffortBatch("demo")
    batch.add("record", write("record"))
    batch.add("rank", _fail("rank down"))
    batch.add("dedup", write("dedup"))
    result = asyncio.run(batch.run())

    assert not result.ok
    assert list(result.failed) == ["rank"]
    assert sorted(result.succeeded) == ["dedup", "record"]
    assert sorted(applied) == ["dedup", "record"]

    with pytest.raises(PartialWriteError) as excinfo:
        result.raise_for_failures("create restaurant")
    assert isinstance(excinfo.value, UpstreamFailure)
    assert list(excinfo.value.failed) == ["rank"]
    assert "rank" in str(excinfo.value)
