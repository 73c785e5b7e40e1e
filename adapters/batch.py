# adapters/batch.py - Best-effort concurrent fan-out of independent writes
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Dict, List, Tuple

from domain.errors import PartialWriteError

logger = logging.getLogger(__name__)

@dataclass
class BatchResult:
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, BaseException] = field(default_factory=dict)
    values: Dict[str, object] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self, operation: str):
        if self.failed:
            raise PartialWriteError(operation, self.failed, self.succeeded)

class BestEffortBatch:
    """
    Collects labelled writes and issues them all at once.

    There is no atomicity: every write is attempted, completion order is
    unspecified, and writes that succeed stay applied when a sibling fails.
    The result reports which labels failed instead of a single pass/fail.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self._writes: List[Tuple[str, Awaitable]] = []

    def add(self, label: str, awaitable: Awaitable) -> "BestEffortBatch":
        self._writes.append((label, awaitable))
        return self

    async def run(self) -> BatchResult:
        labels = [label for label, _ in self._writes]
        outcomes = await asyncio.gather(
            *(awaitable for _, awaitable in self._writes),
            return_exceptions=True
        )

        result = BatchResult()
        for label, outcome in zip(labels, outcomes):
            if isinstance(outcome, BaseException):
                result.failed[label] = outcome
            else:
                result.succeeded.append(label)
                result.values[label] = outcome

        if result.failed:
            logger.error(
                f"{self.operation}: partial write, failed={sorted(result.failed)} "
                f"succeeded={result.succeeded}"
            )
        return result
