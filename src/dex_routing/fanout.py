"""Bounded concurrent fan-out.

Runs a batch of coroutines concurrently, each raced against its own
deadline, and reports every outcome (value, timeout or exception) in
input order. A slow task cannot delay the others beyond the deadline.
Tasks that miss the deadline are cancelled; their late results are
never observed.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """Result of one bounded task."""

    value: Optional[T] = None
    timed_out: bool = False
    error: Optional[BaseException] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.error is None


async def run_bounded(aw: Awaitable[T], timeout_s: Optional[float]) -> Outcome[T]:
    """Await ``aw`` for at most ``timeout_s`` seconds (None waits forever).

    Exceptions raised by ``aw`` are captured in the outcome, never raised.
    """
    start = time.perf_counter()
    try:
        if timeout_s is None:
            value = await aw
        else:
            value = await asyncio.wait_for(aw, timeout=timeout_s)
    except asyncio.TimeoutError:
        return Outcome(timed_out=True, elapsed_ms=_since(start))
    except Exception as exc:
        return Outcome(error=exc, elapsed_ms=_since(start))
    return Outcome(value=value, elapsed_ms=_since(start))


async def fan_out(
    awaitables: Sequence[Awaitable[Any]], timeout_s: Optional[float]
) -> List[Outcome[Any]]:
    """Run all awaitables concurrently, each with its own deadline.

    Always returns exactly one Outcome per input, in input order.
    """
    if not awaitables:
        return []
    return list(await asyncio.gather(*(run_bounded(aw, timeout_s) for aw in awaitables)))


def _since(start: float) -> float:
    return (time.perf_counter() - start) * 1000
