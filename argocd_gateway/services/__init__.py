import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def retry(
    coro_factory: Callable[[], Awaitable[T]],
    attempts: int = 4,
    base_delay: float = 0.5,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    jitter: float = 0.25,
) -> T:
    """Retry an async operation with exponential backoff and jitter.

    - coro_factory: zero-arg callable returning an awaitable
    - attempts: max attempts (>=1)
    - base_delay: starting delay in seconds
    - retry_on: exception types to retry on
    - jitter: extra random seconds added to each backoff
    """
    last_exc: Optional[BaseException] = None
    for i in range(max(1, attempts)):
        try:
            return await coro_factory()
        except retry_on as e:
            last_exc = e
            if i + 1 < max(1, attempts):
                await asyncio.sleep(base_delay * (2 ** i) + random.random() * jitter)
    assert last_exc is not None
    raise last_exc


@dataclass
class PollResult:
    done: bool
    attempts: int


async def poll(
    check: Callable[[], Awaitable[bool]],
    attempts: int,
    delay: float,
    on_error: Optional[Callable[[int, Exception], None]] = None,
    sleep: Sleep = asyncio.sleep,
) -> PollResult:
    """Call ``check`` until it returns ``True`` or ``attempts`` calls were made.

    ``delay`` is slept after a ``False`` answer when another attempt remains.
    An exception from ``check`` is handed to ``on_error`` with the 0-based
    attempt index and the next attempt starts right away. Indices run from 0
    to ``attempts - 1``.

    Nothing is slept after the last attempt, so an exhausted poll waits at
    most ``(attempts - 1) * delay`` seconds.
    """
    made = 0
    for attempt in range(attempts):
        made += 1
        try:
            if await check():
                return PollResult(done=True, attempts=made)
        except Exception as e:  # noqa: BLE001
            if on_error is not None:
                on_error(attempt, e)
            continue
        if attempt + 1 < attempts:
            await sleep(delay)
    return PollResult(done=False, attempts=made)
