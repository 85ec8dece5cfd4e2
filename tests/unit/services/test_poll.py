import pytest

from argocd_gateway.errors import ArgoCDConnectionError, ArgoCDError
from argocd_gateway.services import poll, retry


class Answers:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.mark.asyncio
async def test_poll_stops_on_first_true(fake_sleep, sleeps):
    check = Answers(False, False, True, False)

    result = await poll(check, attempts=5, delay=2.0, sleep=fake_sleep)

    assert result.done is True
    assert result.attempts == 3
    assert check.calls == 3
    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_poll_exhausts_without_sleeping_after_last_attempt(fake_sleep, sleeps):
    check = Answers(False, False, False)

    result = await poll(check, attempts=3, delay=1.0, sleep=fake_sleep)

    assert result.done is False
    assert result.attempts == 3
    assert sleeps == [1.0, 1.0]


@pytest.mark.asyncio
async def test_poll_error_hook_never_sees_the_attempt_limit_as_index(fake_sleep, sleeps):
    seen = []
    check = Answers(*[RuntimeError(str(i)) for i in range(4)])

    result = await poll(check, attempts=4, delay=1.0, on_error=lambda i, e: seen.append(i), sleep=fake_sleep)

    assert result.done is False
    assert seen == [0, 1, 2, 3]
    assert 4 not in seen
    # Errors retry immediately.
    assert sleeps == []


@pytest.mark.asyncio
async def test_poll_with_zero_attempts_never_checks(fake_sleep):
    check = Answers()

    result = await poll(check, attempts=0, delay=1.0, sleep=fake_sleep)

    assert result.done is False
    assert result.attempts == 0
    assert check.calls == 0


@pytest.mark.asyncio
async def test_retry_recovers_from_listed_errors():
    op = Answers(ArgoCDConnectionError("refused"), {"ok": True})

    result = await retry(op, attempts=3, base_delay=0, jitter=0, retry_on=(ArgoCDConnectionError,))

    assert result == {"ok": True}
    assert op.calls == 2


@pytest.mark.asyncio
async def test_retry_does_not_retry_other_errors():
    op = Answers(ArgoCDError(status_code=404, detail="nope"), {"ok": True})

    with pytest.raises(ArgoCDError):
        await retry(op, attempts=3, base_delay=0, jitter=0, retry_on=(ArgoCDConnectionError,))
    assert op.calls == 1


@pytest.mark.asyncio
async def test_retry_exhaustion_raises_last_error():
    op = Answers(*[ArgoCDConnectionError(f"refused {i}") for i in range(3)])

    with pytest.raises(ArgoCDConnectionError) as ei:
        await retry(op, attempts=3, base_delay=0, jitter=0, retry_on=(ArgoCDConnectionError,))
    assert ei.value.detail == "refused 2"
