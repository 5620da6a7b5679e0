import asyncio

import httpx
import pytest

from studysharper.client.cancel import CancelToken
from studysharper.client.retry import RetryOptions, retry_api_call
from studysharper.core.errors import RequestAborted
from studysharper.models.flashcards import ApiResult

FAST = RetryOptions(max_attempts=3, initial_delay=0, max_delay=0)


class Operation:
    """Opération scriptée: renvoie (ou lève) les éléments de `outcomes` dans l'ordre."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_first_success_is_returned():
    op = Operation(ApiResult.success(200, ["a"]))

    result = await retry_api_call(op, FAST)

    assert result.ok and result.data == ["a"]
    assert op.calls == 1


@pytest.mark.asyncio
async def test_retries_until_success():
    op = Operation(
        ApiResult.failure(503, "unavailable"),
        ApiResult.failure(503, "unavailable"),
        ApiResult.success(200, {"id": "s1"}),
    )

    result = await retry_api_call(op, FAST)

    assert result.ok
    assert result.status == 200
    assert op.calls == 3


@pytest.mark.asyncio
async def test_exhausted_attempts_return_last_failure():
    op = Operation(ApiResult.failure(500, "boom"))

    result = await retry_api_call(op, FAST)

    assert result.ok is False
    assert result.status == 500
    assert result.data is None
    assert result.error == "boom"
    assert op.calls == 3


@pytest.mark.asyncio
async def test_network_error_becomes_failure_result():
    request = httpx.Request("GET", "http://proxy.test/api/flashcards/sets")
    op = Operation(httpx.ConnectError("connection refused", request=request))

    result = await retry_api_call(op, RetryOptions(max_attempts=2, initial_delay=0))

    assert result.ok is False
    assert result.status == 0
    assert "connection refused" in result.error
    assert op.calls == 2


@pytest.mark.asyncio
async def test_retry_on_predicate_stops_early():
    op = Operation(ApiResult.failure(401, "unauthorized"))
    options = RetryOptions(max_attempts=5, initial_delay=0, retry_on=lambda r: r.status >= 500)

    result = await retry_api_call(op, options)

    assert result.status == 401
    assert op.calls == 1


@pytest.mark.asyncio
async def test_cancel_during_first_attempt_aborts_without_retry():
    started = asyncio.Event()
    calls = 0

    async def hanging():
        nonlocal calls
        calls += 1
        started.set()
        await asyncio.Event().wait()

    cancel = CancelToken()
    task = asyncio.ensure_future(retry_api_call(hanging, RetryOptions(max_attempts=5, initial_delay=0), cancel))
    await started.wait()
    cancel.cancel()

    with pytest.raises(RequestAborted):
        await asyncio.wait_for(task, timeout=1)
    assert calls == 1


@pytest.mark.asyncio
async def test_cancel_during_backoff_prevents_next_attempt():
    op = Operation(ApiResult.failure(503, "unavailable"))
    cancel = CancelToken()
    options = RetryOptions(max_attempts=3, initial_delay=30, max_delay=30)

    task = asyncio.ensure_future(retry_api_call(op, options, cancel))
    while op.calls == 0:
        await asyncio.sleep(0)
    cancel.cancel()

    with pytest.raises(RequestAborted):
        await asyncio.wait_for(task, timeout=1)
    assert op.calls == 1


@pytest.mark.asyncio
async def test_already_cancelled_token_makes_no_call():
    op = Operation(ApiResult.success(200, []))
    cancel = CancelToken()
    cancel.cancel()

    with pytest.raises(RequestAborted):
        await retry_api_call(op, FAST, cancel)
    assert op.calls == 0


def test_backoff_delays_are_capped():
    options = RetryOptions(initial_delay=0.5, backoff_factor=2.0, max_delay=3.0)

    assert [options.delay_for(n) for n in range(1, 6)] == [0.5, 1.0, 2.0, 3.0, 3.0]


def test_invalid_attempt_count():
    with pytest.raises(ValueError):
        RetryOptions(max_attempts=0)
