"""
Unit tests for OtpChallengeFlow.

Coverage:
* countdown ticks and the switch to ReadyToResend at zero
* resend ignored while counting, optimistic reset on failure
* six-digit validation and verification
* mounted() ticker driven by a fake sleep, teardown stops transitions
"""

from __future__ import annotations

import anyio
import pytest

from hacktolive_auth.session.errors import CredentialsRejectedError, InvalidOtpError
from hacktolive_auth.session.models import OtpPhase
from hacktolive_auth.session.otp import OtpChallengeFlow

CONTACT = "ada@example.com"


def _flow(api, notifier, initial: int = 5, **kwargs) -> OtpChallengeFlow:
    return OtpChallengeFlow(api, CONTACT, initial=initial, notifier=notifier, **kwargs)


def _drain(flow: OtpChallengeFlow) -> None:
    while flow.state.phase is OtpPhase.COUNTING:
        flow.tick()


# --------------------------------------------------------------------------- #
# Countdown                                                                   #
# --------------------------------------------------------------------------- #
def test_countdown_reaches_ready_after_initial_ticks(api, notifier) -> None:
    flow = _flow(api, notifier)
    for _ in range(4):
        flow.tick()
    assert flow.state.phase is OtpPhase.COUNTING
    assert flow.state.remaining == 1
    assert not flow.state.can_resend

    flow.tick()
    assert flow.state.phase is OtpPhase.READY_TO_RESEND
    assert flow.state.can_resend

    # ticking at zero is a no-op
    flow.tick()
    assert flow.state.remaining == 0


@pytest.mark.parametrize("remaining, text", [(120, "2:00"), (65, "1:05"), (9, "0:09")])
def test_format_remaining(api, notifier, remaining: int, text: str) -> None:
    flow = _flow(api, notifier, initial=remaining)
    assert flow.format_remaining() == text


def test_initial_must_be_positive(api) -> None:
    with pytest.raises(ValueError):
        OtpChallengeFlow(api, CONTACT, initial=0)


# --------------------------------------------------------------------------- #
# Resend                                                                      #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_resend_while_counting_is_ignored(api, notifier) -> None:
    flow = _flow(api, notifier)
    flow.tick()
    flow.tick()

    assert await flow.resend() is False
    assert flow.state.remaining == 3
    assert api.called("resend_code") == 0


@pytest.mark.anyio
async def test_resend_resets_timer_and_notifies(api, notifier) -> None:
    flow = _flow(api, notifier)
    _drain(flow)

    assert await flow.resend() is True
    assert flow.state.remaining == 5
    assert not flow.state.in_flight
    assert api.calls == [("resend_code", (CONTACT,))]
    assert notifier.successes[0].title == f"A new verification code has been sent to {CONTACT}"


@pytest.mark.anyio
async def test_resend_failure_keeps_timer_reset(api, notifier) -> None:
    api.resend_error = CredentialsRejectedError("Too many requests", status_code=429)
    flow = _flow(api, notifier)
    _drain(flow)

    assert await flow.resend() is True
    assert flow.state.phase is OtpPhase.COUNTING
    assert flow.state.remaining == 5
    assert notifier.errors[0].title == "Failed to resend code. Please try again."


@pytest.mark.anyio
async def test_resend_disabled_while_in_flight(notifier) -> None:
    release = anyio.Event()

    class SlowApi:
        calls = 0

        async def resend_code(self, contact: str) -> None:
            SlowApi.calls += 1
            await release.wait()

    flow = OtpChallengeFlow(SlowApi(), CONTACT, initial=5, notifier=notifier)
    _drain(flow)
    async with anyio.create_task_group() as tg:
        tg.start_soon(flow.resend)
        await anyio.wait_all_tasks_blocked()
        # timer reset before the request completes
        assert flow.state.in_flight
        assert flow.state.remaining == 5
        assert await flow.resend() is False

        # a request outlasting the cooldown keeps resend unavailable
        _drain(flow)
        assert flow.state.remaining == 0
        assert not flow.state.can_resend
        assert await flow.resend() is False
        release.set()
    assert SlowApi.calls == 1
    assert not flow.state.in_flight
    assert flow.state.can_resend


# --------------------------------------------------------------------------- #
# Verify                                                                      #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
@pytest.mark.parametrize("code", ["12345", "1234567", "12a456", ""])
async def test_verify_rejects_incomplete_code(api, notifier, code: str) -> None:
    flow = _flow(api, notifier)
    with pytest.raises(InvalidOtpError):
        await flow.verify(code)
    assert api.called("verify_code") == 0


@pytest.mark.anyio
async def test_verify_success_is_terminal(api, notifier) -> None:
    flow = _flow(api, notifier)

    await flow.verify("123456")

    assert flow.state.phase is OtpPhase.VERIFIED
    assert flow.closed
    assert notifier.successes[-1].title == "Verification successful! Redirecting..."
    assert await flow.resend() is False
    flow.tick()
    assert flow.state.phase is OtpPhase.VERIFIED


@pytest.mark.anyio
async def test_verify_rejected_code(api, notifier) -> None:
    api.verify_code_error = CredentialsRejectedError("Invalid code", status_code=400)
    flow = _flow(api, notifier)

    with pytest.raises(CredentialsRejectedError):
        await flow.verify("654321")

    assert not flow.state.verified
    assert notifier.errors[-1].title == "Invalid verification code. Please try again."


# --------------------------------------------------------------------------- #
# Ticker lifecycle                                                            #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_mounted_ticker_counts_down(api, notifier) -> None:
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)
        await anyio.sleep(0)

    flow = _flow(api, notifier, initial=3, sleep=fake_sleep)
    async with flow.mounted():
        with anyio.fail_after(5):
            state = await flow.wait_until_ready()
        assert state.phase is OtpPhase.READY_TO_RESEND
        assert slept == [1, 1, 1]

        await flow.resend()
        assert flow.state.remaining == 3
        with anyio.fail_after(5):
            await flow.wait_until_ready()

    assert flow.closed
    assert len(slept) == 6


@pytest.mark.anyio
async def test_teardown_stops_transitions(api, notifier) -> None:
    async def never(seconds: float) -> None:
        await anyio.sleep_forever()

    flow = _flow(api, notifier, sleep=never)
    async with flow.mounted():
        await anyio.wait_all_tasks_blocked()

    assert flow.closed
    before = flow.state
    flow.tick()
    assert flow.state == before
    assert await flow.resend() is False
    with pytest.raises(RuntimeError):
        async with flow.mounted():
            pass
