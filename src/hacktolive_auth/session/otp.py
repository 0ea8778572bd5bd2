"""Resend-cooldown state machine for one-time-code verification screens.

States and transitions::

    Counting(n) --1s--> Counting(n-1) ... Counting(0) == ReadyToResend
    ReadyToResend --resend()--> Counting(initial)      (optimistic)
    any --verify() ok--> Verified                      (terminal)

The reset on resend happens *before* the network call is awaited, which keeps
the resend control disabled while the request is outstanding.  A resend
attempted while counting is ignored.  After teardown (:meth:`close`, or
leaving :meth:`OtpChallengeFlow.mounted`) no transition happens any more.

Usage
-----
>>> async with OtpChallengeFlow(api, "user@example.com").mounted() as flow:
...     await flow.wait_until_ready()
...     await flow.resend()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import TYPE_CHECKING, AsyncIterator, Final

import anyio

from hacktolive_auth.session.clock import Sleeper, default_sleep
from hacktolive_auth.session.errors import AuthError, InvalidOtpError
from hacktolive_auth.session.models import OtpPhase, OtpState
from hacktolive_auth.session.notifications import (
    LoggingNotificationSink,
    Notification,
    NotificationSink,
)

if TYPE_CHECKING:  # pragma: no cover
    from hacktolive_auth.api.base import OtpApi

_LOG = logging.getLogger("hacktolive.session.otp")

DEFAULT_COOLDOWN: Final[int] = 120
CODE_LENGTH: Final[int] = 6


class OtpChallengeFlow:
    """Countdown and resend controller for a single verification screen."""

    def __init__(
        self,
        api: OtpApi,
        contact: str,
        *,
        initial: int = DEFAULT_COOLDOWN,
        notifier: NotificationSink | None = None,
        sleep: Sleeper = default_sleep,
    ) -> None:
        if initial <= 0:
            raise ValueError("initial cooldown must be a positive number of seconds")
        self.api = api
        self.contact = contact
        self.initial = initial
        self.notifier = notifier or LoggingNotificationSink()
        self._sleep = sleep
        self._state = OtpState(remaining=initial)
        self._closed = False
        # anyio primitives need a running event loop, so both are created lazily
        self._changed: anyio.Event | None = None
        self._ticker_scope: anyio.CancelScope | None = None

    # ------------------------------------------------------------------ #
    # Read side                                                          #
    # ------------------------------------------------------------------ #
    @property
    def state(self) -> OtpState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def format_remaining(self) -> str:
        """Render the cooldown as ``m:ss``."""
        minutes, seconds = divmod(self._state.remaining, 60)
        return f"{minutes}:{seconds:02d}"

    # ------------------------------------------------------------------ #
    # Transitions                                                        #
    # ------------------------------------------------------------------ #
    def _set_state(self, state: OtpState) -> None:
        self._state = state
        if self._changed is not None:
            self._changed.set()
            self._changed = None

    async def _wait_change(self) -> None:
        if self._changed is None:
            self._changed = anyio.Event()
        await self._changed.wait()

    def tick(self) -> OtpState:
        """Advance the countdown by one second."""
        if self._closed or self._state.phase is not OtpPhase.COUNTING:
            return self._state
        self._set_state(replace(self._state, remaining=self._state.remaining - 1))
        return self._state

    async def resend(self) -> bool:
        """Request a new code if the cooldown has elapsed.

        Returns *False* when the request was ignored (still counting, in flight,
        verified or torn down).  A failing resend call is reported through the
        notifier; the timer stays reset either way.
        """
        if self._closed or not self._state.can_resend or self._state.in_flight:
            _LOG.debug("Resend ignored in phase=%s", self._state.phase.value)
            return False

        self._set_state(OtpState(remaining=self.initial, in_flight=True))
        try:
            await self.api.resend_code(self.contact)
        except AuthError as exc:
            _LOG.warning("OTP resend failed: %s", exc.code)
            self.notifier.notify(
                Notification.error("Failed to resend code. Please try again.", exc.reason)
            )
        else:
            self.notifier.notify(
                Notification.success(f"A new verification code has been sent to {self.contact}")
            )
        finally:
            if not self._closed:
                self._set_state(replace(self._state, in_flight=False))
        return True

    async def verify(self, code: str) -> None:
        """Submit *code*; on success the challenge is complete and torn down.

        Raises
        ------
        InvalidOtpError
            If *code* is not exactly six digits (no request is sent).
        AuthError
            If the backend rejects the code or cannot be reached.
        """
        if self._state.verified:
            return
        if self._closed:
            raise RuntimeError("OTP challenge already torn down")
        code = code.strip()
        if len(code) != CODE_LENGTH or not code.isdigit():
            raise InvalidOtpError()
        try:
            await self.api.verify_code(self.contact, code)
        except AuthError as exc:
            self.notifier.notify(
                Notification.error("Invalid verification code. Please try again.", exc.reason)
            )
            raise
        self._set_state(replace(self._state, verified=True, in_flight=False))
        self.notifier.notify(Notification.success("Verification successful! Redirecting..."))
        self.close()

    async def wait_until_ready(self) -> OtpState:
        """Suspend until resend becomes available or the challenge ends."""
        while not self._state.can_resend and not self._state.verified and not self._closed:
            await self._wait_change()
        return self._state

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #
    async def _run_ticker(self) -> None:
        with anyio.CancelScope() as scope:
            self._ticker_scope = scope
            while not self._closed:
                phase = self._state.phase
                if phase is OtpPhase.COUNTING:
                    await self._sleep(1)
                    self.tick()
                elif phase is OtpPhase.READY_TO_RESEND:
                    await self._wait_change()
                else:
                    return

    @asynccontextmanager
    async def mounted(self) -> AsyncIterator[OtpChallengeFlow]:
        """Run the per-second ticker for the lifetime of the ``async with`` block."""
        if self._closed:
            raise RuntimeError("OTP challenge already torn down")
        async with anyio.create_task_group() as tg:
            tg.start_soon(self._run_ticker)
            try:
                yield self
            finally:
                self.close()

    def close(self) -> None:
        """Cancel the ticker; later ticks and resends are ignored."""
        if self._closed:
            return
        self._closed = True
        if self._ticker_scope is not None:
            self._ticker_scope.cancel()
        if self._changed is not None:
            self._changed.set()
            self._changed = None
