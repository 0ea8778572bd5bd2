"""Sleep abstraction for testable countdown logic.

``Sleeper``
    Awaitable callable suspending the current task for a number of seconds.
    The OTP countdown depends on an injected ``Sleeper`` rather than calling
    :func:`anyio.sleep` directly, so tests can drive the timer without waiting
    on wall-clock time.
"""

from __future__ import annotations

from typing import Awaitable, Protocol, runtime_checkable

import anyio


@runtime_checkable
class Sleeper(Protocol):
    """Awaitable callable that suspends the caller for *seconds*."""

    def __call__(self, seconds: float) -> Awaitable[None]: ...


async def default_sleep(seconds: float) -> None:
    """Default implementation that delegates to :func:`anyio.sleep`."""
    await anyio.sleep(seconds)
