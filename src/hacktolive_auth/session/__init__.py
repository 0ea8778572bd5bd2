"""Client-side session core package.

This namespace hosts reusable, **HTTP-agnostic** building blocks for the
HACKTOLIVE login, signup, Google sign-in and OTP verification flows.

Sub-modules
-----------
clock
    Test-friendly sleep abstraction.
models
    Immutable dataclasses for users, profile patches and OTP state.
store
    Token/profile persistence (disk and memory).
verifier
    One-shot startup verification of a persisted token.
callback
    Google OAuth redirect parsing.
navigation
    Role-based post-authentication routing.
notifications
    Semantic success/error events for presentation layers.
controller
    The single writer of the session.
otp
    Resend-cooldown state machine.
errors
    Exception types used by the session logic.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .callback import parse_oauth_callback  # noqa: F401
from .clock import Sleeper, default_sleep  # noqa: F401
from .controller import AuthFlowController  # noqa: F401
from .errors import (  # noqa: F401
    AuthError,
    CredentialsRejectedError,
    InvalidOtpError,
    MalformedCallbackError,
    NotAuthenticatedError,
    SessionExpiredError,
    TransportError,
)
from .log_utils import get_auth_logger  # noqa: F401
from .models import (  # noqa: F401
    AuthResult,
    OtpPhase,
    OtpState,
    ProfilePatch,
    Role,
    SocialLinksPatch,
    UserProfile,
)
from .navigation import Navigator, dashboard_for  # noqa: F401
from .notifications import Notification, NotificationSink  # noqa: F401
from .otp import OtpChallengeFlow  # noqa: F401
from .store import DiskTokenStore, MemoryTokenStore, TokenStore  # noqa: F401
from .verifier import SessionVerifier, Verification  # noqa: F401

__all__ = [
    # callback
    "parse_oauth_callback",
    # clock
    "Sleeper",
    "default_sleep",
    # controller
    "AuthFlowController",
    # errors
    "AuthError",
    "CredentialsRejectedError",
    "InvalidOtpError",
    "MalformedCallbackError",
    "NotAuthenticatedError",
    "SessionExpiredError",
    "TransportError",
    # logging helpers
    "get_auth_logger",
    # models
    "AuthResult",
    "OtpPhase",
    "OtpState",
    "ProfilePatch",
    "Role",
    "SocialLinksPatch",
    "UserProfile",
    # navigation
    "Navigator",
    "dashboard_for",
    # notifications
    "Notification",
    "NotificationSink",
    # otp
    "OtpChallengeFlow",
    # store
    "DiskTokenStore",
    "MemoryTokenStore",
    "TokenStore",
    # verifier
    "SessionVerifier",
    "Verification",
]
