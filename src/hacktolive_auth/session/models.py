"""Typed, immutable records used by the session core."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Final, Mapping


class Role(str, Enum):
    """Closed set of platform roles."""

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Return the matching role, or *None* for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


# Backend payload keys (camelCase) -> dataclass attribute names.
_WIRE_NAMES: Final[dict[str, str]] = {
    "createdAt": "created_at",
    "facebookUrl": "facebook_url",
    "twitterUrl": "twitter_url",
    "linkedinUrl": "linkedin_url",
    "instagramUrl": "instagram_url",
}
_ATTR_TO_WIRE: Final[dict[str, str]] = {v: k for k, v in _WIRE_NAMES.items()}


def _from_wire(key: str) -> str:
    return _WIRE_NAMES.get(key, key)


def _to_wire(key: str) -> str:
    return _ATTR_TO_WIRE.get(key, key)


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Snapshot of the authenticated user as returned by the backend.

    ``role`` keeps the raw backend value so that an unrecognised role survives
    a persist/restore cycle; use :attr:`role_enum` for comparisons.  Backend
    fields without a dedicated attribute (nested ``student``/``instructor``
    records and the like) are preserved in ``extra``.
    """

    id: int | str | None = None
    email: str = ""
    name: str = ""
    role: str = Role.STUDENT.value
    avatar: str | None = None
    bio: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    instagram_url: str | None = None
    created_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def role_enum(self) -> Role | None:
        return Role.parse(self.role)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        required: tuple[str, ...] = ("id", "email", "name"),
    ) -> UserProfile:
        """Build a profile from a backend JSON object.

        A ``null`` email or name reads as an empty string.

        Raises
        ------
        ValueError
            If *payload* is not a mapping or lacks one of the *required* keys.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("user payload must be a JSON object")
        known = {f.name for f in fields(cls)} - {"extra"}
        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in payload.items():
            attr = _from_wire(key)
            if attr in known:
                values[attr] = value
            else:
                extra[key] = value
        missing = [k for k in required if values.get(k) in (None, "")]
        if missing:
            raise ValueError(f"user payload missing {', '.join(missing)}")
        for key in ("email", "name"):
            if values.get(key) is None:
                values.pop(key, None)
        if values.get("role") is None:
            values["role"] = Role.STUDENT.value
        return cls(**values, extra=extra)

    def to_payload(self) -> dict[str, Any]:
        """Inverse of :meth:`from_payload` (camelCase keys, ``None`` dropped)."""
        data = asdict(self)
        extra = data.pop("extra")
        payload = {_to_wire(k): v for k, v in data.items() if v is not None}
        for key, value in extra.items():
            payload.setdefault(key, value)
        return payload

    def merge(self, changes: Mapping[str, Any]) -> UserProfile:
        """Overlay *changes* field by field and return the new profile.

        Only keys present with a non-``None`` value overwrite; omitted keys and
        ``None`` values leave the stored value untouched, so a field can never
        be cleared through a merge.  Unknown keys are merged into ``extra``.
        """
        known = {f.name for f in fields(self)} - {"extra"}
        updates: dict[str, Any] = {}
        extra = dict(self.extra)
        for key, value in changes.items():
            if value is None:
                continue
            attr = _from_wire(key)
            if attr in known:
                updates[attr] = value
            else:
                extra[key] = value
        if not updates and extra == self.extra:
            return self
        return replace(self, **updates, extra=extra)


@dataclass(frozen=True, slots=True)
class _Patch:
    """Common behaviour of partial-update records."""

    def as_changes(self) -> dict[str, Any]:
        """Return provided fields only, keyed by attribute name."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_payload(self) -> dict[str, Any]:
        """Return provided fields only, keyed by backend (camelCase) name."""
        return {_to_wire(k): v for k, v in self.as_changes().items()}

    def is_empty(self) -> bool:
        return not self.as_changes()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Build a patch from attribute or backend names; reject unknown keys."""
        allowed = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            attr = _from_wire(key)
            if attr not in allowed:
                raise ValueError(f"unsupported profile field: {key}")
            values[attr] = value
        return cls(**values)


@dataclass(frozen=True, slots=True)
class ProfilePatch(_Patch):
    """Fields accepted by ``PATCH /auth/profile``."""

    name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


@dataclass(frozen=True, slots=True)
class SocialLinksPatch(_Patch):
    """Fields accepted by ``PATCH /auth/profile/social-links``."""

    facebook_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    instagram_url: str | None = None


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Token/user pair returned by login, signup and the OAuth callback."""

    token: str
    user: UserProfile

    def __repr__(self) -> str:  # keep the token out of tracebacks and logs
        return f"AuthResult(token='****', user={self.user!r})"


class OtpPhase(str, Enum):
    COUNTING = "counting"
    READY_TO_RESEND = "ready_to_resend"
    VERIFIED = "verified"


@dataclass(frozen=True, slots=True)
class OtpState:
    """Snapshot of an OTP challenge.

    ``can_resend`` is derived, so availability and cooldown cannot disagree.
    A resend still in flight keeps it *False* even once the cooldown has run
    out.
    """

    remaining: int
    in_flight: bool = False
    verified: bool = False

    def __post_init__(self) -> None:
        if self.remaining < 0:
            raise ValueError("remaining cooldown cannot be negative")

    @property
    def can_resend(self) -> bool:
        return not self.verified and not self.in_flight and self.remaining == 0

    @property
    def phase(self) -> OtpPhase:
        if self.verified:
            return OtpPhase.VERIFIED
        if self.remaining == 0:
            return OtpPhase.READY_TO_RESEND
        return OtpPhase.COUNTING
