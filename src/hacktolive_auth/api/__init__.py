"""Backend API collaborators."""

from .base import AuthApi, OtpApi  # noqa: F401
from .client import HttpAuthApi  # noqa: F401

__all__ = ["AuthApi", "OtpApi", "HttpAuthApi"]
