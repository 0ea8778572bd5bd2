from .main import create_app  # noqa: F401

__all__ = ["create_app"]
