"""Client-side session and authentication flows for the HACKTOLIVE platform."""

__version__ = "0.1.0"
