"""Fixtures for integration tests against a running HACKTOLIVE backend."""

import os

import pytest


@pytest.fixture
def live_credentials():
    """Email/password of an existing backend account, from the environment."""
    email = os.getenv("HACKTOLIVE_TEST_EMAIL")
    password = os.getenv("HACKTOLIVE_TEST_PASSWORD")
    if not email or not password:
        pytest.skip("HACKTOLIVE_TEST_EMAIL / HACKTOLIVE_TEST_PASSWORD not set")
    return email, password
