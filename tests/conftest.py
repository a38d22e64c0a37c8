"""Pytest configuration for Wadjet tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_wadjet_env(monkeypatch):
    """Keep WADJET_* variables from the host out of settings tests."""
    for key in list(os.environ):
        if key.startswith("WADJET_"):
            monkeypatch.delenv(key)
