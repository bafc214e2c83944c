"""Shared fixtures: keep every test offline by default."""

import pytest


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    monkeypatch.setenv("FIRESPECT_TEST_MODE", "1")
