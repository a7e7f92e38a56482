"""Shared fixtures for cargo-sponsor tests."""

from __future__ import annotations

import pytest

from tests.helpers.graphql_backend import RecordingSleep


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Return a sleep replacement that records delays without waiting."""
    return RecordingSleep()


@pytest.fixture
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop CLI runs from reconfiguring femtologging handlers."""
    monkeypatch.setattr("cargo_sponsor.logging.basicConfig", lambda **_: None)
