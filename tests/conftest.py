from __future__ import annotations

import pytest

from tests._fixtures.fake_github import FakeGitHub


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty in-memory GitHub repository (acme/webapp on main)."""
    return FakeGitHub()
