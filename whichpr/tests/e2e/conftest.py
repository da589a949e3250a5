"""Fixtures for end-to-end tests."""

from pathlib import Path
from typing import Generator

import pytest

from whichpr.tests.e2e.test_helpers import RepoContext, create_repo_context

@pytest.fixture
def repo_ctx(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[RepoContext, None, None]:
    """Fresh git repository on branch main."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield from create_repo_context(str(tmp_path))
