"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import perfmetrics``
resolves regardless of the working directory pytest chooses, and isolates
each test from the caller's AWS and perfmetrics environment.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()

NOW = datetime(2024, 3, 1, 7, 30, tzinfo=timezone.utc)

_ENV_VARS = (
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "PERFMETRICS_LOG_LEVEL",
    "PERFMETRICS_NON_INTERACTIVE",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test in an empty directory with no AWS settings in scope.

    The empty working directory keeps a developer's ``.env`` out of
    pydantic-settings, and the AWS config paths point at missing files.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-creds"))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def now() -> datetime:
    """Fixed batch timestamp."""
    return NOW
