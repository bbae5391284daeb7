"""
Repository-level pytest configuration.

Why this exists:
  - Put the repository root on sys.path so `testsuites` and `run_tests`
    import the same way locally and in CI
  - Provide path fixtures shared by every suite
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def schemas_root(project_root: Path) -> Path:
    """Return the bundled contract schema directory."""
    return project_root / "testsuites" / "contract_testing" / "schemas"
