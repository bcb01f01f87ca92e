"""Shared pytest fixtures for the scaffolder test suite.

Provides reusable fixtures for:
- Temporary project directories
- Scaffold configuration and generators
- Sample route registry documents
- Mock subprocess helpers
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from aifirst.config import ScaffoldConfig
from aifirst.scaffolder import ArtifactGenerator, ArtifactKind, GenerationRequest, derive
from aifirst.scaffolder.models import DerivedIdentifiers


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Configuration & generator
# ---------------------------------------------------------------------------

@pytest.fixture
def scaffold_config(tmp_project_dir: Path) -> ScaffoldConfig:
    """Config rooted at the temp project with formatting disabled."""
    return ScaffoldConfig(project_root=tmp_project_dir, format_output=False)


@pytest.fixture
def generator(scaffold_config: ScaffoldConfig) -> ArtifactGenerator:
    """An ArtifactGenerator using the bundled templates."""
    return ArtifactGenerator(scaffold_config)


@pytest.fixture
def make_request(tmp_project_dir: Path):
    """Factory for generation requests rooted at the temp project."""

    def factory(name: str, kind: str, **flags) -> GenerationRequest:
        return GenerationRequest(
            base_name=name,
            artifact_kind=ArtifactKind.parse(kind),
            flags=flags,
            output_root=tmp_project_dir,
        )

    return factory


@pytest.fixture
def invoice_page_ids() -> DerivedIdentifiers:
    """Identifiers for an ``Invoice`` page."""
    return derive("Invoice", ArtifactKind.PAGE)


# ---------------------------------------------------------------------------
# Registry documents
# ---------------------------------------------------------------------------

@pytest.fixture
def routes_document() -> str:
    """A routes file with two registered pages."""
    return textwrap.dedent("""\
        import type { RouteObject } from 'react-router-dom';
        import { UserPage } from '@pages/User';
        import { OrderPage } from '@pages/Order';

        export const routes: RouteObject[] = [
          {
            path: '/user',
            element: <UserPage />,
          },
          {
            path: '/order',
            element: <OrderPage />,
          },
        ];
        """)


@pytest.fixture
def empty_routes_document() -> str:
    """The routes file shipped with a freshly created app."""
    return textwrap.dedent("""\
        import type { RouteObject } from 'react-router-dom';

        export const routes: RouteObject[] = [
        ];
        """)


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
