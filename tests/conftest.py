"""Shared pytest fixtures for unit and integration tests."""

from __future__ import annotations

from pathlib import Path
from typing import TypedDict

import pytest

from scriptfs.bootstrap.config import MARKER_FILE_NAME, SandboxConfig
from scriptfs.domain.roots import RootResolver
from scriptfs.domain.sandbox import Sandbox


class SandboxLayout(TypedDict):
    """Directories backing a hermetic sandbox fixture."""

    home: Path
    documents: Path
    installation: Path
    save_data: Path
    outside: Path


@pytest.fixture(name="layout")
def _layout(tmp_path: Path) -> SandboxLayout:
    """Create an installation root, a marked save data root and a stray directory."""

    base = tmp_path.resolve()
    home = base / "home"
    documents = home / "Documents"
    installation = base / "game"
    save_data = documents / "My Games" / "Into The Breach"
    outside = base / "outside"
    for directory in (installation, save_data, outside):
        directory.mkdir(parents=True)
    (save_data / MARKER_FILE_NAME).write_text("")
    return {
        "home": home,
        "documents": documents,
        "installation": installation,
        "save_data": save_data,
        "outside": outside,
    }


@pytest.fixture(name="resolver")
def _resolver(layout: SandboxLayout) -> RootResolver:
    """Root resolver pinned to the fixture layout."""

    config = SandboxConfig(installation_root=layout["installation"])
    return RootResolver(
        config,
        home_dir=lambda: layout["home"],
        documents_dir=lambda: layout["documents"],
    )


@pytest.fixture(name="sandbox")
def _sandbox(resolver: RootResolver, layout: SandboxLayout) -> Sandbox:
    """Sandbox context over the fixture layout."""

    return Sandbox(SandboxConfig(installation_root=layout["installation"]), resolver)
