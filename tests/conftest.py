from __future__ import annotations

import os
from pathlib import Path

import pytest

from digitspin.digits import digit_outlines
from digitspin.modeling import extrude

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Path:
    """Point the user config at a throwaway file so tests never touch ~/.digitspin."""

    path = tmp_path / "config" / "digitspin.cfg"
    monkeypatch.setattr("digitspin._config.CONFIG_FILE", path)
    monkeypatch.setattr("digitspin.cli.CONFIG_FILE", path)
    return path


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def digit_solids():
    """All ten digits extruded and centred on the origin."""

    return [extrude(outline, center_origin=True) for outline in digit_outlines()]
