"""Shared test fixtures for PR Celebration."""

import os
import sys

import pytest


@pytest.fixture(scope="session")
def qapp():
    """Create a QGuiApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv or ["test"])
        app.setOrganizationName("pr-celebration-tests")
        app.setApplicationName("pr-celebration-tests")
    yield app


@pytest.fixture
def isolated_settings(qapp, tmp_path, monkeypatch):
    """Point QSettings at a temp directory and hide any real $GITHUB_TOKEN."""
    from PySide6.QtCore import QSettings
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path / "config"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tmp_path / "config"




