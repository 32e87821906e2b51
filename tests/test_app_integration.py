"""Integration tests for the application entry point."""

import os

import pytest


@pytest.fixture(autouse=True)
def offscreen_platform():
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


class TestAppImports:
    def test_app_module_importable(self):
        from pr_celebration import app
        assert hasattr(app, "run")

    def test_main_module_importable(self):
        from pr_celebration import __main__
        assert callable(__main__.main)

    def test_all_services_creatable(self, isolated_settings, tmp_path, monkeypatch):
        from pr_celebration.services import (
            CelebrationManager,
            ConfigManager,
            GitHubClient,
            NotificationPoller,
            PollerState,
        )

        monkeypatch.setattr("pr_celebration.services.celebration_manager.DATA_DIR", tmp_path / "data")
        monkeypatch.setattr(
            "pr_celebration.services.celebration_manager.HISTORY_FILE",
            tmp_path / "data" / "celebrations.json",
        )

        config = ConfigManager()
        poller = NotificationPoller(config, GitHubClient(), PollerState())
        celebrations = CelebrationManager(config)
        poller.celebration_requested.connect(celebrations.show)

        assert poller.busy is False
        assert celebrations.get_history() == []
        poller.dispose()

    def test_qml_files_exist(self):
        from pathlib import Path
        qml_dir = Path(__file__).parent.parent / "src" / "pr_celebration" / "qml"
        assert (qml_dir / "Main.qml").exists(), f"Main.qml not found in {qml_dir}"
        assert (qml_dir / "CelebrationPanel.qml").exists()
        assert (qml_dir / "SettingsWindow.qml").exists()

    def test_settings_interval_accepts_one_second(self):
        from pathlib import Path
        qml_dir = Path(__file__).parent.parent / "src" / "pr_celebration" / "qml"
        settings = (qml_dir / "SettingsWindow.qml").read_text()
        assert "from: 1\n" in settings

    def test_panel_negative_text(self):
        from pathlib import Path
        qml_dir = Path(__file__).parent.parent / "src" / "pr_celebration" / "qml"
        panel = (qml_dir / "CelebrationPanel.qml").read_text()
        assert "Still waiting for approval..." in panel
        assert "Your PR was merged or approved!" in panel
