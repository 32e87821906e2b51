"""Tests for the persisted missing-token advisory flag."""

import pytest

from pr_celebration.services.poller_state import PollerState


@pytest.fixture
def state(isolated_settings):
    return PollerState()


def test_initially_not_shown(state):
    assert state.has_shown_token_message() is False


def test_mark_shown(state):
    state.mark_token_message_shown()
    assert state.has_shown_token_message() is True


def test_persists_across_instances(state):
    state.mark_token_message_shown()
    assert PollerState().has_shown_token_message() is True


def test_reset(state):
    state.mark_token_message_shown()
    state.reset()
    assert state.has_shown_token_message() is False


def test_survives_settings_reload(state, isolated_settings):
    from PySide6.QtCore import QSettings
    state.mark_token_message_shown()
    settings = QSettings()
    settings.sync()
    assert PollerState(QSettings()).has_shown_token_message() is True
