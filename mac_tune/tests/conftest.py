"""Shared fixtures: an in-memory store, a captured console and a vault on tmp_path."""

import pytest

from mac_tune.snapshot import SettingsVault, VaultConfig
from mac_tune.tests.mocks import MockPreferenceStore, INITIAL_DEFAULTS, make_console_ui


@pytest.fixture
def store():
    return MockPreferenceStore(INITIAL_DEFAULTS)


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "activity.log"


@pytest.fixture
def ui(log_file):
    return make_console_ui(log_file=log_file)


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "backups"


@pytest.fixture
def vault(backup_dir, ui, store):
    return SettingsVault(VaultConfig(backup_dir=backup_dir, log=ui), store)
