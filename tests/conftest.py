"""Shared fixtures for dotnet-user-secrets tests."""
from pathlib import Path

import pytest

from dotnet_user_secrets.secrets.domains import preferences, store
from dotnet_user_secrets.secrets.domains.store import Platform


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Fixture to create a temporary home directory on a Linux-like platform."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    monkeypatch.setattr(store, "current_platform", lambda: Platform.LINUX)

    # Mock the preferences module paths
    fake_config_dir = fake_home / ".config" / "dotnet-user-secrets"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_config_dir / "preferences.json")

    # Keep the user's editor out of tests
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)

    return fake_home


@pytest.fixture
def secrets_root(temp_home):
    return temp_home / ".microsoft" / "usersecrets"


@pytest.fixture
def project_dir(tmp_path):
    directory = tmp_path / "src" / "WebApi"
    directory.mkdir(parents=True)
    return directory
