"""Tests for layered configuration loading."""

import pytest

from blockswift import configuration
from blockswift.configuration import get_settings, project_options
from blockswift.errors import ConfigurationError

SETTING_KEYS = (
    "BLOCKSWIFT_PROJECT_NAME",
    "BLOCKSWIFT_BUNDLE_PREFIX",
    "BLOCKSWIFT_USER_NAME",
    "BLOCKSWIFT_MINIMUM_SYSTEM_VERSION",
    "BLOCKSWIFT_DEBUG_RULES",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    for key in SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    configuration._load_config_instance.cache_clear()
    yield
    configuration._load_config_instance.cache_clear()


def test_defaults_apply_without_sources(tmp_path):
    settings = get_settings(app_dir=tmp_path)
    assert settings.BLOCKSWIFT_PROJECT_NAME == "MyXcodeProject"
    options = project_options(settings)
    assert options.bundle_identifier("MyApp") == "com.example.MyApp"
    assert options.user_name == "user"
    assert options.minimum_system_version == "10.15"


def test_environment_overrides_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCKSWIFT_BUNDLE_PREFIX", "org.sample")
    monkeypatch.setenv("BLOCKSWIFT_MINIMUM_SYSTEM_VERSION", "12.0")
    options = project_options(get_settings(app_dir=tmp_path))
    assert options.bundle_identifier("App") == "org.sample.App"
    assert options.minimum_system_version == "12.0"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("BLOCKSWIFT_USER_NAME=alice\n", encoding="utf-8")
    assert get_settings(app_dir=tmp_path).BLOCKSWIFT_USER_NAME == "alice"


def test_invalid_bundle_prefix_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCKSWIFT_BUNDLE_PREFIX", "not a prefix!")
    with pytest.raises(ConfigurationError, match="BLOCKSWIFT_BUNDLE_PREFIX"):
        get_settings(app_dir=tmp_path)


def test_trailing_dot_in_prefix_is_normalised(tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCKSWIFT_BUNDLE_PREFIX", "com.acme.")
    assert get_settings(app_dir=tmp_path).BLOCKSWIFT_BUNDLE_PREFIX == "com.acme"


def test_process_environment_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "BLOCKSWIFT_USER_NAME=alice\nBLOCKSWIFT_PROJECT_NAME=FromFile\n", encoding="utf-8"
    )
    monkeypatch.setenv("BLOCKSWIFT_USER_NAME", "bob")
    settings = get_settings(app_dir=tmp_path)
    assert settings.BLOCKSWIFT_USER_NAME == "bob"
    assert settings.BLOCKSWIFT_PROJECT_NAME == "FromFile"


def test_unrelated_variables_are_ignored(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("OTHER_TOOL_SETTING=1\n", encoding="utf-8")
    monkeypatch.setenv("BLOCKSWIFT_UNKNOWN", "x")
    assert get_settings(app_dir=tmp_path).BLOCKSWIFT_PROJECT_NAME == "MyXcodeProject"


def test_invalid_user_name_is_reported_as_bullet(tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCKSWIFT_USER_NAME", "a/b")
    with pytest.raises(ConfigurationError) as excinfo:
        get_settings(app_dir=tmp_path)
    assert str(excinfo.value).startswith("Configuration validation errors detected:\n- ")
    assert "BLOCKSWIFT_USER_NAME" in str(excinfo.value)
