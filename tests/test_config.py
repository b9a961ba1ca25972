"""Tests for config loading."""

import os
import tempfile

from spicesync.config import SpiceSyncConfig, load_config


def test_load_config_defaults(monkeypatch):
    """Loading with no path returns all defaults."""
    monkeypatch.delenv("SPICESYNC_DB", raising=False)
    config = load_config()
    assert isinstance(config, SpiceSyncConfig)
    assert config.camera.index == 0
    assert config.camera.jpeg_quality == 80
    assert config.ai.backend == "gemini"
    assert config.ai.timeout == 60.0
    assert config.ai.recipe_count == 3
    assert config.ai.gemini.model == "gemini-2.0-flash"
    assert config.storage.db_path == "~/.config/spicesync/spicesync.db"


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.camera.index == 0


def test_load_config_from_toml(monkeypatch):
    """Loading a valid TOML file populates config."""
    monkeypatch.delenv("SPICESYNC_DB", raising=False)
    toml_content = b"""\
[camera]
index = 1
jpeg_quality = 90

[ai]
backend = "claude"
timeout = 15
recipe_count = 4

[ai.claude]
api_key = "test-key-123"
model = "claude-test"

[storage]
db_path = "/var/lib/spicesync.db"
"""
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)

    assert config.camera.index == 1
    assert config.camera.jpeg_quality == 90
    assert config.ai.backend == "claude"
    assert config.ai.timeout == 15.0
    assert config.ai.recipe_count == 4
    assert config.ai.claude.api_key == "test-key-123"
    assert config.ai.claude.model == "claude-test"
    assert config.storage.db_path == "/var/lib/spicesync.db"


def test_api_keys_from_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-claude")
    config = load_config()
    assert config.ai.gemini.api_key == "env-gemini"
    assert config.ai.claude.api_key == "env-claude"


def test_legacy_api_key_variable(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")
    config = load_config()
    assert config.ai.gemini.api_key == "legacy-key"


def test_db_path_from_environment(monkeypatch):
    monkeypatch.setenv("SPICESYNC_DB", "/tmp/other.db")
    assert load_config().storage.db_path == "/tmp/other.db"
