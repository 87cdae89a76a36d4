"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from mdblog.config import env_overrides, load_config, read_config_file


def test_load_config_defaults(tmp_path, monkeypatch):
    """Settings defaults apply when no config.yaml, env var, or CLI override exists."""
    monkeypatch.chdir(tmp_path)
    settings = load_config()
    assert settings.source_dir == "content/blog"
    assert settings.index_path == "lib/blog-data.json"
    assert settings.content_dir == "public/blog-content"
    assert settings.image_mode == "publish"
    assert settings.words_per_minute == 225


def test_load_config_reads_config_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("source_dir: posts\nwords_per_minute: 200\n")
    settings = load_config()
    assert settings.source_dir == "posts"
    assert settings.words_per_minute == 200


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDBLOG_SOURCE_DIR takes precedence over config.yaml source_dir."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("source_dir: posts\n")
    monkeypatch.setenv("MDBLOG_SOURCE_DIR", "drafts")
    assert load_config().source_dir == "drafts"


def test_load_config_env_coerced(tmp_path, monkeypatch):
    """MDBLOG_WORDS_PER_MINUTE env var is coerced to int."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDBLOG_WORDS_PER_MINUTE", "300")
    assert load_config().words_per_minute == 300


def test_load_config_cli_overrides_env(tmp_path, monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDBLOG_IMAGE_MODE", "preview")
    assert load_config(overrides={"image_mode": "publish"}).image_mode == "publish"
    assert load_config(overrides={"image_mode": None}).image_mode == "preview"


def test_load_config_invalid_yaml(tmp_path, monkeypatch):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


@pytest.mark.parametrize("field,value", [
    ("image_mode", "draft"),
    ("asset_prefix", "public"),
    ("words_per_minute", 0),
])
def test_load_config_rejects_invalid_values(tmp_path, monkeypatch, field, value):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValidationError):
        load_config(overrides={field: value})


def test_load_config_explicit_path(tmp_path, monkeypatch):
    """An explicit config path is read instead of ./config.yaml."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("source_dir: ignored\n")
    site = tmp_path / "site.yaml"
    site.write_text("source_dir: from-site\n")
    assert load_config(path=site).source_dir == "from-site"


def test_read_config_file_missing_is_empty(tmp_path):
    assert read_config_file(tmp_path / "absent.yaml") == {}


def test_env_overrides_only_known_nonempty_fields(monkeypatch):
    monkeypatch.setenv("MDBLOG_SOURCE_DIR", "drafts")
    monkeypatch.setenv("MDBLOG_IMAGE_MODE", "")
    monkeypatch.setenv("MDBLOG_NOT_A_FIELD", "x")
    assert env_overrides() == {"source_dir": "drafts"}
