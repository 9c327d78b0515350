"""Tests for configuration loading"""

import pytest

from inquilex.core.config import APIConfig, EngineConfig, InquilexConfig
from inquilex.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("INQUILEX_CORPUS_PATH", "INQUILEX_MAX_ANNOTATION_CHARS", "INQUILEX_HOST",
                 "INQUILEX_PORT", "INQUILEX_LOG_LEVEL", "INQUILEX_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = InquilexConfig()

    assert config.engine.corpus_path is None
    assert config.engine.max_query_chars == 200
    assert config.api.port == 8000
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INQUILEX_PORT", "9001")
    monkeypatch.setenv("INQUILEX_CORPUS_PATH", "/tmp/corpus.yaml")
    monkeypatch.setenv("INQUILEX_LOG_LEVEL", "warning")

    config = InquilexConfig()

    assert config.api.port == 9001
    assert config.engine.corpus_path == "/tmp/corpus.yaml"
    assert config.log_level == "WARNING"


def test_debug_override(monkeypatch):
    monkeypatch.setenv("INQUILEX_DEBUG", "true")
    config = InquilexConfig()
    assert config.api.debug is True
    assert config.log_level == "DEBUG"


def test_save_and_load(tmp_path):
    path = tmp_path / "inquilex.yaml"
    original = InquilexConfig(
        engine=EngineConfig(max_annotation_chars=500, source_query_prefix="Lei 8.245"),
        api=APIConfig(port=5050),
        log_level="DEBUG",
    )

    original.save_to_file(str(path))
    loaded = InquilexConfig.load_from_file(str(path))

    assert loaded.engine == original.engine
    assert loaded.api == original.api
    assert loaded.log_level == "DEBUG"


def test_partial_file(tmp_path):
    path = tmp_path / "inquilex.yaml"
    path.write_text("api:\n  port: 7000\n", encoding="utf-8")

    config = InquilexConfig.load_from_file(str(path))

    assert config.api.port == 7000
    assert config.api.host == "0.0.0.0"
    assert config.engine == EngineConfig()


def test_environment_wins_over_file(tmp_path, monkeypatch):
    path = tmp_path / "inquilex.yaml"
    path.write_text("api:\n  port: 7000\n", encoding="utf-8")
    monkeypatch.setenv("INQUILEX_PORT", "7100")

    assert InquilexConfig.load_from_file(str(path)).api.port == 7100


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to load config"):
        InquilexConfig.load_from_file(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize("content", [
    "engine:\n  unknown_option: 1\n",
    "engine: [unbalanced\n",
    "- just\n- a list\n",
])
def test_invalid_file(tmp_path, content):
    path = tmp_path / "inquilex.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        InquilexConfig.load_from_file(str(path))


@pytest.mark.parametrize("name", ["INQUILEX_PORT", "INQUILEX_MAX_ANNOTATION_CHARS"])
def test_non_integer_environment_value(monkeypatch, name):
    monkeypatch.setenv(name, "abc")

    with pytest.raises(ConfigError, match=name):
        InquilexConfig()
