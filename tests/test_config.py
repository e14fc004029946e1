"""Tests for environment-driven configuration."""

import pytest

from config import DEFAULT_BASE_URL, Config, load_config

ENV_VARS = [
    "HOST", "PORT", "DEBUG", "TEMP_DIR", "FFMPEG_BINARY",
    "AI_GATEWAY_API_KEY", "OPENAI_API_KEY", "OPENAI_BASE_URL", "AI_GATEWAY_URL",
    "TRANSCRIPTION_MODEL", "DIARIZE_MODEL", "FORMAT_MODEL", "FORMAT_MAX_OUTPUT_TOKENS",
    "PROBE_TIMEOUT", "TRANSCODE_TIMEOUT", "CHUNK_DURATION", "CHUNK_OVERLAP",
    "DEDUP_WINDOW", "ENABLE_DIARIZATION",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    def test_defaults(self):
        cfg = Config.from_env()
        assert cfg.api_key is None
        assert cfg.base_url == DEFAULT_BASE_URL
        assert cfg.chunk_duration == 1500
        assert cfg.chunk_overlap == 15
        assert cfg.dedup_window == 1.0
        assert cfg.default_diarize is True

    def test_gateway_key_wins(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "gw-key")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-key")
        assert Config.from_env().api_key == "gw-key"

    def test_openai_key_fallback(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-key")
        assert Config.from_env().api_key == "sk-key"

    def test_empty_key_is_none(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "")
        assert Config.from_env().api_key is None

    def test_gateway_url_gets_v1(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_URL", "https://gateway.example.test/")
        assert Config.from_env().base_url == "https://gateway.example.test/v1"

    def test_explicit_base_url(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_URL", "https://gateway.example.test")
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:4000/v1")
        assert Config.from_env().base_url == "http://localhost:4000/v1"

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("TRUE", True), ("yes", True)])
    def test_diarization_toggle(self, monkeypatch, value, expected):
        monkeypatch.setenv("ENABLE_DIARIZATION", value)
        assert Config.from_env().default_diarize is expected

    def test_numeric_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("CHUNK_DURATION", "600")
        monkeypatch.setenv("CHUNK_OVERLAP", "5")
        cfg = Config.from_env()
        assert cfg.port == 9000
        assert cfg.chunk_duration == 600.0
        assert cfg.chunk_overlap == 5.0


class TestAsDict:
    def test_never_exposes_key(self):
        data = Config(api_key="sk-secret").as_dict()
        assert "sk-secret" not in data.values()
        assert "api_key" not in data
        assert data["has_api_key"] is True

    def test_repr_hides_key(self):
        assert "sk-secret" not in repr(Config(api_key="sk-secret"))


class TestLoadConfig:
    def test_creates_temp_dir(self, monkeypatch, tmp_path):
        target = tmp_path / "scratch"
        monkeypatch.setenv("TEMP_DIR", str(target))
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.temp_dir == str(target)
        assert target.is_dir()
