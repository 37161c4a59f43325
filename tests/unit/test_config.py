"""Tests for ResearchConfig and load_config()."""

import logging

import pytest

from research_orchestrator.config import (
    CONFIG_FILE_ENV_VAR,
    DEFAULT_CONFIG_FILENAME,
    ResearchConfig,
    load_config,
)
from research_orchestrator.config.parsing import _parse_list


class TestResearchConfigDefaults:
    """Default values."""

    def test_defaults(self):
        config = ResearchConfig()
        assert config.providers == ["wikipedia", "duckduckgo"]
        assert config.provider_timeout == 10.0
        assert config.gathering_budget == 25.0
        assert config.max_concurrent == 6
        assert config.executive_summary_size == 3
        assert config.min_question_length == 8

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError, match="Unknown search provider"):
            ResearchConfig(providers=["wikipedia", "bing"])

    def test_duplicate_provider_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            ResearchConfig(providers=["wikipedia", "wikipedia"])

    def test_empty_provider_list_rejected(self):
        with pytest.raises(ValueError, match="At least one search provider"):
            ResearchConfig(providers=[])

    @pytest.mark.parametrize(
        "field_name, value",
        [
            ("provider_timeout", 0),
            ("gathering_budget", -1.0),
            ("max_concurrent", 0),
            ("max_results_per_query", 0),
            ("max_retries", -1),
            ("key_sentence_count", 0),
            ("executive_summary_size", 0),
        ],
    )
    def test_limits_validated(self, field_name, value):
        with pytest.raises(ValueError, match=field_name):
            ResearchConfig(**{field_name: value})

    def test_timeout_above_budget_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="research_orchestrator.config.research"):
            ResearchConfig(provider_timeout=30.0, gathering_budget=5.0)
        assert "exceeds gathering_budget" in caplog.text


class TestFromTomlDict:
    """Parsing of the [research] table."""

    def test_comma_separated_providers(self):
        config = ResearchConfig.from_toml_dict({"providers": "DuckDuckGo, wikipedia"})
        assert config.providers == ["duckduckgo", "wikipedia"]

    def test_numbers_coerced(self):
        config = ResearchConfig.from_toml_dict({"provider_timeout": "4.5", "max_concurrent": "2"})
        assert config.provider_timeout == 4.5
        assert config.max_concurrent == 2

    def test_invalid_number_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="research_orchestrator.config.parsing"):
            config = ResearchConfig.from_toml_dict({"gathering_budget": "soon"})
        assert config.gathering_budget == 25.0
        assert "gathering_budget" in caplog.text

    def test_log_level_upper_cased(self):
        assert ResearchConfig.from_toml_dict({"log_level": "debug"}).log_level == "DEBUG"

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError):
            ResearchConfig.from_toml_dict({"providers": ["wikipedia", "bing"]})

    def test_empty_provider_list_raises(self):
        with pytest.raises(ValueError, match="At least one search provider"):
            ResearchConfig.from_toml_dict({"providers": []})


class TestParseList:
    def test_variants(self):
        assert _parse_list(None) == []
        assert _parse_list(" a, ,B ") == ["a", "b"]
        assert _parse_list(["X", " y "]) == ["x", "y"]


class TestLoadConfig:
    """Layering of defaults, TOML file and environment."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config(environ={}) == ResearchConfig()

    def test_explicit_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "custom.toml"
        path.write_text('[research]\nproviders = ["wikipedia"]\ngathering_budget = 8.0\n')
        config = load_config(str(path), environ={})
        assert config.providers == ["wikipedia"]
        assert config.gathering_budget == 8.0

    def test_file_from_env_var(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "from-env.toml"
        path.write_text("[research]\nmax_concurrent = 2\n")
        config = load_config(environ={CONFIG_FILE_ENV_VAR: str(path)})
        assert config.max_concurrent == 2

    def test_local_file_discovered(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("[research]\nprovider_timeout = 3.0\n")
        assert load_config(environ={}).provider_timeout == 3.0

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "custom.toml"
        path.write_text('[research]\nproviders = ["wikipedia"]\nmax_concurrent = 2\n')
        config = load_config(
            str(path),
            environ={
                "RESEARCH_ORCHESTRATOR_PROVIDERS": "duckduckgo",
                "RESEARCH_ORCHESTRATOR_MAX_CONCURRENT": "4",
                "RESEARCH_ORCHESTRATOR_LOG_LEVEL": "info",
            },
        )
        assert config.providers == ["duckduckgo"]
        assert config.max_concurrent == 4
        assert config.log_level == "INFO"

    def test_blank_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config(environ={"RESEARCH_ORCHESTRATOR_PROVIDERS": "  "})
        assert config.providers == ["wikipedia", "duckduckgo"]

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.toml"), environ={})

    def test_research_must_be_table(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('research = "nope"\n')
        with pytest.raises(ValueError, match="must be a table"):
            load_config(str(path), environ={})
