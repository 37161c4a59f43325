"""Tests for the research-orchestrator CLI commands.

Every command prints a single JSON envelope to stdout; errors exit with
status 1. Logging is silenced with ``--log-level CRITICAL`` so output
holds only the envelope.
"""

import json
from unittest.mock import patch

from research_fakes import SCENARIO_QUESTION
from research_orchestrator import __version__
from research_orchestrator.cli.main import cli
from research_orchestrator.core.errors import ResearchIntegrityError

CORE_MODULE = "research_orchestrator.core.research.workflows.synthesis.core"
QUIET = ["--log-level", "CRITICAL"]


def _invoke(cli_runner, *args):
    result = cli_runner.invoke(cli, [*QUIET, *args])
    return result, json.loads(result.output)


# ---------------------------------------------------------------------------
# Group options
# ---------------------------------------------------------------------------


class TestGroupOptions:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config_file(self, cli_runner, tmp_path):
        result, payload = _invoke(cli_runner, "--config", str(tmp_path / "absent.toml"), "providers")
        assert result.exit_code == 1
        assert payload["success"] is False
        assert payload["data"]["error_code"] == "VALIDATION_ERROR"
        assert "Config file not found" in payload["error"]

    def test_invalid_config_file(self, cli_runner, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('[research]\nproviders = ["bing"]\n')
        result, payload = _invoke(cli_runner, "--config", str(path), "providers")
        assert result.exit_code == 1
        assert "Unknown search provider" in payload["error"]

    def test_pretty_output_is_indented(self, cli_runner):
        result = cli_runner.invoke(cli, [*QUIET, "--pretty", "providers"])
        assert result.exit_code == 0
        assert result.output.startswith("{\n  ")

    def test_compact_output_single_line(self, cli_runner):
        result = cli_runner.invoke(cli, [*QUIET, "providers"])
        assert result.output.strip().count("\n") == 0


# ---------------------------------------------------------------------------
# plan / providers
# ---------------------------------------------------------------------------


class TestPlanCommand:
    def test_prints_five_sub_questions(self, cli_runner):
        result, payload = _invoke(cli_runner, "plan", SCENARIO_QUESTION)
        assert result.exit_code == 0
        sub_questions = payload["data"]["subQuestions"]
        assert [sq["id"] for sq in sub_questions] == ["sq-1", "sq-2", "sq-3", "sq-4", "sq-5"]
        assert sub_questions[0]["focusTerms"] == ["open", "security"]
        assert set(payload["data"]["queries"]) == {sq["id"] for sq in sub_questions}

    def test_short_question_still_planned(self, cli_runner):
        result, payload = _invoke(cli_runner, "plan", "why?")
        assert result.exit_code == 0
        assert all(sq["focusTerms"] == [] for sq in payload["data"]["subQuestions"])


class TestProvidersCommand:
    def test_lists_default_providers(self, cli_runner):
        result, payload = _invoke(cli_runner, "providers")
        assert result.exit_code == 0
        assert payload["data"]["providers"] == [
            {"name": "wikipedia", "origin": "reference-encyclopedia"},
            {"name": "duckduckgo", "origin": "web-search"},
        ]
        assert payload["data"]["gathering_budget"] == 25.0

    def test_env_override(self, cli_runner, monkeypatch):
        monkeypatch.setenv("RESEARCH_ORCHESTRATOR_PROVIDERS", "duckduckgo")
        _, payload = _invoke(cli_runner, "providers")
        assert [p["name"] for p in payload["data"]["providers"]] == ["duckduckgo"]


# ---------------------------------------------------------------------------
# research
# ---------------------------------------------------------------------------


class TestResearchCommand:
    def test_short_question_rejected(self, cli_runner):
        result, payload = _invoke(cli_runner, "research", "why?")
        assert result.exit_code == 1
        assert payload["data"]["error_code"] == "VALIDATION_ERROR"
        assert payload["error"] == "Provide a more detailed research question (>= 8 characters)."

    def test_unknown_provider_option(self, cli_runner):
        result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION, "--providers", "bing")
        assert result.exit_code == 1
        assert payload["data"]["error_code"] == "VALIDATION_ERROR"

    def test_empty_provider_option(self, cli_runner):
        result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION, "--providers", "")
        assert result.exit_code == 1
        assert payload["data"]["error_code"] == "VALIDATION_ERROR"
        assert "At least one search provider" in payload["error"]

    def test_non_positive_budget(self, cli_runner):
        result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION, "--budget", "0")
        assert result.exit_code == 1
        assert "gathering_budget" in payload["error"]

    def test_full_report(self, cli_runner, corpus_providers):
        with patch(f"{CORE_MODULE}.create_providers", return_value=corpus_providers):
            result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION)

        assert result.exit_code == 0
        data = payload["data"]
        assert data["question"] == SCENARIO_QUESTION
        assert len(data["subQuestions"]) == 5
        assert [a["engine"] for a in data["analyses"]] == ["openai", "perplexity", "kimi", "gemini"]
        assert data["sources"]
        assert data["report"]["keyFindings"]
        assert payload["meta"]["telemetry"]["gathering"]["lookups"] == 10
        assert "warnings" not in payload["meta"]

    def test_overrides_reach_workflow(self, cli_runner, corpus_providers):
        with patch(f"{CORE_MODULE}.create_providers", return_value=corpus_providers[:1]) as factory:
            result, _ = _invoke(
                cli_runner, "research", SCENARIO_QUESTION, "--providers", "wikipedia", "--timeout", "2", "--budget", "9"
            )
        assert result.exit_code == 0
        config = factory.call_args.args[0]
        assert config.providers == ["wikipedia"]
        assert config.provider_timeout == 2.0
        assert config.gathering_budget == 9.0

    def test_provider_failures_become_warnings(self, cli_runner, failing_providers):
        with patch(f"{CORE_MODULE}.create_providers", return_value=failing_providers):
            result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION)
        assert result.exit_code == 0
        assert payload["success"] is True
        assert payload["meta"]["warnings"] == ["10 of 10 provider lookups failed"]
        assert payload["data"]["sources"] == []

    def test_integrity_failure(self, cli_runner, corpus_providers):
        error = ResearchIntegrityError(
            ["theme 'Broken' references unknown source src-nowhere"], question=SCENARIO_QUESTION
        )
        with patch(f"{CORE_MODULE}.create_providers", return_value=corpus_providers), patch(
            f"{CORE_MODULE}.validate_response", side_effect=error
        ):
            result, payload = _invoke(cli_runner, "research", SCENARIO_QUESTION)

        assert result.exit_code == 1
        assert payload["data"]["error_code"] == "INTEGRITY_VIOLATION"
        assert payload["data"]["details"]["violations"] == [
            "theme 'Broken' references unknown source src-nowhere"
        ]
