"""Shared fixtures for CLI command tests."""

import logging

import pytest
from click.testing import CliRunner

from research_orchestrator.config.loader import _ENV_OVERRIDES, CONFIG_FILE_ENV_VAR


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cli_environment(tmp_path, monkeypatch):
    """Run every CLI test away from local config files and env overrides.

    Also detaches the stderr handler the CLI installs, since it is bound to
    the runner's temporary stream.
    """
    monkeypatch.chdir(tmp_path)
    for key in (CONFIG_FILE_ENV_VAR, *_ENV_OVERRIDES):
        monkeypatch.delenv(key, raising=False)
    yield
    package_logger = logging.getLogger("research_orchestrator")
    for handler in list(package_logger.handlers):
        if handler.get_name() == "research-orchestrator-cli":
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
