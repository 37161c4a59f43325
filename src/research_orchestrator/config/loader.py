"""ResearchConfig loading.

Priority (highest to lowest):
1. Environment variables (``RESEARCH_ORCHESTRATOR_*``)
2. TOML config file (``RESEARCH_ORCHESTRATOR_CONFIG_FILE`` or
   ``./research-orchestrator.toml``), ``[research]`` table
3. Default values
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from research_orchestrator.config.parsing import _env_or_none
from research_orchestrator.config.research import ResearchConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "RESEARCH_ORCHESTRATOR_CONFIG_FILE"
DEFAULT_CONFIG_FILENAME = "research-orchestrator.toml"

_ENV_OVERRIDES: Dict[str, str] = {
    "RESEARCH_ORCHESTRATOR_PROVIDERS": "providers",
    "RESEARCH_ORCHESTRATOR_PROVIDER_TIMEOUT": "provider_timeout",
    "RESEARCH_ORCHESTRATOR_GATHERING_BUDGET": "gathering_budget",
    "RESEARCH_ORCHESTRATOR_MAX_CONCURRENT": "max_concurrent",
    "RESEARCH_ORCHESTRATOR_MAX_RESULTS": "max_results_per_query",
    "RESEARCH_ORCHESTRATOR_LOG_LEVEL": "log_level",
}


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("research", {})
    if not isinstance(section, dict):
        raise ValueError(f"[research] in {path} must be a table")
    logger.debug("Loaded research config from %s", path)
    return dict(section)


def load_config(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResearchConfig:
    """Build a ResearchConfig from defaults, an optional TOML file and env vars.

    Args:
        config_file: Explicit TOML path; falls back to the env var and then
            ``./research-orchestrator.toml`` when present.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        A validated ResearchConfig.

    Raises:
        FileNotFoundError: If an explicitly requested config file is missing.
        ValueError: If the resulting configuration is invalid.
    """
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    toml_path = config_file or _env_or_none(env, CONFIG_FILE_ENV_VAR)
    if toml_path:
        path = Path(toml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data.update(_load_toml(path))
    else:
        local = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if local.exists():
            data.update(_load_toml(local))

    for env_key, field_name in _ENV_OVERRIDES.items():
        value = _env_or_none(env, env_key)
        if value is not None:
            data[field_name] = value

    return ResearchConfig.from_toml_dict(data)
