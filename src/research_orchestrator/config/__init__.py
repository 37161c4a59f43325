"""Configuration package for research-orchestrator.

Sub-modules:
    parsing  – List/number parsing helpers
    research – ResearchConfig dataclass
    loader   – load_config() with TOML and environment layering
"""

from research_orchestrator.config.loader import (  # noqa: F401
    CONFIG_FILE_ENV_VAR,
    DEFAULT_CONFIG_FILENAME,
    load_config,
)
from research_orchestrator.config.parsing import (  # noqa: F401
    _parse_float,
    _parse_int,
    _parse_list,
)
from research_orchestrator.config.research import ResearchConfig  # noqa: F401
