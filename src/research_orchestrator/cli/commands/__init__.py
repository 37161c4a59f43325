"""CLI command registrations."""

from research_orchestrator.cli.commands.plan import plan_cmd
from research_orchestrator.cli.commands.providers import providers_cmd
from research_orchestrator.cli.commands.research import research_cmd

__all__ = ["plan_cmd", "providers_cmd", "research_cmd"]
