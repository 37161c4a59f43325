"""Per-invocation CLI context."""

from dataclasses import dataclass, field

import click

from research_orchestrator.config.research import ResearchConfig


@dataclass
class CLIContext:
    """State shared by every command of one CLI invocation."""

    config: ResearchConfig = field(default_factory=ResearchConfig)
    pretty: bool = False


def get_context(ctx: click.Context) -> CLIContext:
    """Return the CLIContext attached to ``ctx``, creating a default one."""
    root = ctx.find_root()
    if not isinstance(root.obj, CLIContext):
        root.obj = CLIContext()
    return root.obj
