"""Providers command: list configured search providers."""

import click

from research_orchestrator.cli.logging import cli_command
from research_orchestrator.cli.output import emit_success
from research_orchestrator.cli.registry import get_context
from research_orchestrator.core.research.providers import create_providers


@click.command("providers")
@click.pass_context
@cli_command("providers")
def providers_cmd(ctx: click.Context) -> None:
    """List the configured search providers and the origin of their documents."""
    config = get_context(ctx).config
    providers = create_providers(config)
    emit_success(
        {
            "providers": [
                {"name": provider.get_provider_name(), "origin": provider.origin.value}
                for provider in providers
            ],
            "provider_timeout": config.provider_timeout,
            "gathering_budget": config.gathering_budget,
            "max_concurrent": config.max_concurrent,
        }
    )
