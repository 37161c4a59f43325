"""research-orchestrator CLI entry point."""

import click

from research_orchestrator import __version__
from research_orchestrator.cli.commands import plan_cmd, providers_cmd, research_cmd
from research_orchestrator.cli.logging import configure_logging
from research_orchestrator.cli.output import emit_error
from research_orchestrator.cli.registry import CLIContext
from research_orchestrator.config import load_config


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a research-orchestrator.toml file.",
)
@click.option("--log-level", default=None, help="Log level (overrides config).")
@click.option("--pretty/--compact", default=False, help="Indent JSON output.")
@click.version_option(__version__, prog_name="research-orchestrator")
@click.pass_context
def cli(ctx: click.Context, config_file, log_level, pretty: bool) -> None:
    """Multi-engine research synthesis over public reference sources."""
    ctx.obj = CLIContext(pretty=pretty)
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as exc:
        emit_error(
            f"Invalid configuration: {exc}",
            code="VALIDATION_ERROR",
            error_type="validation",
            remediation="Fix the config file or RESEARCH_ORCHESTRATOR_* environment variables",
        )
    ctx.obj.config = config
    configure_logging(log_level or config.log_level)


cli.add_command(research_cmd)
cli.add_command(plan_cmd)
cli.add_command(providers_cmd)


if __name__ == "__main__":
    cli()
