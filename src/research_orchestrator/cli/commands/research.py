"""Research command: run the full synthesis pipeline for one question."""

import asyncio
import dataclasses
from typing import Any, Optional

import click

from research_orchestrator.cli.logging import cli_command, get_cli_logger
from research_orchestrator.cli.output import emit_error, emit_exception, emit_success
from research_orchestrator.cli.registry import get_context
from research_orchestrator.config.parsing import _parse_list
from research_orchestrator.core.errors import QuestionValidationError, ResearchIntegrityError
from research_orchestrator.core.research.workflows.synthesis import SynthesisWorkflow

logger = get_cli_logger()


@click.command("research")
@click.argument("question")
@click.option(
    "--providers",
    "providers_opt",
    default=None,
    help="Comma-separated providers to query (wikipedia, duckduckgo).",
)
@click.option("--budget", type=float, default=None, help="Gathering budget in seconds.")
@click.option("--timeout", type=float, default=None, help="Per-lookup timeout in seconds.")
@click.pass_context
@cli_command("research")
def research_cmd(
    ctx: click.Context,
    question: str,
    providers_opt: Optional[str],
    budget: Optional[float],
    timeout: Optional[float],
) -> None:
    """Research QUESTION and print the full multi-engine report."""
    cli_ctx = get_context(ctx)
    text = question.strip()
    if len(text) < cli_ctx.config.min_question_length:
        emit_exception(QuestionValidationError(text, cli_ctx.config.min_question_length))

    overrides: dict[str, Any] = {}
    if providers_opt is not None:
        overrides["providers"] = _parse_list(providers_opt)
    if budget is not None:
        overrides["gathering_budget"] = budget
    if timeout is not None:
        overrides["provider_timeout"] = timeout
    try:
        config = dataclasses.replace(cli_ctx.config, **overrides)
    except ValueError as exc:
        emit_error(
            str(exc),
            code="VALIDATION_ERROR",
            error_type="validation",
            remediation="Check --providers, --budget and --timeout values",
        )

    workflow = SynthesisWorkflow(config=config)
    try:
        run = asyncio.run(workflow.run_with_stats(text))
    except ResearchIntegrityError as exc:
        logger.error("Research run failed: %s", exc)
        emit_exception(exc)

    stats = run.stats
    warnings = []
    if stats.unsuccessful:
        warnings.append(f"{stats.unsuccessful} of {stats.lookups} provider lookups failed")
    emit_success(
        run.response.to_dict(),
        telemetry={"gathering": stats.to_dict()},
        warnings=warnings,
    )
