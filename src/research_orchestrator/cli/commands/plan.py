"""Plan command: show the sub-questions for a question without gathering."""

import click

from research_orchestrator.cli.logging import cli_command
from research_orchestrator.cli.output import emit_success
from research_orchestrator.core.research.workflows.synthesis.phases.gathering import build_query
from research_orchestrator.core.research.workflows.synthesis.phases.planning import generate_sub_questions


@click.command("plan")
@click.argument("question")
@cli_command("plan")
def plan_cmd(question: str) -> None:
    """Print the sub-questions and lookup queries generated for QUESTION.

    No provider is contacted.
    """
    sub_questions = generate_sub_questions(question)
    emit_success(
        {
            "question": question.strip(),
            "subQuestions": [sq.model_dump(mode="json", by_alias=True) for sq in sub_questions],
            "queries": {sq.id: build_query(sq, question) for sq in sub_questions},
        }
    )
