"""JSON envelope output for CLI commands.

Every command prints exactly one ``ToolResponse`` envelope to stdout.
Errors print an error envelope and exit with status 1.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Mapping, NoReturn, Optional

import click

from research_orchestrator.core.errors import error_to_response
from research_orchestrator.core.responses import ToolResponse, error_response, success_response


def _is_pretty() -> bool:
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    obj = ctx.find_root().obj
    return bool(getattr(obj, "pretty", False))


def _emit(payload: Mapping[str, Any]) -> None:
    indent = 2 if _is_pretty() else None
    click.echo(json.dumps(payload, indent=indent, ensure_ascii=False))


def emit_response(response: ToolResponse) -> None:
    """Print a prebuilt envelope."""
    _emit(asdict(response))


def emit_success(
    data: Mapping[str, Any],
    *,
    telemetry: Optional[Mapping[str, Any]] = None,
    warnings: Optional[list[str]] = None,
) -> None:
    """Print a success envelope wrapping ``data``."""
    emit_response(success_response(data, telemetry=telemetry, warnings=warnings))


def emit_error(
    message: str,
    *,
    code: str = "INTERNAL_ERROR",
    error_type: str = "internal",
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope and exit with status 1."""
    emit_response(
        error_response(
            message,
            error_code=code,
            error_type=error_type,
            remediation=remediation,
            details=details,
        )
    )
    sys.exit(1)


def emit_exception(exc: Exception) -> NoReturn:
    """Print the mapped error envelope for a known exception and exit with status 1.

    Unknown exception types are reported as internal errors.
    """
    payload = error_to_response(exc)
    if payload is None:
        emit_error(f"{type(exc).__name__}: {exc}")
    _emit(payload)
    sys.exit(1)
