"""Command-line entry point for an interactive triage session.

Each turn is everything typed before end-of-input (Ctrl-D on a terminal);
sending end-of-input on an empty turn ends the session.

Usage:
    uv run triagechat
    uv run triagechat --backend claude --model sonnet
    printf 'hello' | uv run python -m triagechat.environment.cli

Exit status is 0 when input runs out and 1 on any startup, input or
backend failure.
"""

import logging
import sys
from typing import Annotated

import httpx
import typer

from triagechat.agent.client import create_backend, default_secrets
from triagechat.agent.config import settings
from triagechat.environment.session import Session
from triagechat.errors import ConfigurationError, SessionError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="triagechat",
    help="Interactive issue-triage chat with an LLM backend",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


@app.command()
def chat(
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="Backend to use: gemini or claude"),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model name (defaults per backend)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Run an interactive triage session on stdin/stdout."""
    _configure_logging(verbose)

    overrides: dict[str, str] = {}
    if backend is not None:
        overrides["backend"] = backend.strip().lower()
    if model is not None:
        overrides["model"] = model
    effective = settings.model_copy(update=overrides)

    with httpx.Client(timeout=effective.http_timeout_seconds) as http_client:
        try:
            ai = create_backend(
                effective, default_secrets(effective), http_client=http_client
            )
        except ConfigurationError as e:
            logger.debug("Startup failed", exc_info=True)
            raise _fail(e) from e

        session = Session(
            ai, stdin=sys.stdin.buffer, stdout=sys.stdout, stderr=sys.stderr
        )
        try:
            session.run()
        except SessionError as e:
            logger.debug("Session failed", exc_info=True)
            raise _fail(e) from e


if __name__ == "__main__":
    app()
