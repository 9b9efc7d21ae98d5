"""Backend protocol and construction.

All backend construction goes through :func:`create_backend` so startup
has one place that resolves settings, credentials and the HTTP client.

A backend is stateless: ``chat`` receives the entire transcript, priming
pair included, and returns the next turn. It keeps nothing between calls.

Examples:
    >>> from triagechat.agent.config import settings
    >>> backend = create_backend(settings, default_secrets(settings))
    >>> backend.chat(["You are a robot.", "Understood.", "hello"])
    'Hello! How can I help with the issue tracker?'
"""

import logging
from collections.abc import Sequence
from typing import Protocol

import httpx

from triagechat.agent.claude import ANTHROPIC_HOST, DEFAULT_CLAUDE_MODEL, ClaudeBackend
from triagechat.agent.config import Settings
from triagechat.agent.gemini import DEFAULT_GEMINI_MODEL, GEMINI_HOST, GeminiBackend
from triagechat.errors import ConfigurationError
from triagechat.lib.credentials import (
    ChainSecrets,
    EnvSecrets,
    NetrcSecrets,
    SecretSource,
    require_secret,
)

logger = logging.getLogger(__name__)

BACKENDS = ("gemini", "claude")


class Backend(Protocol):
    """Produces the next turn from the full ordered transcript."""

    def chat(self, turns: Sequence[str]) -> str: ...


def default_secrets(settings: Settings) -> SecretSource:
    """Environment-provided keys first, then the netrc file."""
    return ChainSecrets(
        EnvSecrets(
            {
                GEMINI_HOST: settings.gemini_api_key,
                ANTHROPIC_HOST: settings.anthropic_api_key,
            }
        ),
        NetrcSecrets(settings.netrc_path),
    )


def create_backend(
    settings: Settings,
    secrets: SecretSource,
    *,
    http_client: httpx.Client | None = None,
) -> Backend:
    """Build the backend named by ``settings.backend``.

    Raises:
        ConfigurationError: Unknown backend name or missing credentials.
    """
    match settings.backend:
        case "gemini":
            model = settings.model or DEFAULT_GEMINI_MODEL
            logger.info("Using Gemini backend with model %s", model)
            return GeminiBackend(
                require_secret(secrets, GEMINI_HOST),
                model=model,
                http_client=http_client,
                max_attempts=settings.backend_max_attempts,
            )
        case "claude":
            model = settings.model or DEFAULT_CLAUDE_MODEL
            logger.info("Using Claude backend with model %s", model)
            # The Agent SDK can also authenticate through a logged-in CLI
            return ClaudeBackend(model=model, api_key=secrets.get(ANTHROPIC_HOST))
        case other:
            raise ConfigurationError(
                f"Unknown backend {other!r}; expected one of: {', '.join(BACKENDS)}"
            )
