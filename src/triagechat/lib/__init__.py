"""Library utilities for the triage chat session.

This package contains reusable, **parametric** pieces that are
configured through function arguments. Backend selection, prompts and
settings belong in triagechat.agent.

Modules:
- credentials: Secret lookup (environment, netrc, chained)
- protocol: Framing helpers for the <request>/<response>/<go ...> tags
- retry: Retry decorator for backend HTTP calls
- transcript: Append-only conversation history
"""

from triagechat.lib.credentials import (
    ChainSecrets,
    EnvSecrets,
    NetrcSecrets,
    SecretSource,
    require_secret,
)
from triagechat.lib.protocol import (
    MAX_ATTEMPTS,
    Segment,
    Tag,
    code_requests,
    go_error,
    go_output,
    request,
    responses,
    segments,
    wrap,
)
from triagechat.lib.retry import with_retry
from triagechat.lib.transcript import Author, Transcript

__all__ = [
    # Credentials
    "ChainSecrets",
    "EnvSecrets",
    "NetrcSecrets",
    "SecretSource",
    "require_secret",
    # Protocol
    "MAX_ATTEMPTS",
    "Segment",
    "Tag",
    "code_requests",
    "go_error",
    "go_output",
    "request",
    "responses",
    "segments",
    "wrap",
    # Retry
    "with_retry",
    # Transcript
    "Author",
    "Transcript",
]
