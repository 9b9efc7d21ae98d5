"""Gemini backend built on the google-genai SDK.

Turns map onto Gemini contents with alternating roles starting at
``user``: the instruction prompt is a user turn, the acknowledgment a
model turn, and from there operator turns are ``user`` and replies are
``model``.
"""

import logging
from collections.abc import Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from triagechat.errors import BackendError
from triagechat.lib.retry import with_retry

logger = logging.getLogger(__name__)

GEMINI_HOST = "ai.google.dev"
"""Credential name looked up for the Gemini API key."""

DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"


def to_contents(turns: Sequence[str]) -> list[types.Content]:
    """Convert transcript turns to Gemini contents with alternating roles."""
    return [
        types.Content(
            role="user" if i % 2 == 0 else "model",
            parts=[types.Part(text=turn)],
        )
        for i, turn in enumerate(turns)
    ]


class GeminiBackend:
    """Stateless chat over ``models.generate_content``.

    Transient HTTP failures and 5xx responses are retried up to
    ``max_attempts`` times; anything else, or exhausting the attempts,
    raises BackendError.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_GEMINI_MODEL,
        http_client: httpx.Client | None = None,
        max_attempts: int = 3,
        min_wait: float = 2,
        max_wait: float = 10,
        client: genai.Client | None = None,
    ) -> None:
        if client is None:
            http_options = (
                types.HttpOptions(httpx_client=http_client)
                if http_client is not None
                else None
            )
            client = genai.Client(api_key=api_key, http_options=http_options)
        self._client = client
        self.model = model
        self._generate = with_retry(
            max_attempts=max_attempts,
            min_wait=min_wait,
            max_wait=max_wait,
            extra_exceptions=(genai_errors.ServerError,),
        )(self._generate_once)

    def _generate_once(
        self, contents: list[types.Content]
    ) -> types.GenerateContentResponse:
        return self._client.models.generate_content(model=self.model, contents=contents)

    def chat(self, turns: Sequence[str]) -> str:
        logger.debug("Sending %d turns to %s", len(turns), self.model)
        try:
            response = self._generate(to_contents(turns))
        except (httpx.HTTPError, genai_errors.APIError) as e:
            raise BackendError(f"Gemini request failed: {e}") from e

        text = response.text
        if not text:
            feedback = response.prompt_feedback
            reason = feedback.block_reason if feedback is not None else None
            raise BackendError(
                f"Gemini returned no text (block reason: {reason or 'none given'})"
            )
        return text
