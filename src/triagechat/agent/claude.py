"""Claude backend built on the Claude Agent SDK.

The Agent SDK has no multi-turn history parameter, so each call renders
the transcript into one prompt: the instruction turn becomes the system
prompt and the rest are labelled by role. Calls are tool-free, single
turn, and never persist an SDK session, which keeps the backend
stateless like the session loop expects.
"""

import asyncio
import logging
from collections.abc import Sequence

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ClaudeSDKError,
    ResultMessage,
    TextBlock,
)

from triagechat.errors import BackendError

logger = logging.getLogger(__name__)

ANTHROPIC_HOST = "api.anthropic.com"
"""Credential name looked up for the Anthropic API key."""

DEFAULT_CLAUDE_MODEL = "sonnet"


def render_transcript(turns: Sequence[str]) -> tuple[str, str]:
    """Split turns into (system prompt, labelled conversation prompt)."""
    if not turns:
        raise ValueError("Cannot render an empty transcript")
    system_prompt, *rest = turns
    blocks: list[str] = []
    for offset, turn in enumerate(rest):
        # rest[0] is the acknowledgment, so even offsets are ours
        label = "assistant" if offset % 2 == 0 else "operator"
        blocks.append(f"[{label}]\n{turn}")
    return system_prompt, "\n\n".join(blocks)


class ClaudeBackend:
    """Stateless chat via a fresh one-shot Agent SDK client per call."""

    def __init__(
        self,
        *,
        model: str = DEFAULT_CLAUDE_MODEL,
        api_key: str | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key

    def build_options(self, system_prompt: str) -> ClaudeAgentOptions:
        env = {"ANTHROPIC_API_KEY": self._api_key} if self._api_key else {}
        return ClaudeAgentOptions(
            model=self.model,
            system_prompt=system_prompt,
            tools=[],
            allowed_tools=[],
            max_turns=1,
            env=env,
            extra_args={"no-session-persistence": None},
        )

    async def _query(self, turns: Sequence[str]) -> str:
        system_prompt, prompt = render_transcript(turns)
        texts: list[str] = []
        async with ClaudeSDKClient(options=self.build_options(system_prompt)) as client:
            await client.query(prompt)
            async for message in client.receive_response():
                match message:
                    case AssistantMessage():
                        texts.extend(
                            b.text for b in message.content if isinstance(b, TextBlock)
                        )
                    case ResultMessage() if message.is_error:
                        raise BackendError(f"Claude error: {message.result}")
        if not texts:
            raise BackendError("Claude returned no text")
        return "\n\n".join(texts)

    def chat(self, turns: Sequence[str]) -> str:
        logger.debug("Sending %d turns to %s", len(turns), self.model)
        try:
            return asyncio.run(self._query(turns))
        except ClaudeSDKError as e:
            raise BackendError(f"Claude request failed: {e}") from e
