"""Interactive session loop.

One iteration reads a whole operator turn from the input stream, sends
the full transcript to the backend, prints the reply and records it:

    AWAITING_INPUT --zero-byte read--> TERMINATED
    AWAITING_INPUT --blank read------> AWAITING_INPUT (echo on stderr)
    AWAITING_INPUT --text------------> CALLING_BACKEND
    CALLING_BACKEND --failure--------> TERMINATED (SessionError raised)
    CALLING_BACKEND --reply----------> AWAITING_INPUT

A turn ends at end-of-stream, not at a newline, so multi-line input is
one turn. Reading zero bytes ends the session; reading only whitespace
is rejected and re-prompted. These are separate conditions.

Examples:
    >>> session = Session(backend, stdin=sys.stdin.buffer, stdout=sys.stdout, stderr=sys.stderr)
    >>> session.run()  # returns on end of input, raises SessionError on failure
"""

import json
import logging
from enum import StrEnum
from typing import BinaryIO, TextIO

from triagechat.agent.client import Backend
from triagechat.agent.prompts import get_priming_pair
from triagechat.errors import BackendError, InputReadError, OutputWriteError
from triagechat.lib.transcript import Transcript

logger = logging.getLogger(__name__)

USER_PROMPT = "<user> "
MODEL_LABEL = "<model>"


class SessionState(StrEnum):
    AWAITING_INPUT = "awaiting_input"
    CALLING_BACKEND = "calling_backend"
    TERMINATED = "terminated"


# Unicode White_Space; str.strip() would also drop the \x1c-\x1f separators
WHITESPACE = "\t\n\v\f\r \x85\xa0" + "".join(
    map(chr, (0x1680, *range(0x2000, 0x200B), 0x2028, 0x2029, 0x202F, 0x205F, 0x3000))
)


def trim_space(text: str) -> str:
    """Strip leading and trailing Unicode White_Space characters."""
    return text.strip(WHITESPACE)


def quote_raw(data: bytes) -> str:
    """Quoted, escaped rendering of raw input for diagnostics."""
    return json.dumps(data.decode("utf-8", errors="replace"))


def format_reply(reply: str) -> str:
    """Frame a backend reply for stdout, dropping only trailing newlines."""
    shown = reply.rstrip("\n")
    return f"\n{MODEL_LABEL} {shown}\n\n"


class Session:
    """Owns the transcript and drives the read/call/print cycle.

    Nothing here times out or retries: the read blocks until the stream
    yields data or closes, and the backend call blocks until it answers
    or fails.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        stdin: BinaryIO,
        stdout: TextIO,
        stderr: TextIO,
        transcript: Transcript | None = None,
    ) -> None:
        self.backend = backend
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        if transcript is None:
            transcript = Transcript(*get_priming_pair())
        self.transcript = transcript
        self.state = SessionState.AWAITING_INPUT
        self.backend_calls = 0

    def run(self) -> None:
        """Loop until end of input.

        Raises:
            InputReadError: The input stream could not be read.
            BackendError: The backend failed; its turn is not recorded.
            OutputWriteError: The reply could not be written; it is not recorded.
        """
        while self.state is not SessionState.TERMINATED:
            self.step()
        logger.info(
            "Session ended after %d backend calls (%d turns)",
            self.backend_calls,
            len(self.transcript),
        )

    def step(self) -> SessionState:
        """Run one iteration and return the resulting state."""
        if self.state is SessionState.TERMINATED:
            return self.state

        self.stderr.write(USER_PROMPT)
        self.stderr.flush()

        data = self._read()
        if not data:
            logger.debug("End of input")
            self.state = SessionState.TERMINATED
            return self.state

        text = trim_space(data.decode("utf-8", errors="replace"))
        if not text:
            logger.debug("Rejected blank turn of %d bytes", len(data))
            self.stderr.write(f"{quote_raw(data)}\n")
            self.stderr.flush()
            return self.state

        self.transcript.append_operator(text)
        self.state = SessionState.CALLING_BACKEND
        reply = self._call_backend()

        self._write_reply(reply)
        self.transcript.append_backend(reply)
        self.state = SessionState.AWAITING_INPUT
        return self.state

    def _read(self) -> bytes:
        try:
            return self.stdin.read()
        except OSError as e:
            self.state = SessionState.TERMINATED
            raise InputReadError(f"Failed to read input: {e}") from e

    def _write_reply(self, reply: str) -> None:
        try:
            self.stdout.write(format_reply(reply))
            self.stdout.flush()
        except OSError as e:
            self.state = SessionState.TERMINATED
            raise OutputWriteError(f"Failed to write reply: {e}") from e

    def _call_backend(self) -> str:
        self.backend_calls += 1
        logger.debug(
            "Backend call %d with %d turns", self.backend_calls, len(self.transcript)
        )
        try:
            return self.backend.chat(self.transcript.turns)
        except BackendError:
            self.state = SessionState.TERMINATED
            raise
        except Exception as e:
            self.state = SessionState.TERMINATED
            raise BackendError(f"Backend call failed: {e}") from e
