"""Tests for the interactive session loop."""

import io

import pytest

from triagechat.agent.prompts import ACKNOWLEDGMENT, INSTRUCTION_PROMPT
from triagechat.environment.session import (
    USER_PROMPT,
    Session,
    SessionState,
    format_reply,
    quote_raw,
    trim_space,
)
from triagechat.errors import BackendError, InputReadError, OutputWriteError
from triagechat.lib.transcript import Author, Transcript


def _session(backend, stdin) -> tuple[Session, io.StringIO, io.StringIO]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    session = Session(backend, stdin=stdin, stdout=stdout, stderr=stderr)
    return session, stdout, stderr


class TestPriming:
    """The transcript starts with the priming pair."""

    def test_new_session_is_primed(self, make_backend, make_input) -> None:
        """Should hold exactly the instruction and acknowledgment before input."""
        session, _, _ = _session(make_backend(), make_input())

        assert session.transcript.turns == (INSTRUCTION_PROMPT, ACKNOWLEDGMENT)
        assert session.state is SessionState.AWAITING_INPUT

    def test_priming_survives_conversation(self, make_backend, make_input) -> None:
        """Priming pair should stay first after several turns."""
        backend = make_backend(["one", "two"])
        session, _, _ = _session(backend, make_input(b"a", b"b"))

        session.run()

        assert session.transcript.priming == (INSTRUCTION_PROMPT, ACKNOWLEDGMENT)
        assert backend.calls[0][:2] == (INSTRUCTION_PROMPT, ACKNOWLEDGMENT)


class TestAlternation:
    """Operator and backend turns alternate after the priming pair."""

    def test_turns_alternate(self, make_backend, make_input) -> None:
        """No two consecutive conversation turns share an author."""
        backend = make_backend(["r1", "r2", "r3"])
        session, _, _ = _session(backend, make_input(b"q1", b"  \n", b"q2", b"q3"))

        session.run()

        assert session.transcript.conversation == ("q1", "r1", "q2", "r2", "q3", "r3")
        authors = [Transcript.author_of(i) for i in range(2, len(session.transcript))]
        assert authors == [Author.OPERATOR, Author.BACKEND] * 3

    def test_backend_sees_full_history(self, make_backend, make_input) -> None:
        """Each call should replay every earlier turn."""
        backend = make_backend(["r1", "r2"])
        session, _, _ = _session(backend, make_input(b"q1", b"q2"))

        session.run()

        assert backend.calls[0] == (INSTRUCTION_PROMPT, ACKNOWLEDGMENT, "q1")
        assert backend.calls[1] == (INSTRUCTION_PROMPT, ACKNOWLEDGMENT, "q1", "r1", "q2")


class TestReplyFidelity:
    """Stored replies are exactly what the backend returned."""

    def test_untrimmed_reply_is_stored(self, make_backend, make_input) -> None:
        """Trailing newlines are stripped for display only."""
        reply = "  <response>\nDone.\n</response>\n\n"
        session, stdout, _ = _session(make_backend([reply]), make_input(b"go"))

        session.run()

        assert session.transcript[-1] == reply
        assert stdout.getvalue() == "\n<model>   <response>\nDone.\n</response>\n\n"

    def test_format_reply_keeps_other_whitespace(self) -> None:
        """Only newline characters are trimmed, and only at the end."""
        assert format_reply("hi \t\n\n") == "\n<model> hi \t\n\n"
        assert format_reply("\nhi") == "\n<model> \nhi\n\n"

    def test_operator_turn_is_trimmed(self, make_backend, make_input) -> None:
        """Operator input loses surrounding whitespace before storage."""
        backend = make_backend(["ok"])
        session, _, _ = _session(backend, make_input(b"\n  fix the labels \n\n"))

        session.run()

        assert session.transcript[2] == "fix the labels"

    def test_multiline_input_is_one_turn(self, make_backend, make_input) -> None:
        """Everything up to end-of-stream is a single turn."""
        backend = make_backend(["ok"])
        session, _, _ = _session(backend, make_input(b"line one\nline two\n"))

        session.run()

        assert session.transcript.conversation == ("line one\nline two", "ok")
        assert len(backend.calls) == 1


class TestBlankInput:
    """Whitespace-only input is rejected without touching state."""

    def test_blank_turn_is_ignored(self, make_backend, make_input) -> None:
        """Should not append or call the backend."""
        backend = make_backend()
        session, stdout, stderr = _session(backend, make_input(b"   \n"))

        state = session.step()

        assert state is SessionState.AWAITING_INPUT
        assert len(session.transcript) == 2
        assert backend.calls == []
        assert stdout.getvalue() == ""
        assert stderr.getvalue() == USER_PROMPT + '"   \\n"\n'

    def test_quote_raw(self) -> None:
        """Raw bytes are echoed as an escaped, double-quoted string."""
        assert quote_raw(b"\n\n") == '"\\n\\n"'
        assert quote_raw(b"\t ") == '"\\t "'

    def test_unicode_space_is_blank(self, make_backend, make_input) -> None:
        """An ideographic space counts as whitespace."""
        backend = make_backend()
        session, _, _ = _session(backend, make_input(b" \xe3\x80\x80\n"))

        assert session.step() is SessionState.AWAITING_INPUT
        assert backend.calls == []

    def test_separator_controls_are_not_blank(self, make_backend, make_input) -> None:
        """Should send \\x1c-\\x1f, which are not Unicode white space."""
        backend = make_backend(["ok"])
        session, _, _ = _session(backend, make_input(b"\x1f"))

        session.run()

        assert len(backend.calls) == 1
        assert backend.calls[0][-1] == "\x1f"

    def test_trim_space(self) -> None:
        assert trim_space("\x1c hi \x1d") == "\x1c hi \x1d"
        assert trim_space("\x85\xa0 hi\t\r\n") == "hi"


class TestTermination:
    """A zero-byte read ends the session."""

    def test_empty_read_terminates(self, make_backend, make_input) -> None:
        """Should stop without calling the backend."""
        backend = make_backend()
        session, _, stderr = _session(backend, make_input())

        session.run()

        assert session.state is SessionState.TERMINATED
        assert backend.calls == []
        assert stderr.getvalue() == USER_PROMPT

    def test_step_after_termination_is_noop(self, make_backend, make_input) -> None:
        """Terminated sessions neither read nor prompt again."""
        stdin = make_input()
        session, _, stderr = _session(make_backend(), stdin)

        session.step()
        session.step()

        assert stdin.reads == 1
        assert stderr.getvalue() == USER_PROMPT

    def test_read_error_is_fatal(self, make_backend, make_input) -> None:
        """An unreadable input stream raises InputReadError."""
        session, _, _ = _session(
            make_backend(), make_input(error=OSError("bad file descriptor"))
        )

        with pytest.raises(InputReadError, match="bad file descriptor"):
            session.run()
        assert session.state is SessionState.TERMINATED


class TestEndToEnd:
    """Whole-session scenarios."""

    def test_single_turn(self, make_backend, make_input) -> None:
        """'hello' then end of input: one exchange, then a clean stop."""
        backend = make_backend(["Hi! What can I triage?"])
        session, stdout, _ = _session(backend, make_input(b"hello"))

        session.run()

        assert session.transcript.turns == (
            INSTRUCTION_PROMPT,
            ACKNOWLEDGMENT,
            "hello",
            "Hi! What can I triage?",
        )
        assert stdout.getvalue() == "\n<model> Hi! What can I triage?\n\n"
        assert session.state is SessionState.TERMINATED

    def test_blank_then_text(self, make_backend, make_input) -> None:
        """A blank turn is echoed; only the real turn reaches the backend."""
        backend = make_backend(["hello there"])
        session, _, stderr = _session(backend, make_input(b"\n\n", b"hi"))

        first = session.step()
        prompts_before_call = stderr.getvalue().count(USER_PROMPT)
        second = session.step()

        assert first is SessionState.AWAITING_INPUT
        assert second is SessionState.AWAITING_INPUT
        assert prompts_before_call == 1
        assert stderr.getvalue() == f'{USER_PROMPT}"\\n\\n"\n{USER_PROMPT}'
        assert backend.calls == [(INSTRUCTION_PROMPT, ACKNOWLEDGMENT, "hi")]
        assert session.transcript.conversation == ("hi", "hello there")

        session.run()
        assert session.state is SessionState.TERMINATED

    def test_backend_failure(self, make_backend, make_input) -> None:
        """A failing backend ends the session; the operator turn stays."""
        backend = make_backend(error=RuntimeError("quota exceeded"))
        session, stdout, _ = _session(backend, make_input(b"hello", b"again"))

        with pytest.raises(BackendError, match="quota exceeded"):
            session.run()

        assert session.state is SessionState.TERMINATED
        assert session.transcript.conversation == ("hello",)
        assert stdout.getvalue() == ""
        assert len(backend.calls) == 1

    def test_backend_error_passes_through(self, make_backend, make_input) -> None:
        """BackendError from a client is raised unchanged."""
        error = BackendError("Gemini returned no text")
        session, _, _ = _session(make_backend(error=error), make_input(b"hello"))

        with pytest.raises(BackendError) as excinfo:
            session.run()

        assert excinfo.value is error

    def test_output_failure_is_fatal(self, make_backend, make_input) -> None:
        """A closed stdout ends the session and the reply is not recorded."""

        class ClosedPipe(io.StringIO):
            def write(self, s: str) -> int:
                raise BrokenPipeError(32, "Broken pipe")

        backend = make_backend(["hello there"])
        session = Session(
            backend, stdin=make_input(b"hi"), stdout=ClosedPipe(), stderr=io.StringIO()
        )

        with pytest.raises(OutputWriteError, match="Broken pipe"):
            session.run()

        assert session.state is SessionState.TERMINATED
        assert session.transcript.conversation == ("hi",)
