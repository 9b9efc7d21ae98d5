"""Shared test fixtures.

Fake backends and chunked input streams used across the session, CLI
and backend tests.
"""

import io
from collections.abc import Callable, Sequence

import pytest

from triagechat.agent.config import Settings


class FakeBackend:
    """Backend that returns scripted replies and records every call."""

    def __init__(self, replies: Sequence[str] = (), error: Exception | None = None):
        self.replies = list(replies)
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    def chat(self, turns: Sequence[str]) -> str:
        self.calls.append(tuple(turns))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


class ChunkedInput(io.RawIOBase):
    """Input stream that yields one chunk per ``read()`` until exhausted.

    Models a terminal where each end-of-input closes one turn: after the
    chunks run out every read returns ``b""``.
    """

    def __init__(self, *chunks: bytes, error: OSError | None = None) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self.chunks:
            return self.chunks.pop(0)
        if self.error is not None:
            raise self.error
        return b""


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for scripted fake backends."""
    return FakeBackend


@pytest.fixture
def make_input() -> Callable[..., ChunkedInput]:
    """Factory for chunked input streams."""
    return ChunkedInput


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a Gemini key and no netrc lookups."""
    return Settings.model_validate(
        {
            "TRIAGE_BACKEND": "gemini",
            "GEMINI_API_KEY": "test-gemini-key",
            "TRIAGE_NETRC": "/nonexistent/netrc",
        }
    )
