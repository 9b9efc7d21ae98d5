"""Append-only conversation transcript.

The transcript is the whole conversation, replayed verbatim to the
backend on every call. It always starts with a priming pair (instruction
turn, acknowledgment turn) and then alternates operator and backend
turns. Turns are opaque strings; nothing here inspects their content.

Examples:
    >>> t = Transcript("You are a robot.", "Understood.")
    >>> t.append_operator("hello")
    >>> t.append_backend("hi there\\n")
    >>> t.turns
    ('You are a robot.', 'Understood.', 'hello', 'hi there\\n')
    >>> [Transcript.author_of(i) for i in range(len(t))]
    [<Author.PRIMING: 'priming'>, <Author.PRIMING: 'priming'>, <Author.OPERATOR: 'operator'>, <Author.BACKEND: 'backend'>]
"""

from collections.abc import Iterator
from enum import StrEnum

from triagechat.errors import TranscriptOrderError

PRIMING_LENGTH = 2


class Author(StrEnum):
    """Who wrote a turn."""

    PRIMING = "priming"
    OPERATOR = "operator"
    BACKEND = "backend"


class Transcript:
    """Ordered, append-only history of turns.

    Appends are checked against the alternation order; a turn can never be
    removed, replaced or reordered.
    """

    def __init__(self, instruction: str, acknowledgment: str) -> None:
        self._turns: list[str] = [instruction, acknowledgment]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._turns))

    def __getitem__(self, index: int) -> str:
        return self._turns[index]

    def __repr__(self) -> str:
        return f"Transcript(turns={len(self._turns)})"

    @property
    def turns(self) -> tuple[str, ...]:
        """Snapshot of every turn, priming pair first."""
        return tuple(self._turns)

    @property
    def priming(self) -> tuple[str, str]:
        return self._turns[0], self._turns[1]

    @property
    def conversation(self) -> tuple[str, ...]:
        """Turns after the priming pair."""
        return tuple(self._turns[PRIMING_LENGTH:])

    @staticmethod
    def author_of(index: int) -> Author:
        """Author of the turn at ``index`` (non-negative)."""
        if index < 0:
            raise IndexError("author_of needs a non-negative index")
        if index < PRIMING_LENGTH:
            return Author.PRIMING
        return Author.OPERATOR if (index - PRIMING_LENGTH) % 2 == 0 else Author.BACKEND

    @property
    def next_author(self) -> Author:
        return self.author_of(len(self._turns))

    def append_operator(self, text: str) -> None:
        self._append(Author.OPERATOR, text)

    def append_backend(self, text: str) -> None:
        self._append(Author.BACKEND, text)

    def _append(self, author: Author, text: str) -> None:
        expected = self.next_author
        if author is not expected:
            raise TranscriptOrderError(
                f"Cannot append {author} turn at position {len(self._turns)}; "
                f"next turn belongs to {expected}"
            )
        self._turns.append(text)
