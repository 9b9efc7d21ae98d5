"""Framing for the tag-delimited sub-protocol carried inside turns.

The model and an external execution environment talk through literal
tags embedded in ordinary turn text::

    <request>   operator asks for something
    <response>  model answers the operator
    <go run>    model asks the environment to run a Go snippet
    <go output> environment reports what the snippet printed
    <go error>  environment reports a compile or run failure

The session loop never looks inside turns. These helpers are for the
environment side: pull ``<go run>`` bodies out of a model reply and frame
the result as the next operator turn.

Examples:
    Extract code from a model reply::

        >>> reply = "<go run>\\nfmt.Println(1)\\n</go run>"
        >>> code_requests(reply)
        ['fmt.Println(1)']

    Frame a result for the next turn::

        >>> go_output("1\\n")
        '<go output>\\n1\\n</go output>'
"""

import re
from enum import StrEnum
from typing import NamedTuple


class Tag(StrEnum):
    """Tags understood by the model and the execution environment."""

    REQUEST = "request"
    RESPONSE = "response"
    GO_RUN = "go run"
    GO_OUTPUT = "go output"
    GO_ERROR = "go error"


MAX_ATTEMPTS = 3
"""Failed ``<go run>`` attempts after which the model is told to give up."""

_BLOCK_RES = {
    tag: re.compile(f"<{re.escape(tag.value)}>(.*?)</{re.escape(tag.value)}>", re.DOTALL)
    for tag in Tag
}


class Segment(NamedTuple):
    """One tagged block of a turn."""

    tag: Tag
    body: str


def wrap(tag: Tag | str, body: str) -> str:
    """Frame ``body`` in ``tag``, one tag per line."""
    tag = Tag(tag)
    body = body.strip("\n")
    return f"<{tag}>\n{body}\n</{tag}>"


def _blocks(text: str, tag: Tag) -> list[tuple[int, str]]:
    return [
        (match.start(), match.group(1).strip("\n"))
        for match in _BLOCK_RES[tag].finditer(text)
    ]


def segments(text: str) -> list[Segment]:
    """Return the well-formed tagged blocks of ``text`` by opening position.

    Each tag is scanned separately, so a block nested in another tag is
    returned as well as its enclosing block. Text outside tags, unknown
    tags and unterminated blocks are skipped. Bodies lose their
    surrounding newlines but keep other whitespace, so indented code
    survives.
    """
    found = [
        (start, Segment(tag, body)) for tag in Tag for start, body in _blocks(text, tag)
    ]
    found.sort(key=lambda item: item[0])
    return [segment for _, segment in found]


def code_requests(text: str) -> list[str]:
    """Bodies of every ``<go run>`` block in a model reply."""
    return [body for _, body in _blocks(text, Tag.GO_RUN)]


def responses(text: str) -> list[str]:
    """Bodies of every ``<response>`` block in a model reply."""
    return [body for _, body in _blocks(text, Tag.RESPONSE)]


def request(text: str) -> str:
    return wrap(Tag.REQUEST, text)


def go_output(text: str) -> str:
    return wrap(Tag.GO_OUTPUT, text)


def go_error(text: str) -> str:
    return wrap(Tag.GO_ERROR, text)
