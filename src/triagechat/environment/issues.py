"""In-memory issue model and triage-function registry.

This is the Python side of the API the instruction prompt promises to
the model (``AddLabel``, ``RegisterIssueTriage``, ``ListIssueTriage``
and friends). An execution environment answering ``<go run>`` requests
binds those names to these objects; the session loop never touches
them.

Examples:
    >>> tracker = IssueTracker()
    >>> issue = tracker.add(Issue(number=1, title="x/tools/gopls: crash"))
    >>> registry = TriageRegistry()
    >>> def label_gopls(issue: Issue) -> None:
    ...     if issue.title.startswith("x/tools/gopls"):
    ...         issue.add_label("gopls")
    >>> registry.register("labelGopls", label_gopls, "label gopls issues")
    'added'
    >>> registry.run(issue)
    ['labelGopls']
    >>> issue.labels
    ['gopls']
    >>> registry.list_json()
    '[{"Name": "labelGopls", "Desc": "label gopls issues"}]'
"""

import json
import logging
import re
from collections.abc import Callable
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field, PrivateAttr

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def _normalize(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip().casefold()


class IssueState(StrEnum):
    OPEN = "open"
    CLOSED = "closed"


class Issue(BaseModel):
    """A single issue on the tracker."""

    number: int
    title: str
    body: str = ""
    author: str = Field(default="", description="Login of the user who filed the issue")
    labels: list[str] = Field(default_factory=list)
    state: IssueState = IssueState.OPEN
    duplicate_of: int | None = None

    _tracker: "IssueTracker | None" = PrivateAttr(default=None)

    def add_label(self, label: str) -> None:
        if label not in self.labels:
            self.labels.append(label)

    def remove_label(self, label: str) -> None:
        if label in self.labels:
            self.labels.remove(label)

    def set_title(self, title: str) -> None:
        self.title = title

    def is_nearly_identical(self, number: int) -> bool:
        """Report whether issue ``number`` has the same title and body.

        Comparison ignores case and whitespace differences. Unknown
        issues, and the issue itself, are never identical.
        """
        other = self._other(number)
        if other is None:
            return False
        return _normalize(self.title) == _normalize(other.title) and _normalize(
            self.body
        ) == _normalize(other.body)

    def close_as_duplicate(self, number: int) -> bool:
        """Close this issue as a duplicate of ``number``.

        Returns:
            False, leaving the issue untouched, if ``number`` is unknown
            or is this issue.
        """
        if self._other(number) is None:
            return False
        self.state = IssueState.CLOSED
        self.duplicate_of = number
        logger.info("Closed issue #%d as duplicate of #%d", self.number, number)
        return True

    def _other(self, number: int) -> "Issue | None":
        if self._tracker is None or number == self.number:
            return None
        return self._tracker.get(number)


class IssueTracker:
    """Issues by number."""

    def __init__(self) -> None:
        self._issues: dict[int, Issue] = {}

    def __len__(self) -> int:
        return len(self._issues)

    def __contains__(self, number: object) -> bool:
        return number in self._issues

    def add(self, issue: Issue) -> Issue:
        if issue.number in self._issues:
            raise ValueError(f"Issue #{issue.number} already exists")
        issue._tracker = self
        self._issues[issue.number] = issue
        return issue

    def get(self, number: int) -> Issue | None:
        return self._issues.get(number)

    def open_issues(self) -> list[Issue]:
        return [i for i in self._issues.values() if i.state is IssueState.OPEN]


type TriageFn = Callable[[Issue], None]


class TriageFunction(BaseModel):
    """A named triage callback and what it does."""

    name: str = Field(min_length=1)
    fn: TriageFn
    description: str = ""


class TriageRegistry:
    """Registered triage functions, in registration order.

    Re-registering a name replaces the function in place.
    """

    def __init__(self) -> None:
        self._functions: dict[str, TriageFunction] = {}

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def register(
        self, name: str, fn: TriageFn, description: str
    ) -> Literal["added", "redefined"]:
        existed = name in self._functions
        self._functions[name] = TriageFunction(name=name, fn=fn, description=description)
        outcome: Literal["added", "redefined"] = "redefined" if existed else "added"
        logger.info("%s triage function %s", outcome.capitalize(), name)
        return outcome

    def delete(self, name: str) -> None:
        """Remove a triage function.

        Raises:
            KeyError: If no function is registered under ``name``.
        """
        if name not in self._functions:
            raise KeyError(f"No triage function named {name!r}")
        del self._functions[name]
        logger.info("Deleted triage function %s", name)

    def list_json(self) -> str:
        """JSON array of ``{"Name": ..., "Desc": ...}`` objects."""
        return json.dumps(
            [{"Name": f.name, "Desc": f.description} for f in self._functions.values()]
        )

    def run(self, issue: Issue) -> list[str]:
        """Apply every triage function to ``issue``.

        A failing function is logged and skipped so the rest still run.

        Returns:
            Names of the functions that completed.
        """
        completed: list[str] = []
        for function in list(self._functions.values()):
            try:
                function.fn(issue)
            except Exception as e:
                logger.warning(
                    "Triage function %s failed on issue #%d: %s",
                    function.name,
                    issue.number,
                    e,
                )
                continue
            completed.append(function.name)
        return completed
