"""Data models for todoctx.

This module contains the data structures shared by the parser, the query
engine and the command line: parsed todo lists with their sections and
tasks, new todo lists about to be written, and the context configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError, UnknownContextError

TODO_LIST_HEADING = "Todo list"
DESCRIPTION_HEADING = "Description"
MOTIVES_HEADING = "Motives"
LABEL_MARKER = "LABEL="
DONE_MARK = "x"
OPEN_MARK = " "


@dataclass(frozen=True, slots=True)
class TaskLine:
    """A single checklist line such as ``* [x] buy milk``."""

    done: bool
    summary: str
    line: str


@dataclass(frozen=True, slots=True)
class Task:
    """A checklist item and the free text lines that follow it."""

    done: bool
    summary: str
    line: str
    body: List[str] = field(default_factory=list)

    def short(self) -> str:
        """Return the marker line only."""
        return self.line

    def long(self) -> str:
        """Return the marker line and its continuation lines."""
        return "\n".join([self.line, *self.body]).rstrip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "done": self.done,
            "summary": self.summary,
            "body": list(self.body),
        }


@dataclass(frozen=True, slots=True)
class Section:
    """A ``### name`` subdivision of the task block."""

    name: str
    raw: str
    done: int
    total: int

    def tasks_are_all_done(self) -> bool:
        return self.done == self.total

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "done": self.done,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class ParsedTodoList:
    """Read-only view over the text of one todo list.

    ``done`` and ``total`` only count checklist lines of the ``## Todo list``
    block. A list without that block is valid and counts as 0/0, which is
    vacuously all done.
    """

    raw: str
    title: str
    labels: List[str] = field(default_factory=list)
    done: int = 0
    total: int = 0
    sections: List[Section] = field(default_factory=list)

    def tasks_are_all_done(self) -> bool:
        """Return True if every task of the task block is checked."""
        return self.done == self.total

    def section(self, name: str) -> Optional[Section]:
        """Return the first section called exactly ``name``."""
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def has_labels(self, labels: List[str]) -> bool:
        """Return True if the list carries every label of ``labels``."""
        return all(label in self.labels for label in labels)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "title": self.title,
            "labels": list(self.labels),
            "done": self.done,
            "total": self.total,
            "sections": [section.to_dict() for section in self.sections],
        }


@dataclass(slots=True)
class TodoList:
    """A new todo list, before it is written to its context folder."""

    title: str
    description: str = ""
    labels: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)
    motives: List[str] = field(default_factory=list)

    def validate(self) -> List[str]:
        """Validate the todo list and return any issues."""
        issues = []

        if not self.title or not self.title.strip():
            issues.append("Title is required")
        if "\n" in self.title:
            issues.append("Title must fit on one line")
        if any("," in label for label in self.labels):
            issues.append("Labels cannot contain commas")

        return issues

    def render(self) -> str:
        """Render the document as it is stored on disk."""
        lines = [
            f"# {self.title}",
            "",
            f"## {DESCRIPTION_HEADING}",
            "",
            f"{LABEL_MARKER}{','.join(self.labels)}",
        ]
        if self.description:
            lines.append(self.description)

        if self.items:
            lines.extend(["", f"## {TODO_LIST_HEADING}", ""])
            lines.extend(f"* [{OPEN_MARK}] {item}" for item in self.items)

        if self.motives:
            lines.extend(["", f"## {MOTIVES_HEADING}", ""])
            lines.extend(f"{i}. {motive}" for i, motive in enumerate(self.motives, start=1))

        return "\n".join(lines) + "\n"


@dataclass(slots=True)
class Context:
    """A themed set of todo lists stored in the same folder.

    A context is identified by its name.
    """

    name: str
    ide: str
    timezone: str
    folder_location: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {
            "ide": self.ide,
            "name": self.name,
            "timezone": self.timezone,
            "folder_location": self.folder_location,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Context":
        """Create from dictionary representation."""
        try:
            return cls(
                name=str(data["name"]),
                ide=str(data["ide"]),
                timezone=str(data.get("timezone", "")),
                folder_location=str(data["folder_location"]),
            )
        except KeyError as e:
            raise ConfigurationError(f"Context is missing required key {e}") from e

    def describe(self, active: bool = False) -> str:
        """Full multi-line description used by ``config get-contexts --full``."""
        header = "--- Context (active) ---" if active else "--- Context ---"
        return (
            f"{header}\n"
            f"name: {self.name}\n"
            f"ide: {self.ide}\n"
            f"timezone: {self.timezone}\n"
            f"folder location: {self.folder_location}\n"
        )


@dataclass(slots=True)
class Configuration:
    """All contexts and the name of the active one."""

    active_ctx_name: str
    ctxs: List[Context] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "active_ctx_name": self.active_ctx_name,
            "ctxs": [ctx.to_dict() for ctx in self.ctxs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Configuration":
        """Create from dictionary representation."""
        if "active_ctx_name" not in data:
            raise ConfigurationError("Configuration is missing 'active_ctx_name'")
        raw_ctxs = data.get("ctxs", [])
        if not isinstance(raw_ctxs, list):
            raise ConfigurationError("'ctxs' must be an array of tables")
        return cls(
            active_ctx_name=str(data["active_ctx_name"]),
            ctxs=[Context.from_dict(ctx) for ctx in raw_ctxs],
        )

    def context_names(self) -> List[str]:
        return [ctx.name for ctx in self.ctxs]

    def find_context(self, name: str) -> Optional[Context]:
        """Return the context called ``name``, or None."""
        for ctx in self.ctxs:
            if ctx.name == name:
                return ctx
        return None

    def is_valid(self) -> bool:
        """Check that the active context name matches a context."""
        return self.find_context(self.active_ctx_name) is not None

    def active_context(self) -> Context:
        """Return the active context."""
        ctx = self.find_context(self.active_ctx_name)
        if ctx is None:
            raise ConfigurationError(
                "Invalid configuration because no contexts correspond to active context"
            )
        return ctx

    def update_active_ctx(self, new_active_ctx_name: str) -> None:
        """Switch the active context. State is unchanged on error."""
        if not new_active_ctx_name:
            raise ConfigurationError("Active context has no name")
        if self.find_context(new_active_ctx_name) is None:
            raise UnknownContextError(new_active_ctx_name, self.context_names())
        self.active_ctx_name = new_active_ctx_name
