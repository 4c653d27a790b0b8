"""Exceptions raised by todoctx."""

from __future__ import annotations

from typing import List, Optional, Sequence


class TodoError(Exception):
    """Base class for every todoctx error."""


class TodoParseError(TodoError, ValueError):
    """A todo list document could not be parsed."""


class MissingTitleError(TodoParseError):
    """The first line of the document is not a ``# <title>`` heading."""

    def __init__(self, message: str = "Todo list does not have a title"):
        super().__init__(message)


class MalformedLabelsError(TodoParseError):
    """The document has no ``LABEL=`` marker line at all."""

    def __init__(self, message: str = "Todo list does not have a LABEL= line"):
        super().__init__(message)


class NoFilterSelectedError(TodoError, ValueError):
    """Tasks were queried with neither completed nor open selected."""

    def __init__(self, message: str = "at least one of completed or open must be selected"):
        super().__init__(message)


class ConfigurationError(TodoError, ValueError):
    """The configuration file is malformed or inconsistent."""


class UnknownContextError(ConfigurationError):
    """A context name does not match any configured context."""

    def __init__(self, name: str, available: Sequence[str], *, is_old_path: Optional[bool] = None):
        self.name = name
        self.available: List[str] = list(available)
        self.is_old_path = is_old_path
        lines = []
        if is_old_path is not None:
            lines.append("Old path is unknown!" if is_old_path else "New path is unknown!")
        lines.append(f'"{name}" does not match any available context.')
        if self.available:
            lines.append("Please select a name among:")
            lines.extend(f"- {ctx_name}" for ctx_name in self.available)
        super().__init__("\n".join(lines))


class WorkspaceError(TodoError, RuntimeError):
    """A context folder operation failed."""


class NothingToMoveError(WorkspaceError):
    """The todo list to move does not exist in the source context."""

    def __init__(self, title: str, path: str):
        self.title = title
        self.path = path
        super().__init__(f'File "{title}" could not be moved because there is nothing at "{path}"')
