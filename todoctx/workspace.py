"""Todo list files inside context folders.

This module provides the file operations behind the command line: finding
todo lists in a context folder, reading them, and creating, deleting,
moving and editing them.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import NothingToMoveError, TodoParseError, UnknownContextError, WorkspaceError
from .models import Configuration, Context, ParsedTodoList, TodoList
from .parser import parse_todo_list
from .todo_logging import log_operation, log_performance

logger = logging.getLogger("todoctx.workspace")

TODO_SUFFIXES = (".md", ".txt")

Confirm = Callable[[str], bool]


def todo_path(folder_location: str | Path, title: str) -> Path:
    """Join a context folder and a todo list title into a markdown path."""
    return Path(folder_location).expanduser() / f"{title}.md"


def read_document(path: str | Path) -> str:
    """Return the content of a todo list file."""
    return Path(path).read_text(encoding="utf-8")


def write_document(path: str | Path, text: str) -> None:
    """Write the full content of a todo list file."""
    Path(path).write_text(text, encoding="utf-8")


def enumerate_documents(folder: str | Path) -> Iterator[Path]:
    """Yield todo list files below ``folder`` in file-system order."""
    for dirpath, _dirnames, filenames in os.walk(Path(folder).expanduser()):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.suffix in TODO_SUFFIXES:
                yield path


def _never(question: str) -> bool:
    return False


class Workspace:
    """File operations on the todo lists of every configured context."""

    def __init__(self, configuration: Configuration, confirm: Optional[Confirm] = None):
        """Initialize workspace over ``configuration``.

        ``confirm`` answers yes/no questions (overwrite a list, create a
        folder); without it every question is answered no.
        """
        self.configuration = configuration
        self.confirm = confirm or _never

    @property
    def active_context(self) -> Context:
        return self.configuration.active_context()

    def _context(self, name: Optional[str], *, is_old_path: Optional[bool] = None) -> Context:
        if name is None:
            return self.active_context
        ctx = self.configuration.find_context(name)
        if ctx is None:
            raise UnknownContextError(name, self.configuration.context_names(), is_old_path=is_old_path)
        return ctx

    def todo_path(self, title: str, ctx_name: Optional[str] = None) -> Path:
        """Return the path of ``title`` in the given (or active) context."""
        return todo_path(self._context(ctx_name).folder_location, title)

    # ------------------------------------------------------------------
    # Context folders
    # ------------------------------------------------------------------

    def ensure_context_folder(self, ctx: Context) -> Path:
        """Create the folder of ``ctx`` after asking, if it is missing."""
        folder = Path(ctx.folder_location).expanduser()
        if folder.is_dir():
            return folder

        question = f'Todo folder "{folder}" of context "{ctx.name}" does not exist. Create it?'
        if not self.confirm(question):
            raise WorkspaceError(f'Todo folder "{folder}" does not exist')

        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create todo folder: {e}")
            raise WorkspaceError(f"Could not create todo folder {folder}: {e}") from e

        logger.info(f"Created todo folder {folder}")
        return folder

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def contexts_to_list(self, global_: bool = False) -> List[Context]:
        """Return the active context, or every context with ``global_``."""
        if global_:
            return list(self.configuration.ctxs)
        return [self.active_context]

    def iter_todo_lists(self, ctx: Context) -> Iterator[Tuple[Path, ParsedTodoList]]:
        """Yield ``(path, parsed list)`` for every todo list of ``ctx``.

        Unreadable or unparsable files raise and end the iteration; the
        error message starts with the file path.
        """
        for path in enumerate_documents(ctx.folder_location):
            logger.debug(f"todo: {path}")
            try:
                raw = read_document(path)
            except (OSError, UnicodeDecodeError) as e:
                raise WorkspaceError(f"{path}: {e}") from e
            try:
                todo = parse_todo_list(raw)
            except TodoParseError as e:
                raise type(e)(f"{path}: {e}") from e
            yield path, todo

    def load_todo_list(self, title: str, ctx_name: Optional[str] = None) -> Tuple[Path, str]:
        """Return the path and raw text of one todo list."""
        path = self.todo_path(title, ctx_name)
        return path, read_document(path)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    @log_performance("create_todo_list")
    def create_todo_list(self, todo: TodoList, ctx_name: Optional[str] = None) -> Optional[Path]:
        """Write a new todo list; returns None if the user kept the old one."""
        issues = todo.validate()
        if issues:
            raise ValueError("; ".join(issues))

        ctx = self._context(ctx_name)
        path = todo_path(ctx.folder_location, todo.title)

        with log_operation("create_todo_list", context=ctx.name, title=todo.title):
            self.ensure_context_folder(ctx)

            if path.exists() and not self.confirm(
                f'This operation will overwrite todo "{todo.title}". Continue?'
            ):
                logger.info(f"Kept existing todo list {path}")
                return None

            write_document(path, todo.render())

        logger.info(f"Saved todo list '{todo.title}' to {path}")
        return path

    def delete_todo_list(self, title: str, ctx_name: Optional[str] = None) -> Path:
        """Remove a todo list file and return its former path."""
        path = self.todo_path(title, ctx_name)
        with log_operation("delete_todo_list", title=title, path=str(path)):
            path.unlink()
        return path

    @log_performance("move_todo_list")
    def move_todo_list(self, title: str, ctx_name: str) -> Path:
        """Move a todo list from the active context to ``ctx_name``."""
        old_ctx = self._context(self.configuration.active_ctx_name, is_old_path=True)
        new_ctx = self._context(ctx_name, is_old_path=False)
        old_path = todo_path(old_ctx.folder_location, title)
        new_path = todo_path(new_ctx.folder_location, title)

        if not old_path.is_file():
            raise NothingToMoveError(title, str(old_path))

        with log_operation("move_todo_list", title=title, old_path=str(old_path), new_path=str(new_path)):
            self.ensure_context_folder(new_ctx)
            try:
                os.replace(old_path, new_path)
            except OSError as e:
                raise WorkspaceError(
                    f"File could not be moved from {old_path} to {new_path}: {e}"
                ) from e

        return new_path

    def edit_todo_list(
        self,
        title: str,
        ctx_name: Optional[str] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> int:
        """Open a todo list with the IDE of its context; returns the exit code."""
        ctx = self._context(ctx_name)
        path = todo_path(ctx.folder_location, title)
        logger.info(f"Opening {path} with '{ctx.ide}'")
        try:
            completed = runner([ctx.ide, str(path)], check=False)
        except OSError as e:
            raise WorkspaceError(f"Could not launch IDE '{ctx.ide}': {e}") from e
        return completed.returncode
