"""Render parsed todo lists and decide which ones get listed."""

from __future__ import annotations

from typing import Optional, Sequence

from .models import ParsedTodoList
from .parser import parse_todo_list_section


def render_full(todo: ParsedTodoList) -> str:
    """Return the document exactly as the user wrote it."""
    return todo.raw


def render_short(todo: ParsedTodoList, section: Optional[str] = None) -> str:
    """Return the one line ``done/total\\t- title`` summary.

    With ``section``, ``todo`` is expected to be the section view from
    ``parse_todo_list_section`` and the section name is appended.
    """
    summary = f"{todo.done}/{todo.total}\t- {todo.title}"
    if section is not None:
        summary += f" ({section})"
    return summary


def matches_labels(todo: ParsedTodoList, labels: Sequence[str]) -> bool:
    """Return True when the list carries all of ``labels``."""
    return todo.has_labels(list(labels))


def is_listed(todo: ParsedTodoList, all_: bool, done: bool) -> bool:
    """Apply the done/open toggle; ``all_`` lists everything."""
    if all_:
        return True
    return todo.tasks_are_all_done() == done


def select_for_listing(
    todo: ParsedTodoList,
    labels: Sequence[str] = (),
    all_: bool = False,
    done: bool = False,
    section: Optional[str] = None,
) -> Optional[ParsedTodoList]:
    """Return the list (or its section view) if it passes every filter.

    Lists without the requested section are left out.
    """
    if not matches_labels(todo, labels):
        return None
    if section is not None:
        view = parse_todo_list_section(todo, section)
        if view is None:
            return None
        todo = view
    if not is_listed(todo, all_, done):
        return None
    return todo

