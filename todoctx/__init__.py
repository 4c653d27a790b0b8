"""todoctx - todo lists grouped into contexts, managed from the command line."""

__version__ = "0.1.0"

from .errors import (
    TodoError,
    TodoParseError,
    MissingTitleError,
    MalformedLabelsError,
    NoFilterSelectedError,
    ConfigurationError,
    UnknownContextError,
    WorkspaceError,
    NothingToMoveError,
)
from .models import ParsedTodoList, Section, Task, TaskLine, TodoList, Context, Configuration
from .parser import (
    match_task_line,
    extract_block,
    parse_todo_list,
    parse_todo_list_section,
    parse_tasks,
)
from .query import todo_list_tasks
from .render import render_full, render_short

__all__ = [
    "TodoError",
    "TodoParseError",
    "MissingTitleError",
    "MalformedLabelsError",
    "NoFilterSelectedError",
    "ConfigurationError",
    "UnknownContextError",
    "WorkspaceError",
    "NothingToMoveError",
    "ParsedTodoList",
    "Section",
    "Task",
    "TaskLine",
    "TodoList",
    "Context",
    "Configuration",
    "match_task_line",
    "extract_block",
    "parse_todo_list",
    "parse_todo_list_section",
    "parse_tasks",
    "todo_list_tasks",
    "render_full",
    "render_short",
]
