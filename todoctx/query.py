"""Select the tasks of a todo list to display."""

from __future__ import annotations

import logging
from typing import List, Optional

from .errors import NoFilterSelectedError
from .parser import extract_block, extract_task_block, parse_tasks, SECTION_DEPTH

logger = logging.getLogger("todoctx.query")


def todo_list_tasks(
    todo_raw: str,
    completed: bool,
    open_: bool,
    short: bool,
    section: Optional[str] = None,
) -> List[str]:
    """Return the completed and/or open tasks of a todo list.

    Tasks come back in document order whatever the filters. In short form
    only the checklist line of each task is returned; otherwise its
    continuation lines come along, trailing whitespace stripped.

    When ``section`` is given only that ``###`` section of the task block is
    searched, and a missing section yields no tasks. Calling with neither
    ``completed`` nor ``open_`` raises NoFilterSelectedError.
    """
    if not completed and not open_:
        raise NoFilterSelectedError()

    span = extract_task_block(todo_raw)
    if span is None:
        return []

    if section is not None:
        span = extract_block(span, section, SECTION_DEPTH)
        if span is None:
            logger.debug(f"Section '{section}' not found")
            return []

    selected = [
        task for task in parse_tasks(span)
        if (task.done and completed) or (not task.done and open_)
    ]
    logger.debug(
        f"Selected {len(selected)} tasks",
        extra={"extra_fields": {"tasks": [task.to_dict() for task in selected]}},
    )
    return [task.short() if short else task.long() for task in selected]
