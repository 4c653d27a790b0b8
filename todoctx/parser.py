"""Parse todo lists from their raw text.

Todo lists are meant to be edited by hand, so the format is a small markdown
dialect rather than a serialization format:

    # <title>

    ## Description

    LABEL=<comma,separated,labels>

    ## Todo list

    * [ ] open task
    continuation line
    * [x] done task

    ### <section>

    * [ ] task in section

Everything here is a pure function of the text; callers do their own I/O.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from .errors import MalformedLabelsError, MissingTitleError
from .models import (
    DONE_MARK,
    TODO_LIST_HEADING,
    ParsedTodoList,
    Section,
    Task,
    TaskLine,
)

logger = logging.getLogger("todoctx.parser")

TASK_BLOCK_DEPTH = 2
SECTION_DEPTH = 3

_TASK_LINE_PATTERN = re.compile(r"^\* \[(?P<mark>[x ])\] (?P<summary>.+)$")
_HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,6}) (?P<text>.*)$")
_TITLE_PATTERN = re.compile(r"^# (?P<title>.*)$")
_LABEL_PATTERN = re.compile(r"^LABEL=(?P<labels>.*)$")


# ----------------------------------------------------------------------
# Task lines
# ----------------------------------------------------------------------

def match_task_line(line: str) -> Optional[TaskLine]:
    """Return the checklist item on ``line``, or None.

    Only ``[x]`` (done) and ``[ ]`` (open) are checklist markers; ``[X]`` is
    plain text.
    """
    match = _TASK_LINE_PATTERN.match(line)
    if not match:
        return None
    return TaskLine(
        done=match.group("mark") == DONE_MARK,
        summary=match.group("summary"),
        line=line,
    )


def count_tasks(span: str) -> Tuple[int, int]:
    """Return ``(done, total)`` over every checklist line of ``span``."""
    done = 0
    total = 0
    for line in span.splitlines():
        task_line = match_task_line(line)
        if task_line is None:
            continue
        total += 1
        if task_line.done:
            done += 1
    return done, total


def parse_tasks(span: str) -> List[Task]:
    """Split ``span`` into tasks, in document order.

    A task starts at a checklist line and keeps every following line until
    the next checklist line, the next heading, or the end of the span. Text
    before the first checklist line is ignored.
    """
    tasks: List[Task] = []
    current: Optional[TaskLine] = None
    body: List[str] = []

    def flush() -> None:
        if current is not None:
            tasks.append(Task(done=current.done, summary=current.summary, line=current.line, body=list(body)))

    for line in span.splitlines():
        task_line = match_task_line(line)
        if task_line is not None:
            flush()
            current = task_line
            body = []
        elif _heading_depth(line) is not None:
            flush()
            current = None
            body = []
        elif current is not None:
            body.append(line)
    flush()

    return tasks


# ----------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------

def _heading_depth(line: str) -> Optional[int]:
    match = _HEADING_PATTERN.match(line)
    if not match:
        return None
    return len(match.group("hashes"))


def _heading_line(heading_text: str, heading_depth: int) -> str:
    return f"{'#' * heading_depth} {heading_text}"


def extract_block(doc: str, heading_text: str, heading_depth: int) -> Optional[str]:
    """Return the text between a heading and the next heading of the same or
    shallower depth.

    The heading must match ``heading_text`` exactly. When several headings
    match, the first one wins. Returns None when no heading matches.
    """
    if heading_depth < 1:
        raise ValueError("heading_depth must be at least 1")

    wanted = _heading_line(heading_text, heading_depth)
    block: Optional[List[str]] = None
    for line in doc.splitlines(keepends=True):
        content = line.rstrip("\r\n")
        if block is None:
            if content == wanted:
                block = []
            continue
        depth = _heading_depth(content)
        if depth is not None and depth <= heading_depth:
            break
        block.append(line)

    if block is None:
        return None
    return "".join(block)


def extract_task_block(doc: str) -> Optional[str]:
    """Return the ``## Todo list`` block of ``doc``, or None."""
    return extract_block(doc, TODO_LIST_HEADING, TASK_BLOCK_DEPTH)


def extract_section(doc: str, name: str) -> Optional[str]:
    """Return the ``### name`` section of the task block, or None."""
    block = extract_task_block(doc)
    if block is None:
        return None
    return extract_block(block, name, SECTION_DEPTH)


def parse_sections(block: str) -> List[Section]:
    """Return every ``###`` section of a task block with its own counts."""
    found: List[Tuple[str, List[str]]] = []
    for line in block.splitlines(keepends=True):
        content = line.rstrip("\r\n")
        depth = _heading_depth(content)
        if depth is not None and depth <= SECTION_DEPTH:
            if depth == SECTION_DEPTH:
                found.append((content[SECTION_DEPTH + 1:], []))
            else:
                # a shallower heading cannot belong to any section
                found.append(("", []))
            continue
        if found:
            found[-1][1].append(line)

    sections: List[Section] = []
    for name, lines in found:
        if not name:
            continue
        raw = "".join(lines)
        done, total = count_tasks(raw)
        sections.append(Section(name=name, raw=raw, done=done, total=total))
    return sections


# ----------------------------------------------------------------------
# Todo lists
# ----------------------------------------------------------------------

def parse_todo_list_title(todo_raw: str) -> Optional[str]:
    """Return the title on the first line, or None."""
    lines = todo_raw.splitlines()
    if not lines:
        return None
    match = _TITLE_PATTERN.match(lines[0])
    if not match:
        return None
    title = match.group("title").strip()
    return title or None


def parse_todo_list_labels(todo_raw: str) -> List[str]:
    """Return the labels of the first ``LABEL=`` line.

    Raises MalformedLabelsError when there is no such line. An empty
    ``LABEL=`` line is valid and yields no labels.
    """
    for line in todo_raw.splitlines():
        match = _LABEL_PATTERN.match(line)
        if match:
            return _dedupe(label.strip() for label in match.group("labels").split(","))
    raise MalformedLabelsError()


def _dedupe(labels: Iterable[str]) -> List[str]:
    result: List[str] = []
    for label in labels:
        if label and label not in result:
            result.append(label)
    return result


def parse_todo_list_tasks_status(todo_raw: str) -> Tuple[int, int]:
    """Return ``(done, total)`` for the task block; ``(0, 0)`` without one."""
    block = extract_task_block(todo_raw)
    if block is None:
        return 0, 0
    return count_tasks(block)


def parse_todo_list(todo_raw: str) -> ParsedTodoList:
    """Parse the raw text of a todo list.

    Raises MissingTitleError or MalformedLabelsError; a missing task block
    or section is not an error.
    """
    title = parse_todo_list_title(todo_raw)
    if title is None:
        raise MissingTitleError()
    labels = parse_todo_list_labels(todo_raw)

    block = extract_task_block(todo_raw)
    if block is None:
        logger.debug(f"Todo list '{title}' has no task block")
        done, total, sections = 0, 0, []
    else:
        done, total = count_tasks(block)
        sections = parse_sections(block)

    parsed = ParsedTodoList(
        raw=todo_raw,
        title=title,
        labels=labels,
        done=done,
        total=total,
        sections=sections,
    )
    logger.debug(
        f"Parsed todo list '{title}': {done}/{total}, labels={labels}",
        extra={"extra_fields": parsed.to_dict()},
    )
    return parsed


def parse_todo_list_section(parsed_todo_list: ParsedTodoList, section: str) -> Optional[ParsedTodoList]:
    """Return a view of the list restricted to one section, or None.

    The view keeps the title and labels; its raw text and counts are those
    of the section.
    """
    found = parsed_todo_list.section(section)
    if found is None:
        return None
    return replace(
        parsed_todo_list,
        raw=found.raw,
        done=found.done,
        total=found.total,
        sections=[],
    )
