"""todo command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import add_context, default_config_path, load_configuration, save_configuration
from .errors import TodoError, WorkspaceError
from .models import Configuration, Context, TodoList
from .query import todo_list_tasks
from .render import render_full, render_short, select_for_listing
from .todo_logging import log_error_with_context, setup_logging
from .workspace import Workspace

logger = logging.getLogger("todoctx.cli")


def prompt_yes_no(question: str) -> bool:
    """Simple y/N terminal prompt."""
    try:
        ans = input(f"{question} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return ans in ("y", "yes")


def _always_yes(question: str) -> bool:
    return True


def _comma_list(value: str) -> List[str]:
    return [item for item in value.split(",") if item]


def _config_path(args: argparse.Namespace) -> Path:
    if args.with_config_path:
        return Path(args.with_config_path).expanduser()
    return default_config_path()


def _load_configuration(args: argparse.Namespace) -> Configuration:
    return load_configuration(_config_path(args), raw=args.with_config)


def _workspace(args: argparse.Namespace) -> Workspace:
    confirm = _always_yes if args.yes else prompt_yes_no
    return Workspace(_load_configuration(args), confirm=confirm)


# ----------------------------------------------------------------------
# Todo list commands
# ----------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    """List the todo lists of the active context, or of every context."""
    workspace = _workspace(args)
    labels = args.label or []
    logger.debug(f"labels = {labels}, short = {args.short}, section = {args.section}")

    for ctx in workspace.contexts_to_list(args.glob):
        print(f"Todo lists from {ctx.folder_location}")
        for _path, todo in workspace.iter_todo_lists(ctx):
            selected = select_for_listing(
                todo,
                labels=labels,
                all_=args.all,
                done=args.done,
                section=args.section,
            )
            if selected is None:
                continue
            if args.short:
                print(render_short(selected, args.section))
            else:
                print(render_full(todo))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the tasks of one todo list."""
    workspace = _workspace(args)
    completed, open_ = args.completed, args.open
    if not completed and not open_:
        completed = open_ = True

    path, raw = workspace.load_todo_list(args.title, args.ctx)
    logger.debug(f"Showing tasks of {path}")
    for task in todo_list_tasks(raw, completed, open_, args.short, args.section):
        print(task)
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    workspace = _workspace(args)
    todo = TodoList(
        title=args.title.strip(),
        description=args.content or "",
        labels=args.label or [],
        items=args.item or [],
        motives=args.motives or [],
    )
    path = workspace.create_todo_list(todo)
    if path is None:
        print(f'Kept existing todo "{todo.title}"')
        return 0
    print(f'Saved todo "{todo.title}" ({path.parent})')
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    workspace = _workspace(args)
    try:
        workspace.delete_todo_list(args.title)
    except FileNotFoundError as e:
        raise WorkspaceError(f'Todo list "{args.title}" does not exist') from e
    print(f"Successfully removed {args.title}")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    workspace = _workspace(args)
    return workspace.edit_todo_list(args.title, args.ctx)


def cmd_move(args: argparse.Namespace) -> int:
    workspace = _workspace(args)
    new_path = workspace.move_todo_list(args.title, args.ctx)
    print(f'Moved "{args.title}" to {new_path.parent}')
    return 0


# ----------------------------------------------------------------------
# Configuration commands
# ----------------------------------------------------------------------

def cmd_config_create_context(args: argparse.Namespace) -> int:
    """Add a context to the configuration and make it active."""
    path = _config_path(args)
    new_ctx = Context(
        name=args.name,
        ide=args.ide,
        timezone=args.timezone,
        folder_location=args.todo_folder,
    )

    try:
        configuration = _load_configuration(args)
    except FileNotFoundError:
        confirm = _always_yes if args.yes else prompt_yes_no
        if not confirm("Do you want to create a new configuration file?"):
            print("No configuration file was created. Aborting command.")
            logger.warning("User aborted command")
            return 0
        configuration = Configuration(active_ctx_name="", ctxs=[])

    add_context(configuration, new_ctx)
    save_configuration(configuration, path)
    print(
        f'Successfully updated configuration at "{path}"\n'
        f"Configuration was switched to `{configuration.active_ctx_name}`"
    )
    return 0


def cmd_config_active_context(args: argparse.Namespace) -> int:
    configuration = _load_configuration(args)
    print(configuration.active_context().name)
    return 0


def cmd_config_get_contexts(args: argparse.Namespace) -> int:
    configuration = _load_configuration(args)
    for ctx in configuration.ctxs:
        active = ctx.name == configuration.active_ctx_name
        if args.full:
            print(ctx.describe(active=active))
        else:
            print(f"{'→ ' if active else '  '}{ctx.name}")
    return 0


def cmd_config_set_context(args: argparse.Namespace) -> int:
    configuration = _load_configuration(args)
    configuration.update_active_ctx(args.context)
    save_configuration(configuration, _config_path(args))
    print(f'Context was set to "{configuration.active_ctx_name}"')
    return 0


# ----------------------------------------------------------------------
# Parser
# ----------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="todo",
        description="Manage todo lists grouped into contexts.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--with-config-path",
        metavar="PATH",
        help="Path to configuration file (default: $TODO_CONFIG_PATH or ~/.todo/config)",
    )
    p.add_argument(
        "--with-config",
        metavar="RAW",
        help="Raw TOML configuration used instead of reading the configuration file",
    )
    p.add_argument("-y", "--yes", action="store_true", help="Answer yes to every question")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    p.add_argument("--log-file", metavar="PATH", help="Also write JSON logs to PATH")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_list = sub.add_parser("list", help="List todo lists of the active context with tasks remaining")
    s_list.add_argument("-l", "--label", type=_comma_list, help="Filter by labels (comma separated, all must match)")
    s_list.add_argument("-s", "--short", action="store_true", help="Display one line summary")
    s_list.add_argument("-a", "--all", action="store_true", help="Show all todo lists")
    s_list.add_argument("-d", "--done", action="store_true", help="Show only fully completed todo lists")
    s_list.add_argument("-g", "--global", dest="glob", action="store_true", help="List todo lists from all contexts")
    s_list.add_argument("--section", help="Only consider this section of the task list")
    s_list.set_defaults(func=cmd_list)

    s_show = sub.add_parser("show", help="Show the tasks of a todo list")
    s_show.add_argument("title", help="Title of todo list")
    s_show.add_argument("-c", "--completed", action="store_true", help="Show completed tasks")
    s_show.add_argument("-o", "--open", action="store_true", help="Show open tasks")
    s_show.add_argument("-s", "--short", action="store_true", help="Only show the first line of each task")
    s_show.add_argument("--section", help="Only show tasks of this section")
    s_show.add_argument("--ctx", help="Context of todo list (default: active context)")
    s_show.set_defaults(func=cmd_show)

    s_create = sub.add_parser("create", help="Create a new todo list within the active context")
    s_create.add_argument("title", help="Title of todo list")
    s_create.add_argument("-l", "--label", type=_comma_list, help="Labels (comma separated)")
    s_create.add_argument("-c", "--content", help="Description of todo list")
    s_create.add_argument("-i", "--item", nargs="+", help="Items of your todo list")
    s_create.add_argument("-m", "--motives", nargs="+", help="Motives for the todo list")
    s_create.set_defaults(func=cmd_create)

    s_delete = sub.add_parser("delete", help="Delete todo list by title within the active context")
    s_delete.add_argument("title", help="Title of todo list to delete")
    s_delete.set_defaults(func=cmd_delete)

    s_edit = sub.add_parser("edit", help="Edit todo list with the IDE of its context")
    s_edit.add_argument("title", help="Title of todo list")
    s_edit.add_argument("ctx", nargs="?", help="Context of todo list (default: active context)")
    s_edit.set_defaults(func=cmd_edit)

    s_move = sub.add_parser("move", help="Move todo list into another context")
    s_move.add_argument("title", help="Title of todo list to move")
    s_move.add_argument("ctx", help="Name of context to move to")
    s_move.set_defaults(func=cmd_move)

    s_config = sub.add_parser("config", help="Manage your todo configuration")
    config_sub = s_config.add_subparsers(dest="config_cmd", required=True)

    c_create = config_sub.add_parser("create-context", help="Create a new context and switch to it")
    c_create.add_argument("-i", "--ide", required=True, help="IDE used to edit todo lists")
    c_create.add_argument("-n", "--name", required=True, help="Name of context")
    c_create.add_argument("-t", "--timezone", required=True, help="Timezone of context")
    c_create.add_argument("-f", "--todo-folder", required=True, help="Folder where todo lists of context are saved")
    c_create.set_defaults(func=cmd_config_create_context)

    c_active = config_sub.add_parser("active-context", help="Show active context")
    c_active.set_defaults(func=cmd_config_active_context)

    c_get = config_sub.add_parser("get-contexts", help="Get all available contexts")
    c_get.add_argument("-f", "--full", action="store_true", help="Display all information about contexts")
    c_get.set_defaults(func=cmd_config_get_contexts)

    c_set = config_sub.add_parser("set-context", help="Switch active context")
    c_set.add_argument("context", help="Name of context")
    c_set.set_defaults(func=cmd_config_set_context)

    return p


def _log_level(verbose: int) -> Optional[int]:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(_log_level(args.verbose), Path(args.log_file) if args.log_file else None)
    logger.debug(f"args: {args}")

    try:
        return args.func(args)
    except (TodoError, ValueError, OSError) as e:
        log_error_with_context(e, {
            "operation": args.cmd if args.cmd != "config" else f"config {args.config_cmd}",
        })
        return 1


if __name__ == "__main__":
    sys.exit(main())
