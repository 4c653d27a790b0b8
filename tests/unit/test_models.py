"""Unit tests for todoctx data models.

This module tests the new todo list document writer and the context
configuration model.
"""

import pytest

from todoctx.errors import ConfigurationError, UnknownContextError
from todoctx.models import Configuration, Context, Task, TodoList
from todoctx.parser import parse_todo_list


def _ctx(name: str, folder: str = "/tmp/todo") -> Context:
    return Context(name=name, ide="vim", timezone="Europe/Paris", folder_location=folder)


class TestTodoListRender:
    """Test cases for rendering new todo lists."""

    def test_render_barebones(self):
        """Test a list with only a title."""
        todo = TodoList(title="Title")

        assert todo.render() == "# Title\n\n## Description\n\nLABEL=\n"

    def test_render_with_description_and_labels(self):
        """Test description and labels placement."""
        todo = TodoList(title="Title", description="Some content", labels=["a", "b"])

        assert todo.render() == "# Title\n\n## Description\n\nLABEL=a,b\nSome content\n"

    def test_render_items_and_motives(self):
        """Test the task block and the numbered motives."""
        todo = TodoList(title="Title", items=["first", "second"], motives=["why", "because"])

        assert todo.render() == (
            "# Title\n\n## Description\n\nLABEL=\n"
            "\n## Todo list\n\n* [ ] first\n* [ ] second\n"
            "\n## Motives\n\n1. why\n2. because\n"
        )

    def test_rendered_list_parses_back(self):
        """Test that a rendered list reads back with its title, labels and counts."""
        todo = TodoList(title="Trip", labels=["travel", "summer"], items=["tickets", "hotel"])

        parsed = parse_todo_list(todo.render())

        assert parsed.title == "Trip"
        assert parsed.labels == ["travel", "summer"]
        assert (parsed.done, parsed.total) == (0, 2)

    def test_validate(self):
        """Test validation issues."""
        assert TodoList(title="Fine", labels=["ok"]).validate() == []
        assert TodoList(title="  ").validate() == ["Title is required"]
        assert TodoList(title="two\nlines").validate() == ["Title must fit on one line"]
        assert TodoList(title="T", labels=["a,b"]).validate() == ["Labels cannot contain commas"]


class TestTask:
    """Test cases for Task forms."""

    def test_short_and_long(self):
        """Test short and long renditions of a task."""
        task = Task(done=False, summary="a", line="* [ ] a", body=["detail", "  ", ""])

        assert task.short() == "* [ ] a"
        assert task.long() == "* [ ] a\ndetail"
        assert task.to_dict() == {"done": False, "summary": "a", "body": ["detail", "  ", ""]}


class TestContext:
    """Test cases for Context."""

    def test_round_trip_dict(self):
        """Test dictionary conversion."""
        ctx = _ctx("work")

        data = ctx.to_dict()

        assert list(data) == ["ide", "name", "timezone", "folder_location"]
        assert Context.from_dict(data) == ctx

    def test_from_dict_missing_key(self):
        """Test that a context without a folder is rejected."""
        with pytest.raises(ConfigurationError):
            Context.from_dict({"name": "work", "ide": "vim"})

    def test_from_dict_without_timezone(self):
        """Test that the timezone is optional."""
        ctx = Context.from_dict({"name": "work", "ide": "vim", "folder_location": "/tmp"})

        assert ctx.timezone == ""

    def test_describe(self):
        """Test the full description."""
        ctx = _ctx("work", "/home/me/todo")

        assert ctx.describe(active=True) == (
            "--- Context (active) ---\n"
            "name: work\n"
            "ide: vim\n"
            "timezone: Europe/Paris\n"
            "folder location: /home/me/todo\n"
        )
        assert ctx.describe().startswith("--- Context ---\n")


class TestConfiguration:
    """Test cases for Configuration."""

    def test_active_context(self):
        """Test looking up the active context."""
        configuration = Configuration(active_ctx_name="home", ctxs=[_ctx("work"), _ctx("home")])

        assert configuration.is_valid()
        assert configuration.active_context().name == "home"
        assert configuration.context_names() == ["work", "home"]

    def test_invalid_active_context(self):
        """Test a configuration whose active name matches nothing."""
        configuration = Configuration(active_ctx_name="gone", ctxs=[_ctx("work")])

        assert not configuration.is_valid()
        with pytest.raises(ConfigurationError):
            configuration.active_context()

    def test_update_active_ctx(self):
        """Test switching the active context."""
        configuration = Configuration(active_ctx_name="work", ctxs=[_ctx("work"), _ctx("home")])

        configuration.update_active_ctx("home")

        assert configuration.active_ctx_name == "home"

    def test_update_active_ctx_unknown(self):
        """Test that an unknown name leaves the configuration unchanged."""
        configuration = Configuration(active_ctx_name="work", ctxs=[_ctx("work"), _ctx("home")])

        with pytest.raises(UnknownContextError) as exc_info:
            configuration.update_active_ctx("play")

        assert configuration.active_ctx_name == "work"
        assert exc_info.value.name == "play"
        assert exc_info.value.available == ["work", "home"]
        message = str(exc_info.value)
        assert '"play" does not match any available context.' in message
        assert "- work" in message
        assert "- home" in message
        assert "unknown!" not in message

    def test_update_active_ctx_empty(self):
        """Test that an empty name is rejected."""
        configuration = Configuration(active_ctx_name="work", ctxs=[_ctx("work")])

        with pytest.raises(ConfigurationError, match="Active context has no name"):
            configuration.update_active_ctx("")

        assert configuration.active_ctx_name == "work"

    def test_from_dict(self):
        """Test building a configuration from parsed TOML data."""
        configuration = Configuration.from_dict({
            "active_ctx_name": "work",
            "ctxs": [{"name": "work", "ide": "code", "timezone": "UTC", "folder_location": "/w"}],
        })

        assert configuration.active_context().ide == "code"
        assert configuration.to_dict()["ctxs"][0]["folder_location"] == "/w"

    def test_from_dict_missing_active_name(self):
        """Test that the active context name is required."""
        with pytest.raises(ConfigurationError):
            Configuration.from_dict({"ctxs": []})

    def test_from_dict_ctxs_not_a_list(self):
        """Test that contexts must be an array of tables."""
        with pytest.raises(ConfigurationError):
            Configuration.from_dict({"active_ctx_name": "work", "ctxs": {"name": "work"}})
