import io

import pytest

from xkit.app.appcmd import (
    Command,
    FlagSet,
    InvalidArgumentError,
    bind_multiple,
    run,
)
from xkit.app.container import new_container
from xkit.app.errors import AppError, new_error
from xkit.app.positional_args import PositionalArgsError, exact_args


def _noop(container):
    return None


def test_basic():
    holder = {}
    seen = {}

    def bind_root(flag_set):
        holder["foo"] = flag_set.string("foo", "", "Foo.")

    def bind_sub(flag_set):
        holder["bar"] = flag_set.integer("bar", 1, "Bar.")

    def sub_run(container):
        seen["args"] = list(container.args)
        seen["foo"] = holder["foo"].value
        seen["bar"] = holder["bar"].value
        seen["stdin"] = container.stdin.read()
        seen["env"] = container.env("KEY")

    root = Command(
        use="test",
        bind_persistent_flags=bind_root,
        sub_commands=[Command(use="sub", bind_flags=bind_sub, run=sub_run)],
    )
    container = new_container(
        {"KEY": "VALUE"},
        io.StringIO("world"),
        None,
        None,
        "test", "sub", "one", "two", "--foo", "hello",
    )
    run(container, root)
    assert seen == {
        "args": ["one", "two"],
        "foo": "hello",
        "bar": 1,
        "stdin": "world",
        "env": "VALUE",
    }
    assert container.env("KEY") == "VALUE"
    assert container.args == ("test", "sub", "one", "two", "--foo", "hello")


def test_error():
    def fail(container):
        raise new_error(5, "bar")

    root = Command(use="test", sub_commands=[Command(use="sub", run=fail)])
    container = new_container(None, None, None, None, "test", "sub")
    with pytest.raises(AppError) as info:
        run(container, root)
    assert info.value.exit_code == 5
    assert str(info.value) == "bar"


def test_version_to_stdout():
    version = "0.0.1-dev"
    root = Command(use="test", version=version, sub_commands=[Command(use="foo", run=_noop)])
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "--version"), root)
    assert buffer.getvalue() == version + "\n"

    root = Command(use="test", version=version, run=_noop)
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "--version"), root)
    assert buffer.getvalue() == version + "\n"


def test_help_to_stdout():
    root = Command(use="test", sub_commands=[Command(use="foo", run=_noop)])
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "help"), root)
    assert buffer.getvalue()
    assert "Usage:" in buffer.getvalue()

    root = Command(use="test", run=_noop)
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "-h"), root)
    assert "Usage:" in buffer.getvalue()


def test_incorrect_flag_empty_stdout():
    root = Command(use="test", run=_noop)
    stdout = io.StringIO()
    stderr = io.StringIO()
    with pytest.raises(ValueError, match="unknown flag: --foo"):
        run(new_container(None, None, stdout, stderr, "test", "--foo", "1"), root)
    assert stdout.getvalue() == ""
    assert stderr.getvalue() != ""
    assert "unknown flag" in stderr.getvalue()


def test_sub_command_required():
    root = Command(
        use="test",
        sub_commands=[Command(use="mid", sub_commands=[Command(use="leaf", run=_noop)])],
    )
    stderr = io.StringIO()
    with pytest.raises(ValueError, match="Sub-command required."):
        run(new_container(None, None, None, stderr, "test", "mid"), root)
    assert "Usage:" in stderr.getvalue()


def test_invalid_argument_prints_usage():
    def fail(container):
        raise InvalidArgumentError("bad input")

    root = Command(use="test", run=fail)
    stderr = io.StringIO()
    with pytest.raises(InvalidArgumentError):
        run(new_container(None, None, None, stderr, "test"), root)
    assert "Usage:" in stderr.getvalue()
    assert "bad input" in stderr.getvalue()


def test_positional_validation_failure():
    root = Command(use="test", args=exact_args(1), run=_noop)
    stderr = io.StringIO()
    with pytest.raises(PositionalArgsError):
        run(new_container(None, None, None, stderr, "test", "a", "b"), root)
    assert "Usage:" in stderr.getvalue()


def test_command_validate():
    with pytest.raises(ValueError, match="Command.use"):
        Command(use="", run=_noop).validate()
    with pytest.raises(ValueError, match="both"):
        Command(use="x", run=_noop, sub_commands=[Command(use="y", run=_noop)]).validate()
    with pytest.raises(ValueError, match="one of"):
        Command(use="x").validate()
    with pytest.raises(ValueError, match="Short"):
        Command(use="x", long="long text", run=_noop).validate()


def test_help_tree_lists_sub_commands():
    root = Command(
        use="test",
        sub_commands=[Command(use="foo", short="Foo it", run=_noop)],
    )
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "--help-tree"), root)
    lines = buffer.getvalue().splitlines()
    assert lines[0].startswith("test")
    assert any(line.strip().startswith("foo") and line.endswith("Foo it") for line in lines)


def test_bind_multiple_and_short_flags():
    holder = {}

    def bind_a(flag_set):
        holder["a"] = flag_set.boolean("all", False, "All.", "a")

    def bind_b(flag_set):
        holder["n"] = flag_set.string_list("name", (), "Names.", "n")

    seen = {}
    root = Command(
        use="test",
        bind_flags=bind_multiple(bind_a, bind_b),
        run=lambda c: seen.update(a=holder["a"].value, n=holder["n"].value),
    )
    run(new_container(None, None, None, None, "test", "-a", "-n", "x,y", "--name=z"), root)
    assert seen == {"a": True, "n": ["x", "y", "z"]}


def test_completion_candidates():
    root = Command(
        use="test",
        sub_commands=[Command(use="foo", run=_noop), Command(use="fob", run=_noop)],
    )
    buffer = io.StringIO()
    run(new_container(None, None, buffer, None, "test", "__completeNoDesc", "fo"), root)
    lines = buffer.getvalue().splitlines()
    assert lines[:2] == ["fob", "foo"]
    assert lines[-1].startswith(":")


def test_flag_set_rejects_redefinition():
    flag_set = FlagSet()
    flag_set.string("foo")
    with pytest.raises(ValueError):
        flag_set.string("foo")
    assert "foo" in flag_set