from dataclasses import dataclass

from xkit.contextext import Context, from_context, new_context


@dataclass(frozen=True)
class Key:
    pass


def test_new_context_and_from_context():
    got = new_context(Context(), Key(), 11)
    assert got == new_context(Context(), Key(), 11)
    value, ok = from_context(got, Key())
    assert ok
    assert value == 11


def test_missing_key():
    value, ok = from_context(Context(), Key())
    assert not ok
    assert value is None


def test_child_shadows_parent_and_sees_ancestors():
    ctx = new_context(new_context(Context(), "a", 1), "b", 2)
    ctx = new_context(ctx, "a", 3)
    assert ctx.value("a") == 3
    assert ctx.value("b") == 2
    assert ctx.value("c") is None


def test_parent_unchanged():
    parent = new_context(Context(), "a", 1)
    new_context(parent, "a", 2)
    assert parent.value("a") == 1