import pytest

from xkit.diffmyers import Edit, EditKind, diff, print_edits


def split_lines(s: str) -> list[bytes]:
    parts = s.encode().split(b"\n")
    lines = [part + b"\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


LAO = (
    "The Way that can be told of is not the eternal Way;\n"
    "The name that can be named is not the eternal name.\n"
    "The Nameless is the origin of Heaven and Earth;\n"
    "The Named is the mother of all things.\n"
    "Therefore let there always be non-being,\n"
    "  so we may see their subtlety,\n"
    "And let there always be being,\n"
    "  so we may see their outcome.\n"
    "The two are the same,\n"
    "But after they are produced,\n"
    "  they have different names.\n"
)

TZU = (
    "The Nameless is the origin of Heaven and Earth;\n"
    "The named is the mother of all things.\n"
    "\n"
    "Therefore let there always be non-being,\n"
    "  so we may see their subtlety,\n"
    "And let there always be being,\n"
    "  so we may see their outcome.\n"
    "The two are the same,\n"
    "But after they are produced,\n"
    "  they have different names.\n"
    "They both may be called deep and profound.\n"
    "Deeper and more profound,\n"
    "The door of all subtleties!\n"
)


def test_delete_and_insert():
    edits = diff(split_lines("Hello, world!\n"), split_lines("Goodbye, world!\n"))
    assert edits == [
        Edit(EditKind.DELETE),
        Edit(EditKind.INSERT, from_position=1),
    ]
    out = print_edits(
        split_lines("Hello, world!\n"), split_lines("Goodbye, world!\n"), edits
    )
    assert out == b"@@ -1,1 +1,1 @@\n-Hello, world!\n+Goodbye, world!\n"


def test_insert_one():
    from_text = "Hello, world!\n"
    to_text = "Hello, world!\nGoodbye, world!\n"
    edits = diff(split_lines(from_text), split_lines(to_text))
    assert edits == [Edit(EditKind.INSERT, from_position=1, to_position=1)]
    out = print_edits(split_lines(from_text), split_lines(to_text), edits)
    assert out == b"@@ -1,1 +1,2 @@\n Hello, world!\n+Goodbye, world!\n"


def test_delete_one():
    from_text = "Hello, world!\nGoodbye, world!\n"
    to_text = "Hello, world!\n"
    edits = diff(split_lines(from_text), split_lines(to_text))
    assert edits == [Edit(EditKind.DELETE, from_position=1)]
    out = print_edits(split_lines(from_text), split_lines(to_text), edits)
    assert out == b"@@ -1,2 +1,1 @@\n Hello, world!\n-Goodbye, world!\n"


def test_create_file():
    edits = diff(split_lines(""), split_lines("Hello, world!\n"))
    assert edits == [Edit(EditKind.INSERT, from_position=0, to_position=0)]
    out = print_edits(split_lines(""), split_lines("Hello, world!\n"), edits)
    assert out == b"@@ -1,0 +1,1 @@\n+Hello, world!\n"


def test_remove():
    edits = diff(split_lines("Hello, world!\n"), split_lines(""))
    assert edits == [Edit(EditKind.DELETE, from_position=0)]
    out = print_edits(split_lines("Hello, world!\n"), split_lines(""), edits)
    assert out == b"@@ -1,1 +1,0 @@\n-Hello, world!\n"


def test_equal():
    edits = diff(split_lines("Hello, world!\n"), split_lines("Hello, world!\n"))
    assert len(edits) == 0
    out = print_edits(
        split_lines("Hello, world!\n"), split_lines("Hello, world!\n"), edits
    )
    assert out == b" Hello, world!\n"


def test_lao_tzu():
    edits = diff(split_lines(LAO), split_lines(TZU))
    assert edits == [
        Edit(EditKind.DELETE),
        Edit(EditKind.DELETE, from_position=1),
        Edit(EditKind.DELETE, from_position=3),
        Edit(EditKind.INSERT, from_position=4, to_position=1),
        Edit(EditKind.INSERT, from_position=4, to_position=2),
        Edit(EditKind.INSERT, from_position=11, to_position=10),
        Edit(EditKind.INSERT, from_position=11, to_position=11),
        Edit(EditKind.INSERT, from_position=11, to_position=12),
    ]


def test_lao_tzu_print():
    edits = diff(split_lines(LAO), split_lines(TZU))
    out = print_edits(split_lines(LAO), split_lines(TZU), edits)
    expected = (
        "@@ -1,11 +1,10 @@\n"
        "-The Way that can be told of is not the eternal Way;\n"
        "-The name that can be named is not the eternal name.\n"
        " The Nameless is the origin of Heaven and Earth;\n"
        "-The Named is the mother of all things.\n"
        "+The named is the mother of all things.\n"
        "+\n"
        " Therefore let there always be non-being,\n"
        "   so we may see their subtlety,\n"
        " And let there always be being,\n"
        "   so we may see their outcome.\n"
        " The two are the same,\n"
        " But after they are produced,\n"
        "   they have different names.\n"
        "@@ -12,0 +11,3 @@\n"
        "+They both may be called deep and profound.\n"
        "+Deeper and more profound,\n"
        "+The door of all subtleties!\n"
    )
    assert out == expected.encode()


def test_print_with_str_lines():
    from_lines = ["Hello, world!\n"]
    to_lines = ["Goodbye, world!\n"]
    out = print_edits(from_lines, to_lines, diff(from_lines, to_lines))
    assert out == "@@ -1,1 +1,1 @@\n-Hello, world!\n+Goodbye, world!\n"


def test_print_adds_missing_newline_without_mutating_input():
    from_lines = [b"Hello, world!"]
    out = print_edits(from_lines, from_lines, [])
    assert out == b" Hello, world!\n"
    assert from_lines == [b"Hello, world!"]


def test_print_rejects_unknown_edit_kind():
    with pytest.raises(ValueError):
        print_edits([b"a\n"], [b"b\n"], [Edit(99)])


@pytest.mark.parametrize(
    "from_text,to_text",
    [
        ("a\nb\nc\n", "a\nc\n"),
        ("a\nb\nc\nd\ne\n", "x\nb\ny\nd\nz\n"),
        ("", "a\nb\n"),
        ("a\nb\n", ""),
        ("a\nb\nc\na\nb\nb\na\n", "c\nb\na\nb\na\nc\n"),
    ],
)
def test_edits_transform_from_into_to(from_text, to_text):
    from_lines = split_lines(from_text)
    to_lines = split_lines(to_text)
    edits = diff(from_lines, to_lines)
    deleted = {e.from_position for e in edits if e.kind == EditKind.DELETE}
    inserted = {e.to_position for e in edits if e.kind == EditKind.INSERT}
    kept_from = [line for i, line in enumerate(from_lines) if i not in deleted]
    kept_to = [line for i, line in enumerate(to_lines) if i not in inserted]
    assert kept_from == kept_to