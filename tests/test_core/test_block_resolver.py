# tests/test_core/test_block_resolver.py
"""Unit tests for `smartcomment.core.BlockResolver`.

Verifies that:
1. Nested directives produce a parent/child block arena with correct ranges.
2. Sibling exclusive blocks share one group set; flags are singletons.
3. Structural errors are reported with the offending group and line.
"""

import pytest

from smartcomment.core.BlockResolver import derive_group_sets, resolve_blocks
from smartcomment.core.DirectiveScanner import mark_directive_lines, scan_directives
from smartcomment.core.Document import Document
from smartcomment.core.Errors import (
    AmbiguousNesting,
    DuplicateGroupInScope,
    MalformedDirective,
    UnmatchedClose,
    UnmatchedOpen,
)


def scanned(text: str, syntax) -> Document:
    document = Document.from_text(text, syntax)
    document.directives = scan_directives(document.lines, syntax)
    document.lines = mark_directive_lines(document.lines, document.directives)
    return document


def test_nested_blocks(hash_syntax, nested_text) -> None:
    blocks = resolve_blocks(scanned(nested_text, hash_syntax))

    assert [(b.group, b.start, b.end, b.parent) for b in blocks] == [
        ("x11", 1, 7, None),
        ("dark", 3, 3, 0),
        ("light", 6, 6, 0),
    ]
    assert blocks[0].children == [1, 2]
    assert blocks[0].exclusive is False
    assert blocks[1].exclusive is True


def test_group_sets(hash_syntax, nested_text) -> None:
    group_sets = derive_group_sets(resolve_blocks(scanned(nested_text, hash_syntax)))

    assert [(gs.parent, gs.exclusive, gs.members) for gs in group_sets] == [
        (None, False, [0]),
        (0, True, [1, 2]),
    ]


def test_toggle_directive_makes_one_line_block(hash_syntax) -> None:
    text = (
        "# smc:line laptop\n"
        "dpi = 96\n"
        "# smc:line desktop\n"
        "# dpi = 144\n"
        "common = 1\n"
    )
    blocks = resolve_blocks(scanned(text, hash_syntax))
    assert [(b.group, b.start, b.end) for b in blocks] == [("laptop", 1, 1), ("desktop", 3, 3)]

    group_sets = derive_group_sets(blocks)
    assert len(group_sets) == 1
    assert group_sets[0].members == [0, 1]


def test_same_name_in_different_scopes_is_allowed(hash_syntax) -> None:
    text = (
        "# smc:flag bar\n"
        "x = 1\n"
        "# smc:begin dark\n"
        "a\n"
        "# smc:end dark\n"
        "# smc:end bar\n"
        "# smc:flag term\n"
        "y = 1\n"
        "# smc:begin dark\n"
        "b\n"
        "# smc:end dark\n"
        "# smc:end term\n"
    )
    blocks = resolve_blocks(scanned(text, hash_syntax))
    assert [b.group for b in blocks] == ["bar", "dark", "term", "dark"]


def test_empty_block(hash_syntax) -> None:
    blocks = resolve_blocks(scanned("# smc:begin a\n# smc:end a\n", hash_syntax))
    assert blocks[0].end < blocks[0].start
    assert list(blocks[0].line_indices()) == []


def test_unmatched_open_at_end_of_file(hash_syntax) -> None:
    text = "# smc:begin dark\ncolor = black\n"
    with pytest.raises(UnmatchedOpen) as excinfo:
        resolve_blocks(scanned(text, hash_syntax))
    assert excinfo.value.group == "dark"
    assert excinfo.value.line == 0


def test_close_skipping_an_inner_block(hash_syntax) -> None:
    text = "# smc:begin a\n# smc:begin b\nx\n# smc:end a\n"
    with pytest.raises(UnmatchedOpen) as excinfo:
        resolve_blocks(scanned(text, hash_syntax))
    assert excinfo.value.group == "b"


def test_unmatched_close(hash_syntax) -> None:
    text = "x\n# smc:end dark\n"
    with pytest.raises(UnmatchedClose, match="dark") as excinfo:
        resolve_blocks(scanned(text, hash_syntax))
    assert excinfo.value.line == 1


def test_duplicate_group_in_scope(hash_syntax) -> None:
    text = (
        "# smc:begin dark\n"
        "a\n"
        "# smc:end dark\n"
        "# smc:begin dark\n"
        "b\n"
        "# smc:end dark\n"
    )
    with pytest.raises(DuplicateGroupInScope) as excinfo:
        resolve_blocks(scanned(text, hash_syntax))
    assert excinfo.value.group == "dark"
    assert excinfo.value.line == 3


@pytest.mark.parametrize(
    "text",
    [
        "x\n# smc:line last",
        "# smc:line a\n# smc:begin b\n# smc:end b\n",
    ],
)
def test_toggle_directive_needs_a_content_line(hash_syntax, text) -> None:
    with pytest.raises(MalformedDirective, match="followed by a content line"):
        resolve_blocks(scanned(text, hash_syntax))


@pytest.mark.parametrize(
    "own_lines",
    ["", "\n", "   \n\n"],
)
def test_parent_without_lines_of_its_own(hash_syntax, own_lines) -> None:
    """A parent made only of nested groups cannot be read back unambiguously."""
    text = (
        "# smc:begin A\n"
        + own_lines
        + "# smc:flag f\n"
        "a = 1\n"
        "# smc:end f\n"
        "# smc:end A\n"
        "# smc:begin B\n"
        "# b = 1\n"
        "# smc:end B\n"
    )
    with pytest.raises(AmbiguousNesting, match="line 1: group 'A'") as excinfo:
        resolve_blocks(scanned(text, hash_syntax))
    assert excinfo.value.group == "A"
    assert excinfo.value.line == 0


def test_parent_with_a_line_of_its_own(hash_syntax) -> None:
    text = (
        "# smc:begin A\n"
        "# smc:flag f\n"
        "a = 1\n"
        "# smc:end f\n"
        "# a_only = 1\n"
        "# smc:end A\n"
    )
    blocks = resolve_blocks(scanned(text, hash_syntax))
    assert [(b.group, b.start, b.end, b.children) for b in blocks] == [
        ("A", 1, 4, [1]),
        ("f", 2, 2, []),
    ]
