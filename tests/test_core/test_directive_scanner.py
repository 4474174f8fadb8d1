# tests/test_core/test_directive_scanner.py
"""Unit tests for the directive grammar and the single-pass scanner."""

import pytest

from smartcomment.core.DirectiveScanner import (
    mark_directive_lines,
    parse_directive,
    scan_directives,
)
from smartcomment.core.Document import ConditionTerm, Document, DirectiveKind, Line
from smartcomment.core.Errors import MalformedDirective
from smartcomment.core.SyntaxDetector import CommentSyntax


def make_line(text: str, syntax: CommentSyntax, index: int = 0) -> Line:
    return Line.parse(index, text, "\n", syntax)


@pytest.mark.parametrize(
    "text, kind, group, exclusive, spaced",
    [
        ("# smc:begin dark", DirectiveKind.OPEN, "dark", True, True),
        ("    #smc:begin dark", DirectiveKind.OPEN, "dark", True, False),
        ("# smc:flag debug-mode", DirectiveKind.OPEN, "debug-mode", False, True),
        ("# smc:end dark  ", DirectiveKind.CLOSE, "dark", True, True),
        ("# smc:end", DirectiveKind.CLOSE, "", True, True),
        ("\t# smc:line gtk3.20", DirectiveKind.TOGGLE, "gtk3.20", True, True),
    ],
)
def test_parse_directive(hash_syntax, text, kind, group, exclusive, spaced) -> None:
    directive = parse_directive(make_line(text, hash_syntax), hash_syntax)
    assert directive is not None
    assert directive.kind is kind
    assert directive.group == group
    assert directive.exclusive is exclusive
    assert directive.spaced is spaced


@pytest.mark.parametrize(
    "text",
    [
        "color = black",
        "# just a comment",
        "# smc is the tool that toggles this file",
        "#  smc:begin dark",  # two spaces: not a marker
        "x = 1  # smc:begin dark",  # not at the start of the line
    ],
)
def test_ordinary_lines_are_not_directives(hash_syntax, text) -> None:
    assert parse_directive(make_line(text, hash_syntax), hash_syntax) is None


@pytest.mark.parametrize(
    "text, reason",
    [
        ("# smc:", "directive kind"),
        ("# smc: begin dark", "directive kind"),
        ("# smc:bogin dark", "unknown directive"),
        ("# smc:begin", "needs a group name"),
        ("# smc:flag", "needs a group name"),
        ("# smc:begin dark light", "unexpected text"),
        ("# smc:begin da/rk", "invalid group name"),
        ("# smc:line -x", "invalid group name"),
    ],
)
def test_malformed_directives(hash_syntax, text, reason) -> None:
    with pytest.raises(MalformedDirective, match=reason) as excinfo:
        parse_directive(make_line(text, hash_syntax, index=4), hash_syntax)
    assert excinfo.value.line == 4
    assert "line 5" in str(excinfo.value)


def test_delimited_syntax_directives(css_syntax) -> None:
    directive = parse_directive(make_line("/* smc:begin dark */", css_syntax), css_syntax)
    assert directive is not None
    assert directive.group == "dark"

    html = CommentSyntax(name="html", prefixes=("<!--",), suffix="-->")
    bare_end = parse_directive(make_line("<!--smc:end-->", html), html)
    assert bare_end is not None
    assert bare_end.kind is DirectiveKind.CLOSE
    assert bare_end.spaced is False

    with pytest.raises(MalformedDirective, match="missing closing"):
        parse_directive(make_line("/* smc:begin dark", css_syntax), css_syntax)


def test_any_candidate_prefix_is_recognised() -> None:
    ini = CommentSyntax(name="ini", prefixes=(";", "#"))
    assert parse_directive(make_line("# smc:begin a", ini), ini) is not None
    assert parse_directive(make_line("; smc:begin a", ini), ini) is not None


def test_scan_names_bare_end_after_innermost_group(hash_syntax) -> None:
    text = (
        "# smc:flag outer\n"
        "# smc:begin inner\n"
        "x\n"
        "# smc:end\n"
        "# smc:end\n"
    )
    document = Document.from_text(text, hash_syntax)
    directives = scan_directives(document.lines, hash_syntax)
    assert [(d.kind, d.group, d.line_index) for d in directives] == [
        (DirectiveKind.OPEN, "outer", 0),
        (DirectiveKind.OPEN, "inner", 1),
        (DirectiveKind.CLOSE, "inner", 3),
        (DirectiveKind.CLOSE, "outer", 4),
    ]


def test_scan_rejects_bare_end_with_nothing_open(hash_syntax) -> None:
    document = Document.from_text("a\n# smc:end\n", hash_syntax)
    with pytest.raises(MalformedDirective) as excinfo:
        scan_directives(document.lines, hash_syntax)
    assert excinfo.value.line == 1


def test_mark_directive_lines(hash_syntax, theme_text) -> None:
    document = Document.from_text(theme_text, hash_syntax)
    directives = scan_directives(document.lines, hash_syntax)
    lines = mark_directive_lines(document.lines, directives)
    assert [line.index for line in lines if line.is_directive] == [1, 3, 4, 6]
    assert lines[2].comment_prefix == "#"
    assert lines[7].comment_prefix is None


def test_conditional_flag(hash_syntax) -> None:
    directive = parse_directive(
        make_line("# smc:flag !dark  &&   wayland", hash_syntax), hash_syntax
    )
    assert directive.kind is DirectiveKind.OPEN
    assert directive.exclusive is False
    assert directive.condition == (ConditionTerm("dark", negated=True), ConditionTerm("wayland"))
    assert directive.group == "!dark && wayland"


def test_single_negated_term_is_a_condition(hash_syntax) -> None:
    directive = parse_directive(make_line("# smc:flag !dark", hash_syntax), hash_syntax)
    assert directive.condition == (ConditionTerm("dark", negated=True),)
    assert directive.group == "!dark"

    plain = parse_directive(make_line("# smc:flag dark", hash_syntax), hash_syntax)
    assert plain.condition == ()


@pytest.mark.parametrize(
    "text, reason",
    [
        ("# smc:flag dark wayland", "expected '&&' between condition terms, got 'wayland'"),
        ("# smc:flag dark &&", "condition ends with '&&'"),
        ("# smc:flag !da/rk && x", "invalid group name 'da/rk' in condition"),
        ("# smc:flag !", "invalid group name '' in condition"),
        ("# smc:begin !dark", "invalid group name"),
    ],
)
def test_malformed_conditions(hash_syntax, text, reason) -> None:
    with pytest.raises(MalformedDirective, match=reason):
        parse_directive(make_line(text, hash_syntax), hash_syntax)


def test_end_may_repeat_the_condition(hash_syntax) -> None:
    text = (
        "# smc:flag !dark && wayland\n"
        "x\n"
        "# smc:end !dark  &&  wayland\n"
    )
    document = Document.from_text(text, hash_syntax)
    directives = scan_directives(document.lines, hash_syntax)
    assert [d.group for d in directives] == ["!dark && wayland", "!dark && wayland"]
