# smartcomment/core/DirectiveScanner.py
"""DirectiveScanner Module
=======================
Finds the directive comments that delimit groups inside a file.

Directive grammar (public file format):
---------------------------------------
::

    <indent><prefix>[ ]smc:<kind> [<group> | <condition>][ <suffix>]

- ``<prefix>`` is any comment prefix of the file's syntax; at most one space
  may separate it from the ``smc:`` marker.
- ``<kind>`` is one of:

  - ``begin``: opens a block that is exclusive with its siblings (themes).
  - ``flag``: opens an independently toggled block (feature flags), or a
    conditional block when followed by a condition.
  - ``end``: closes the innermost open block; the group name is optional
    and, when given, must name an open block.
  - ``line``: the following line alone forms an exclusive block.

- ``<group>`` starts with a letter, digit or underscore, followed by letters,
  digits, ``_``, ``.``, ``+`` or ``-``.
- ``<condition>`` is one or more terms joined by ``&&``, each a group name
  optionally negated with ``!`` (``smc:flag !dark && wayland``). The block is
  active when every term holds; terms name groups of the file or free names
  given on the command line. A condition may also follow ``end``.
- ``<suffix>`` is the closing delimiter, required exactly for syntaxes that
  have one (``/* smc:begin dark */``, ``<!-- smc:end -->``).

Examples::

    # smc:begin dark
    background = "#000000"
    # smc:end dark

    // smc:flag debug
    const VERBOSE = true;
    // smc:end

A comment that merely mentions ``smc`` is not a directive; a line that has the
``smc:`` marker right after its comment prefix and does not parse raises
`MalformedDirective`.

Content lines are reserved in the same way: a line whose text starts with
``smc:`` cannot be commented out, since it would then read as a directive.
"""

import logging
import re
from dataclasses import replace
from typing import Optional

from smartcomment.core.Document import ConditionTerm, Directive, DirectiveKind, Line
from smartcomment.core.Errors import MalformedDirective
from smartcomment.core.SyntaxDetector import CommentSyntax


logger = logging.getLogger("smartcomment.scanner")

MARKER = "smc:"

GROUP_NAME_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.+-]*")

# kind -> (directive kind, exclusive)
KINDS: dict[str, tuple[DirectiveKind, bool]] = {
    "begin": (DirectiveKind.OPEN, True),
    "flag": (DirectiveKind.OPEN, False),
    "end": (DirectiveKind.CLOSE, True),
    "line": (DirectiveKind.TOGGLE, True),
}

# Kinds that accept a condition instead of a single group name.
CONDITIONAL_KINDS = ("flag", "end")


def _directive_body(line: Line) -> Optional[tuple[str, bool]]:
    """Returns ``(text after the marker, spaced)`` if the line carries a marker."""
    prefix = line.comment_prefix
    if prefix is None:
        return None
    rest = line.content[len(prefix):]
    spaced = rest.startswith(" ")
    if spaced:
        rest = rest[1:]
    if not rest.startswith(MARKER):
        return None
    return rest[len(MARKER):], spaced


def parse_directive(line: Line, syntax: CommentSyntax) -> Optional[Directive]:
    """Parses a single line.

    Returns:
        The `Directive`, or None if the line is not a directive at all. A
        bare ``end`` is returned with an empty group name.

    Raises:
        MalformedDirective: The marker is present but the grammar is violated.
    """
    found = _directive_body(line)
    if found is None:
        return None
    body, spaced = found

    if syntax.suffix is not None:
        trimmed = body.rstrip()
        if not trimmed.endswith(syntax.suffix):
            raise MalformedDirective(line.index, f"missing closing '{syntax.suffix}'")
        body = trimmed[: -len(syntax.suffix)]

    if not body or body[0].isspace():
        raise MalformedDirective(line.index, f"expected a directive kind right after '{MARKER}'")

    tokens = body.split()
    keyword = tokens[0]
    if keyword not in KINDS:
        raise MalformedDirective(
            line.index,
            f"unknown directive '{keyword}' (expected one of: {', '.join(KINDS)})",
        )
    kind, exclusive = KINDS[keyword]
    args = tokens[1:]

    condition: tuple[ConditionTerm, ...] = ()
    if keyword in CONDITIONAL_KINDS and (len(args) > 1 or (args and args[0].startswith("!"))):
        condition = _parse_condition(line.index, args)
        group = " && ".join(str(term) for term in condition)
    else:
        if len(args) > 1:
            raise MalformedDirective(line.index, f"unexpected text after group name: '{args[1]}'")
        group = args[0] if args else ""
        if not group and kind is not DirectiveKind.CLOSE:
            raise MalformedDirective(line.index, f"'{keyword}' needs a group name")
        if group and not GROUP_NAME_RE.fullmatch(group):
            raise MalformedDirective(line.index, f"invalid group name '{group}'")

    return Directive(
        kind=kind,
        group=group,
        line_index=line.index,
        exclusive=exclusive,
        spaced=spaced,
        condition=condition,
    )


def _parse_condition(index: int, args: list[str]) -> tuple[ConditionTerm, ...]:
    """Parses ``[!]name && [!]name ...`` into its terms."""
    terms = []
    for position, token in enumerate(args):
        if position % 2:
            if token != "&&":
                raise MalformedDirective(
                    index, f"expected '&&' between condition terms, got '{token}'"
                )
            continue
        negated = token.startswith("!")
        name = token[1:] if negated else token
        if not GROUP_NAME_RE.fullmatch(name):
            raise MalformedDirective(index, f"invalid group name '{name}' in condition")
        terms.append(ConditionTerm(name=name, negated=negated))
    if len(args) % 2 == 0:
        raise MalformedDirective(index, "condition ends with '&&'")
    return tuple(terms)


def scan_directives(lines: list[Line], syntax: CommentSyntax) -> list[Directive]:
    """Scans all lines once and returns the directives in file order.

    A stack of open group names, local to this pass, names bare ``end``
    directives after the innermost open group. Structural validation is left
    to the block resolver.
    """
    directives: list[Directive] = []
    open_names: list[str] = []

    for line in lines:
        directive = parse_directive(line, syntax)
        if directive is None:
            continue

        if directive.kind is DirectiveKind.OPEN:
            open_names.append(directive.group)
        elif directive.kind is DirectiveKind.CLOSE:
            if not directive.group:
                if not open_names:
                    raise MalformedDirective(line.index, "'end' without an open group")
                directive = replace(directive, group=open_names[-1])
            if directive.group in open_names:
                # Mismatched nesting is reported by the resolver.
                del open_names[len(open_names) - 1 - open_names[::-1].index(directive.group):]

        logger.debug(
            "Line %d: %s directive for group '%s'.",
            line.index + 1, directive.kind.value, directive.group,
        )
        directives.append(directive)

    return directives


def mark_directive_lines(lines: list[Line], directives: list[Directive]) -> list[Line]:
    """Returns the lines with `is_directive` set where a directive was found."""
    directive_lines = {d.line_index for d in directives}
    return [
        replace(line, is_directive=True) if line.index in directive_lines else line
        for line in lines
    ]
