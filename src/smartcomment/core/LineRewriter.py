# smartcomment/core/LineRewriter.py
"""LineRewriter Module
===================
Adds or removes comment layers on individual lines.

A *layer* is one comment prefix put in front of the line content, directly
after the indentation. Whether a space follows the prefix when commenting is
the file's own convention (see `Document.spaced`). When uncommenting, the
space is looked for on the line itself and removed if present, so
hand-commented lines lose no indentation. Indentation, the rest of the line
and the line terminator are never touched.
"""

from typing import Optional

from smartcomment.core.Document import Line
from smartcomment.core.SyntaxDetector import CommentSyntax


def add_layer(content: str, syntax: CommentSyntax, spaced: bool) -> str:
    """Comments `content` once, e.g. ``x = 1`` -> ``# x = 1``."""
    sep = " " if spaced else ""
    commented = syntax.primary + sep + content
    if syntax.suffix is not None:
        commented += sep + syntax.suffix
    return commented


def strip_layer(content: str, syntax: CommentSyntax) -> Optional[str]:
    """Removes one comment layer, or returns None if `content` has none.

    One space after the prefix (and, for delimited syntaxes, one before the
    closing delimiter) belongs to the layer when it is there.
    """
    prefix = syntax.match_prefix(content)
    if prefix is None:
        return None
    rest = content[len(prefix):]
    spaced = rest.startswith(" ")
    if spaced:
        rest = rest[1:]

    if syntax.suffix is not None:
        trimmed = rest.rstrip()
        if not trimmed.endswith(syntax.suffix):
            return None
        trailing = rest[len(trimmed):]
        rest = trimmed[: -len(syntax.suffix)]
        if spaced and rest.endswith(" "):
            rest = rest[:-1]
        rest += trailing
    return rest


def rewrite_line(line: Line, layers: int, syntax: CommentSyntax, spaced: bool) -> str:
    """Returns the text of `line` with `layers` comment layers added.

    A negative `layers` removes that many layers. Zero returns the line
    unchanged, which keeps repeated runs idempotent.

    Raises:
        ValueError: If more layers are to be removed than the line carries.
    """
    if layers == 0:
        return line.text

    content = line.content
    if layers > 0:
        for _ in range(layers):
            content = add_layer(content, syntax, spaced)
    else:
        for _ in range(-layers):
            stripped = strip_layer(content, syntax)
            if stripped is None:
                raise ValueError(
                    f"line {line.index + 1} has fewer than {-layers} comment layer(s)"
                )
            content = stripped
    return line.leading_whitespace + content
