# smartcomment/core/SyntaxDetector.py
"""SyntaxDetector Module
=====================
Resolves which single-line comment convention applies to a file.

The lookup is driven entirely by data: the ``[comments]`` section of the
configuration describes each syntax (its ``line_prefix`` candidates or its
``block_delims`` pair) and the ``[supported_formats]`` section maps file names
and extensions onto those syntaxes. File contents are never inspected.

Resolution order:
-----------------
1. An explicit comment prefix (and optional closing delimiter).
2. An explicit syntax name, or a name matching a known extension.
3. An exact, case-insensitive file name (``.bashrc``, ``Makefile``).
4. The file extension.
5. The Pygments lexer registered for the file name pattern, by name and aliases.

If none of these yield a syntax, `UnsupportedSyntax` is raised.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from smartcomment.core.Errors import UnsupportedSyntax
from smartcomment.utils.utils import DEFAULT_CONFIG


logger = logging.getLogger("smartcomment.syntax")


@dataclass(frozen=True)
class CommentSyntax:
    """How lines are commented in one file type.

    Attributes:
        name: Table key (or ``"custom"`` for explicit prefixes).
        prefixes: Ordered, non-empty candidates. The first one is used when a
            line gets commented; all of them are recognised.
        suffix: Closing delimiter for syntaxes without a line comment, such as
            ``*/`` or ``-->``.
    """

    name: str
    prefixes: tuple[str, ...]
    suffix: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.prefixes or not all(self.prefixes):
            raise ValueError(f"Comment syntax '{self.name}' needs a non-empty prefix.")

    @property
    def primary(self) -> str:
        return self.prefixes[0]

    def match_prefix(self, content: str) -> Optional[str]:
        """Returns the candidate prefix `content` starts with, first match wins."""
        for prefix in self.prefixes:
            if content.startswith(prefix):
                return prefix
        return None

    def is_commented(self, content: str) -> bool:
        """True if `content` (already stripped of indentation) is a comment."""
        if self.match_prefix(content) is None:
            return False
        if self.suffix is None:
            return True
        return content.rstrip().endswith(self.suffix)


def syntax_from_entry(name: str, entry: dict[str, Any]) -> Optional[CommentSyntax]:
    """Builds a `CommentSyntax` from one ``[comments]`` table entry.

    ``line_prefix`` may be a string or a list of strings; trailing spaces in
    the configured prefixes are ignored since spacing is detected per file.
    """
    raw_prefix = entry.get("line_prefix")
    if raw_prefix:
        candidates = [raw_prefix] if isinstance(raw_prefix, str) else list(raw_prefix)
        prefixes = tuple(str(p).strip() for p in candidates if str(p).strip())
        if prefixes:
            return CommentSyntax(name=name, prefixes=prefixes)

    delims = entry.get("block_delims")
    if delims and len(delims) == 2:
        open_tag, close_tag = (str(d).strip() for d in delims)
        if open_tag and close_tag:
            return CommentSyntax(name=name, prefixes=(open_tag,), suffix=close_tag)

    logger.warning("Comment table entry '%s' has no usable prefix.", name)
    return None


def _lookup_format(key: str, formats: dict[str, Any]) -> Optional[str]:
    key = key.lower()
    for syntax_name, names in formats.items():
        if isinstance(names, list) and key in (str(n).lower() for n in names):
            return syntax_name
    return None


def _from_table(name: str, comments: dict[str, Any]) -> Optional[CommentSyntax]:
    entry = comments.get(name.lower())
    if isinstance(entry, dict):
        return syntax_from_entry(name.lower(), entry)
    return None


def _from_pygments(filename: str, comments: dict[str, Any]) -> Optional[CommentSyntax]:
    try:
        lexer = get_lexer_for_filename(filename)
    except ClassNotFound:
        return None
    keys = [lexer.name.lower()] + [alias.lower() for alias in lexer.aliases]
    for key in keys:
        syntax = _from_table(key, comments)
        if syntax:
            logger.debug("Pygments lexer '%s' resolved '%s' to '%s'.", lexer.name, filename, key)
            return syntax
    logger.debug("Pygments lexer '%s' for '%s' has no comment entry.", lexer.name, filename)
    return None


def detect_syntax(
    path: Optional[str] = None,
    syntax_name: Optional[str] = None,
    comment: Optional[str] = None,
    closing_comment: Optional[str] = None,
    config: Optional[dict[str, Any]] = None,
) -> CommentSyntax:
    """Returns the comment syntax for a file, honouring explicit overrides.

    Args:
        path: File path; only its name is looked at. ``None`` or ``"-"`` for
            standard input.
        syntax_name: Explicit syntax (``python``, ``shell``, ``sh``...).
        comment: Explicit comment prefix; wins over everything else.
        closing_comment: Closing delimiter paired with `comment`.
        config: Configuration holding ``comments`` and ``supported_formats``.

    Raises:
        UnsupportedSyntax: If nothing matches.
    """
    if config is None:
        config = DEFAULT_CONFIG
    comments = config.get("comments", {})
    formats = config.get("supported_formats", {})

    if comment:
        logger.debug("Using explicit comment prefix %r.", comment)
        return CommentSyntax(
            name="custom", prefixes=(comment,), suffix=closing_comment or None
        )

    if syntax_name:
        syntax = _from_table(syntax_name, comments)
        if syntax is None:
            mapped = _lookup_format(syntax_name.lstrip("."), formats)
            if mapped:
                syntax = _from_table(mapped, comments)
        if syntax is None:
            raise UnsupportedSyntax(syntax_name)
        return syntax

    if not path or path == "-":
        raise UnsupportedSyntax()

    base_name = os.path.basename(path)

    # Pass 1: exact file name (dotfiles, Makefile, Dockerfile).
    mapped = _lookup_format(base_name, formats)
    if mapped:
        syntax = _from_table(mapped, comments)
        if syntax:
            return syntax

    # Pass 2: extension.
    _, extension = os.path.splitext(base_name)
    if extension:
        mapped = _lookup_format(extension[1:], formats)
        if mapped:
            syntax = _from_table(mapped, comments)
            if syntax:
                return syntax

    # Pass 3: Pygments file name patterns.
    syntax = _from_pygments(base_name, comments)
    if syntax:
        return syntax

    raise UnsupportedSyntax(path)
