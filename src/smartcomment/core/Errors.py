# smartcomment/core/Errors.py
"""Errors Module
=============
Failure kinds raised by the smartcomment pipeline.

Every error is detected while scanning, resolving or planning a toggle, that
is, before a single byte of the target file is rewritten. The command line
turns any of them into a one-line diagnostic and a non-zero exit status.
"""

from typing import Iterable, Optional


class SmartCommentError(Exception):
    """Base class for all smartcomment failures."""


class UnsupportedSyntax(SmartCommentError):
    """No comment convention is known for the file and none was given."""

    def __init__(self, source: Optional[str] = None) -> None:
        self.source = source
        if source:
            message = (
                f"no comment syntax known for '{source}'; "
                "pass --syntax or --comment"
            )
        else:
            message = "no comment syntax given; pass --syntax or --comment"
        super().__init__(message)


class MalformedDirective(SmartCommentError):
    """A directive marker is present but the rest of the line does not parse.

    Attributes:
        line: 0-based index of the offending line.
    """

    def __init__(self, line: int, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"line {line + 1}: malformed directive: {reason}")


class UnmatchedOpen(SmartCommentError):
    def __init__(self, group: str, line: int) -> None:
        self.group = group
        self.line = line
        super().__init__(
            f"line {line + 1}: group '{group}' is opened but never closed"
        )


class UnmatchedClose(SmartCommentError):
    def __init__(self, group: str, line: int) -> None:
        self.group = group
        self.line = line
        super().__init__(
            f"line {line + 1}: closing group '{group}' that is not open"
        )


class DuplicateGroupInScope(SmartCommentError):
    """Two sibling blocks in one parent scope share a name."""

    def __init__(self, group: str, line: int) -> None:
        self.group = group
        self.line = line
        super().__init__(
            f"line {line + 1}: group '{group}' already defined in this scope"
        )


class UnknownGroup(SmartCommentError):
    """The requested group does not exist among the parsed groups."""

    def __init__(self, requested: str, available: Iterable[str]) -> None:
        self.requested = requested
        self.available = sorted(set(available))
        listing = ", ".join(self.available) if self.available else "none"
        super().__init__(f"unknown group '{requested}' (available: {listing})")


class ConflictingTargets(SmartCommentError):
    """More than one member of one exclusive group set was requested."""

    def __init__(self, groups: Iterable[str]) -> None:
        self.groups = sorted(set(groups))
        super().__init__(
            "groups are mutually exclusive and cannot be enabled together: "
            + ", ".join(self.groups)
        )


class AmbiguousNesting(SmartCommentError):
    """A block holds nested blocks but no line of its own.

    Its comment layer could not be told apart from theirs when the file is
    read back, so its state would not survive a round trip.
    """

    def __init__(self, group: str, line: int) -> None:
        self.group = group
        self.line = line
        super().__init__(
            f"line {line + 1}: group '{group}' needs at least one line of its own "
            "besides its nested groups"
        )


class ReservedContent(SmartCommentError):
    """A line to be commented starts with the directive marker.

    Commented, it would read as a directive on the next run.
    """

    def __init__(self, line: int, marker: str) -> None:
        self.line = line
        super().__init__(
            f"line {line + 1}: cannot comment out a line starting with '{marker}'"
        )
