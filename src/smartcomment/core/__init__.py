# src/smartcomment/core/__init__.py
"""Public facade for smartcomment.core: re-export main classes from CamelCase modules.

Keeps one module per pipeline stage (SyntaxDetector.py, DirectiveScanner.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Document import (  # noqa: F401
    Block,
    ConditionTerm,
    Directive,
    DirectiveKind,
    Document,
    GroupSet,
    Line,
)
from .Errors import (  # noqa: F401
    AmbiguousNesting,
    ConflictingTargets,
    DuplicateGroupInScope,
    MalformedDirective,
    ReservedContent,
    SmartCommentError,
    UnknownGroup,
    UnmatchedClose,
    UnmatchedOpen,
    UnsupportedSyntax,
)
from .SmartCommenter import SmartCommenter, ToggleResult, toggle_file  # noqa: F401
from .SyntaxDetector import CommentSyntax, detect_syntax  # noqa: F401
from .ToggleEngine import LineState, TogglePlan, plan_toggle  # noqa: F401


__all__ = [
    "AmbiguousNesting",
    "Block",
    "CommentSyntax",
    "ConditionTerm",
    "ConflictingTargets",
    "Directive",
    "DirectiveKind",
    "Document",
    "DuplicateGroupInScope",
    "GroupSet",
    "Line",
    "LineState",
    "MalformedDirective",
    "ReservedContent",
    "SmartCommentError",
    "SmartCommenter",
    "ToggleResult",
    "TogglePlan",
    "UnknownGroup",
    "UnmatchedClose",
    "UnmatchedOpen",
    "UnsupportedSyntax",
    "detect_syntax",
    "plan_toggle",
    "toggle_file",
]
