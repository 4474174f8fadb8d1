# smartcomment/core/Document.py
"""Document Module
===============
Data model shared by every stage of the smartcomment pipeline.

A `Document` is built fresh from one file's text for one invocation. Its
`Line` records keep the file's natural order; `Block` objects live in a flat
list and refer to each other (parent, children) by index, so the block tree
never holds object cycles.

Classes:
--------
- `Line`: immutable view of one physical line.
- `DirectiveKind` / `Directive`: a recognised marker comment.
- `ConditionTerm`: one `[!]name` term of a conditional flag.
- `Block`: a tagged, inclusive range of content lines.
- `GroupSet`: sibling blocks selected together.
- `Document`: lines, directives, blocks and group sets of one file.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from smartcomment.core.SyntaxDetector import CommentSyntax


# A physical line and its terminator; the final line may have none.
_LINE_RE = re.compile(r"(?P<body>[^\r\n]*)(?P<ending>\r\n|\r|\n)|(?P<tail>[^\r\n]+)\Z")


def split_lines(text: str) -> list[tuple[str, str]]:
    """Splits text into ``(body, ending)`` pairs without losing any character.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` terminate a line, so joining the pairs
    back together always reproduces `text` exactly.
    """
    pieces: list[tuple[str, str]] = []
    for match in _LINE_RE.finditer(text):
        if match.group("tail") is not None:
            pieces.append((match.group("tail"), ""))
        else:
            pieces.append((match.group("body"), match.group("ending")))
    return pieces


@dataclass(frozen=True)
class Line:
    """One physical line of the input.

    Attributes:
        index: 0-based position in the file.
        leading_whitespace: Indentation, kept verbatim.
        content: Everything after the indentation, without the terminator.
        ending: The original line terminator ('' for an unterminated last line).
        is_directive: True once the scanner recognised a directive here.
        comment_prefix: The comment prefix that starts `content`, if any.
    """

    index: int
    leading_whitespace: str
    content: str
    ending: str = "\n"
    is_directive: bool = False
    comment_prefix: Optional[str] = None

    @property
    def text(self) -> str:
        return self.leading_whitespace + self.content

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    @classmethod
    def parse(cls, index: int, body: str, ending: str, syntax: CommentSyntax) -> "Line":
        content = body.lstrip()
        indent = body[: len(body) - len(content)]
        return cls(
            index=index,
            leading_whitespace=indent,
            content=content,
            ending=ending,
            comment_prefix=syntax.match_prefix(content),
        )


class DirectiveKind(Enum):
    OPEN = "open"
    CLOSE = "close"
    TOGGLE = "toggle"


@dataclass(frozen=True)
class ConditionTerm:
    name: str
    negated: bool = False

    def __str__(self) -> str:
        return ("!" if self.negated else "") + self.name


@dataclass(frozen=True)
class Directive:
    """A marker comment opening, closing or toggling a group.

    `exclusive` is False only for feature-flag openings. `spaced` records
    whether a space separated the comment prefix from the marker, which is the
    commenting convention later reused by the rewriter.

    A conditional flag (``smc:flag !dark && wayland``) carries its terms in
    `condition`; its `group` is the normalized condition text.
    """

    kind: DirectiveKind
    group: str
    line_index: int
    exclusive: bool = True
    spaced: bool = True
    condition: tuple[ConditionTerm, ...] = ()


@dataclass
class Block:
    """A contiguous range ``[start, end]`` of content lines owned by one group.

    The range excludes the directive lines that delimit it. `parent` and
    `children` are indices into `Document.blocks`. An empty block (an opening
    directive immediately followed by its closing one) has ``end < start``.
    A block with a `condition` takes its state from the condition's terms
    and cannot be requested by name.
    """

    index: int
    group: str
    start: int
    end: int
    opened_at: int
    parent: Optional[int] = None
    exclusive: bool = True
    children: list[int] = field(default_factory=list)
    condition: tuple[ConditionTerm, ...] = ()

    def __contains__(self, line_index: int) -> bool:
        return self.start <= line_index <= self.end

    def line_indices(self) -> range:
        return range(self.start, self.end + 1)


@dataclass
class GroupSet:
    """Sibling blocks of one parent scope.

    Exclusive sets hold every exclusive block sharing `parent`; a feature-flag
    block always forms a singleton, non-exclusive set.
    """

    parent: Optional[int]
    exclusive: bool
    members: list[int] = field(default_factory=list)


@dataclass
class Document:
    """Everything known about one file during one invocation."""

    syntax: CommentSyntax
    lines: list[Line]
    directives: list[Directive] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    group_sets: list[GroupSet] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str, syntax: CommentSyntax) -> "Document":
        lines = [
            Line.parse(index, body, ending, syntax)
            for index, (body, ending) in enumerate(split_lines(text))
        ]
        return cls(syntax=syntax, lines=lines)

    @property
    def spaced(self) -> bool:
        """Whether lines commented by the tool get a space after the prefix.

        Taken from the first directive of the file; files without directives
        default to the spaced style. Uncommenting does not use it: the space
        is looked for on each line.
        """
        if self.directives:
            return self.directives[0].spaced
        return True

    def group_names(self) -> list[str]:
        """Names a toggle request may use: plain block names and condition terms."""
        seen: list[str] = []
        for block in self.blocks:
            names = [term.name for term in block.condition] if block.condition else [block.group]
            for name in names:
                if name not in seen:
                    seen.append(name)
        return seen

    def ancestors(self, block_index: int) -> Iterator[Block]:
        """Yields the ancestors of a block, innermost first."""
        parent = self.blocks[block_index].parent
        while parent is not None:
            yield self.blocks[parent]
            parent = self.blocks[parent].parent

    def containing_blocks(self, line_index: int) -> list[Block]:
        """Returns the blocks whose range holds `line_index`, outermost first."""
        return [block for block in self.blocks if line_index in block]

    def render(self, texts: Optional[list[str]] = None) -> str:
        """Joins line texts (the current ones by default) with their endings."""
        if texts is None:
            texts = [line.text for line in self.lines]
        return "".join(text + line.ending for text, line in zip(texts, self.lines))
