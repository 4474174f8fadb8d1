# smartcomment/core/SmartCommenter.py
"""SmartCommenter Module
=====================
Public entry point tying the pipeline stages together:

    text -> Document -> directives -> blocks / group sets -> plan -> text

`SmartCommenter` works on strings only and is a pure function of its input;
`toggle_file` adds the file handling: an encoding-preserving read, and an
atomic replace of the target only after the whole new text was computed
without error.

Classes:
--------
- `ToggleResult`: output text plus the plan and document it came from.
- `SmartCommenter`: parses, lists and toggles one text for one syntax.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from smartcomment.core.BlockResolver import derive_group_sets, resolve_blocks
from smartcomment.core.DirectiveScanner import mark_directive_lines, scan_directives
from smartcomment.core.Document import Document
from smartcomment.core.LineRewriter import rewrite_line
from smartcomment.core.SyntaxDetector import CommentSyntax
from smartcomment.core.ToggleEngine import TogglePlan, infer_block_states, plan_toggle
from smartcomment.utils.utils import atomic_write, read_text_file


logger = logging.getLogger("smartcomment")


@dataclass
class ToggleResult:
    text: str
    original: str
    plan: TogglePlan
    document: Document
    encoding: str = "utf-8"

    @property
    def changed(self) -> bool:
        return self.text != self.original


## ================= SmartCommenter Class ====================
class SmartCommenter:
    """Toggles tagged regions of a text written in one comment syntax.

    Attributes:
        syntax: The comment convention of the text being processed.

    Methods:
        build_document: Runs the scanner and resolver over a text.
        toggle_text: Activates/deactivates groups and returns the new text.
        describe_groups: Reports every block with its current state.
    """

    def __init__(self, syntax: CommentSyntax) -> None:
        self.syntax = syntax

    def build_document(self, text: str) -> Document:
        """Parses `text` into a validated document.

        Raises:
            MalformedDirective, UnmatchedOpen, UnmatchedClose,
            DuplicateGroupInScope: On invalid directive structure.
        """
        document = Document.from_text(text, self.syntax)
        document.directives = scan_directives(document.lines, self.syntax)
        document.lines = mark_directive_lines(document.lines, document.directives)
        document.blocks = resolve_blocks(document)
        document.group_sets = derive_group_sets(document.blocks)
        logger.debug(
            "Document: %d line(s), %d directive(s), %d block(s), %d group set(s).",
            len(document.lines),
            len(document.directives),
            len(document.blocks),
            len(document.group_sets),
        )
        return document

    def toggle_text(
        self,
        text: str,
        targets: Iterable[str] = (),
        disabled: Iterable[str] = (),
        reset: bool = False,
    ) -> ToggleResult:
        """Returns `text` with the requested groups switched on or off.

        Lines outside every block, blank lines and directive lines come back
        byte-for-byte identical. Applying the same request twice gives the
        same text as applying it once.
        """
        document = self.build_document(text)
        plan = plan_toggle(document, targets, disabled, reset)

        texts = [
            rewrite_line(line, plan.layers.get(line.index, 0), self.syntax, document.spaced)
            for line in document.lines
        ]
        return ToggleResult(
            text=document.render(texts), original=text, plan=plan, document=document
        )

    def describe_groups(self, text: str) -> list[dict[str, Any]]:
        """Lists every block of `text` in file order.

        Returns:
            One dictionary per block with the keys ``group``, ``kind``
            (``exclusive``, ``flag`` or ``condition``), ``line`` (1-based line
            of the opening directive), ``parent`` (group name or None),
            ``active`` (own state) and ``effective`` (False if the block or an
            ancestor is inactive).
        """
        document = self.build_document(text)
        active = infer_block_states(document)
        groups = []
        for block in document.blocks:
            parent: Optional[str] = None
            if block.parent is not None:
                parent = document.blocks[block.parent].group
            kind = "exclusive" if block.exclusive else "flag"
            if block.condition:
                kind = "condition"
            groups.append(
                {
                    "group": block.group,
                    "kind": kind,
                    "line": block.opened_at + 1,
                    "parent": parent,
                    "active": active[block.index],
                    "effective": active[block.index]
                    and all(active[a.index] for a in document.ancestors(block.index)),
                }
            )
        return groups


def toggle_file(
    path: str,
    syntax: CommentSyntax,
    targets: Iterable[str] = (),
    disabled: Iterable[str] = (),
    reset: bool = False,
    write: bool = True,
) -> ToggleResult:
    """Toggles groups inside a file.

    The file is read once, the new content is computed in memory, and only
    then (if `write` is set and something changed) the file is replaced
    atomically. Any error leaves the file untouched.

    Raises:
        SmartCommentError: For any directive or selection problem.
        OSError: If the file cannot be read or replaced.
    """
    text, encoding = read_text_file(path)
    result = SmartCommenter(syntax).toggle_text(text, targets, disabled, reset)
    result.encoding = encoding

    if not write:
        return result
    if not result.changed:
        logger.info("'%s' already in the requested state.", path)
        return result

    atomic_write(path, result.text, encoding)
    logger.info("Rewrote '%s' (%d line(s) changed).", path, len(result.plan.layers))
    return result
