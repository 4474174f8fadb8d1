# smartcomment/core/BlockResolver.py
"""BlockResolver Module
====================
Turns the flat directive list into a validated tree of blocks.

Resolution uses a scope stack of block indices. An opening directive pushes a
new block whose parent is the current top of the stack; a closing directive
must name the innermost open block and pops it; a ``line`` directive creates a
one-line block on the following line without touching the stack.

Failures:
---------
- `UnmatchedClose`: a close names no open block.
- `UnmatchedOpen`: a block is still open at end of file, or a close names an
  outer block while an inner one is still open.
- `DuplicateGroupInScope`: two siblings of the same parent share a name.
- `MalformedDirective`: a ``line`` directive has no content line after it.
- `AmbiguousNesting`: a block holds nested blocks but no non-blank line of
  its own, so its comment layer could not be read back apart from theirs.
"""

import logging
from typing import Optional

from smartcomment.core.Document import Block, Directive, DirectiveKind, Document, GroupSet
from smartcomment.core.Errors import (
    AmbiguousNesting,
    DuplicateGroupInScope,
    MalformedDirective,
    UnmatchedClose,
    UnmatchedOpen,
)


logger = logging.getLogger("smartcomment.resolver")


def _check_duplicate(
    blocks: list[Block], parent: Optional[int], directive: Directive
) -> None:
    for block in blocks:
        if block.parent == parent and block.group == directive.group:
            raise DuplicateGroupInScope(directive.group, directive.line_index)


def _new_block(
    blocks: list[Block], directive: Directive, parent: Optional[int], start: int, end: int
) -> Block:
    _check_duplicate(blocks, parent, directive)
    block = Block(
        index=len(blocks),
        group=directive.group,
        start=start,
        end=end,
        opened_at=directive.line_index,
        parent=parent,
        exclusive=directive.exclusive,
        condition=directive.condition,
    )
    blocks.append(block)
    if parent is not None:
        blocks[parent].children.append(block.index)
    return block


def _check_own_lines(document: Document, blocks: list[Block]) -> None:
    for block in blocks:
        if not block.children:
            continue
        nested = set()
        for child in block.children:
            nested.update(blocks[child].line_indices())
        for i in block.line_indices():
            line = document.lines[i]
            if i not in nested and not line.is_directive and not line.is_blank:
                break
        else:
            raise AmbiguousNesting(block.group, block.opened_at)


def resolve_blocks(document: Document) -> list[Block]:
    """Builds the block arena for a scanned document.

    Blocks are returned in order of their opening directive, so a parent
    always precedes its children.
    """
    blocks: list[Block] = []
    stack: list[int] = []
    line_count = len(document.lines)

    for directive in document.directives:
        parent = stack[-1] if stack else None
        at = directive.line_index

        if directive.kind is DirectiveKind.OPEN:
            # `end` is fixed up when the matching close is seen.
            block = _new_block(blocks, directive, parent, at + 1, at)
            stack.append(block.index)

        elif directive.kind is DirectiveKind.CLOSE:
            open_groups = [blocks[i].group for i in stack]
            if directive.group not in open_groups:
                raise UnmatchedClose(directive.group, at)
            top = blocks[stack[-1]]
            if top.group != directive.group:
                raise UnmatchedOpen(top.group, top.opened_at)
            top.end = at - 1
            stack.pop()

        else:  # DirectiveKind.TOGGLE
            target = at + 1
            if target >= line_count or document.lines[target].is_directive:
                raise MalformedDirective(at, "'line' must be followed by a content line")
            _new_block(blocks, directive, parent, target, target)

    if stack:
        innermost = blocks[stack[-1]]
        raise UnmatchedOpen(innermost.group, innermost.opened_at)

    _check_own_lines(document, blocks)

    logger.debug("Resolved %d block(s).", len(blocks))
    return blocks


def derive_group_sets(blocks: list[Block]) -> list[GroupSet]:
    """Groups sibling blocks into the sets a toggle selects from.

    All exclusive blocks sharing a parent form one set; every feature-flag
    block is a singleton set of its own.
    """
    group_sets: list[GroupSet] = []
    exclusive_sets: dict[Optional[int], GroupSet] = {}

    for block in blocks:
        if not block.exclusive:
            group_sets.append(GroupSet(parent=block.parent, exclusive=False, members=[block.index]))
            continue
        group_set = exclusive_sets.get(block.parent)
        if group_set is None:
            group_set = GroupSet(parent=block.parent, exclusive=True)
            exclusive_sets[block.parent] = group_set
            group_sets.append(group_set)
        group_set.members.append(block.index)

    return group_sets
