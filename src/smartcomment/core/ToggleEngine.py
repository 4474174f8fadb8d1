# smartcomment/core/ToggleEngine.py
"""ToggleEngine Module
===================
Decides which blocks end up active and how many comment layers every line
must gain or lose.

State model:
------------
Each block has an *own* state, active or inactive. A line's comment depth is
the number of containing blocks whose own state is inactive, so a block
inside an inactive parent is always commented (dominance) while its own state
survives: re-activating the parent brings the child back exactly as it was.

The current own states are read from the text, outermost block first. A block
is inactive when every non-blank content line in its range carries a comment
layer; that layer is then peeled off before its children are examined. The
resolver guarantees that every block with nested blocks has a line of its
own, which keeps this reading unambiguous.

Selection policy:
-----------------
- Exclusive group sets (sibling ``begin``/``line`` blocks): the targeted
  member becomes active and all its siblings inactive. Sets with no targeted
  member keep their state, apart from explicitly disabled members.
- Feature-flag sets (``flag`` blocks): targeted -> active, disabled ->
  inactive, otherwise inactive with ``reset`` and unchanged without it.
- Conditional flags (``flag !dark && wayland``) are active when every term
  holds. A term is true when its name is targeted, false when it is disabled;
  otherwise it follows the desired own state of the groups carrying that
  name, and a free name counts as false with ``reset``. Terms that remain
  undecided are skipped, and a flag with no decided term keeps its state.
- Requesting a name that no block or condition term carries raises
  `UnknownGroup`; targeting two members of one exclusive set raises
  `ConflictingTargets`.
- A line whose text starts with the directive marker is never commented
  out (`ReservedContent`).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from smartcomment.core.DirectiveScanner import MARKER
from smartcomment.core.Document import Block, ConditionTerm, Document
from smartcomment.core.Errors import ConflictingTargets, ReservedContent, UnknownGroup
from smartcomment.core.LineRewriter import strip_layer


logger = logging.getLogger("smartcomment.engine")


class LineState(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNCHANGED = "unchanged"


@dataclass
class TogglePlan:
    """Result of planning a toggle.

    Attributes:
        current: Own active state of every block as found in the text.
        desired: Own active state of every block after the toggle.
        layers: Line index -> comment layers to add (negative: remove). Lines
            not listed keep their text.
        states: Per-line effective state after the toggle.
    """

    current: list[bool]
    desired: list[bool]
    layers: dict[int, int] = field(default_factory=dict)
    states: list[LineState] = field(default_factory=list)

    @property
    def changes(self) -> bool:
        return any(self.layers.values())


def _content_lines(document: Document, block: Block) -> list[int]:
    return [
        i
        for i in block.line_indices()
        if not document.lines[i].is_directive and not document.lines[i].is_blank
    ]


def infer_block_states(document: Document) -> list[bool]:
    """Reads the own active state of every block from the current text."""
    syntax = document.syntax
    peeled = {line.index: line.content for line in document.lines}
    active = [True] * len(document.blocks)

    # Parents precede children in the arena, so peeling flows outside-in.
    for block in document.blocks:
        lines = _content_lines(document, block)
        if not lines:
            continue
        stripped = {i: strip_layer(peeled[i], syntax) for i in lines}
        if all(text is not None for text in stripped.values()):
            active[block.index] = False
            peeled.update(stripped)
    return active


def _validate_requests(
    document: Document, targets: set[str], disabled: set[str]
) -> None:
    available = document.group_names()
    for name in sorted(targets | disabled):
        if name not in available:
            raise UnknownGroup(name, available)
    both = targets & disabled
    if both:
        raise ConflictingTargets(both)


def _term_value(
    document: Document,
    desired: list[bool],
    term: ConditionTerm,
    targets: set[str],
    disabled: set[str],
    reset: bool,
) -> Optional[bool]:
    if term.name in targets:
        return True
    if term.name in disabled:
        return False
    named = [b for b in document.blocks if b.group == term.name and not b.condition]
    if named:
        return any(desired[b.index] for b in named)
    return False if reset else None


def _desired_states(
    document: Document,
    current: list[bool],
    targets: set[str],
    disabled: set[str],
    reset: bool,
) -> list[bool]:
    desired = list(current)
    for group_set in document.group_sets:
        members = [document.blocks[i] for i in group_set.members]

        if group_set.exclusive:
            chosen = {block.group for block in members if block.group in targets}
            if len(chosen) > 1:
                raise ConflictingTargets(chosen)
            for block in members:
                if chosen:
                    desired[block.index] = block.group in chosen
                elif block.group in disabled:
                    desired[block.index] = False
            continue

        block = members[0]
        if block.condition:
            continue
        if block.group in targets:
            desired[block.index] = True
        elif block.group in disabled or reset:
            desired[block.index] = False

    # Conditions read the plain groups' new states, so they are decided last.
    for block in document.blocks:
        if not block.condition:
            continue
        decided = [
            (term, _term_value(document, desired, term, targets, disabled, reset))
            for term in block.condition
        ]
        decided = [(term, value) for term, value in decided if value is not None]
        if decided:
            desired[block.index] = all(value != term.negated for term, value in decided)
    return desired


def plan_toggle(
    document: Document,
    targets: Iterable[str] = (),
    disabled: Iterable[str] = (),
    reset: bool = False,
) -> TogglePlan:
    """Computes the toggle of a resolved document.

    Args:
        document: A scanned and resolved document.
        targets: Group names to activate.
        disabled: Group names to deactivate.
        reset: Deactivate feature flags that are not targeted.

    Raises:
        UnknownGroup: A requested name matches no block.
        ConflictingTargets: Two members of one exclusive set were targeted, or
            one name was both enabled and disabled.
        ReservedContent: A line to be commented starts with the directive
            marker.
    """
    targets, disabled = set(targets), set(disabled)
    _validate_requests(document, targets, disabled)

    current = infer_block_states(document)
    desired = _desired_states(document, current, targets, disabled, reset)
    plan = TogglePlan(current=current, desired=desired)

    for line in document.lines:
        containing = [] if line.is_directive else document.containing_blocks(line.index)
        if not containing:
            plan.states.append(LineState.UNCHANGED)
            continue
        enabled = all(desired[block.index] for block in containing)
        plan.states.append(LineState.ACTIVE if enabled else LineState.INACTIVE)
        if line.is_blank:
            continue
        have = sum(not current[block.index] for block in containing)
        want = sum(not desired[block.index] for block in containing)
        if want != have:
            if have == 0 and line.content.startswith(MARKER):
                raise ReservedContent(line.index, MARKER)
            plan.layers[line.index] = want - have

    for block in document.blocks:
        if block.group in targets and desired[block.index]:
            blockers = [a.group for a in document.ancestors(block.index) if not desired[a.index]]
            if blockers:
                logger.warning(
                    "Group '%s' (line %d) stays commented: enclosing group '%s' is inactive.",
                    block.group, block.opened_at + 1, blockers[0],
                )
        if current[block.index] != desired[block.index]:
            logger.info(
                "Group '%s' (line %d): %s -> %s.",
                block.group,
                block.opened_at + 1,
                "active" if current[block.index] else "inactive",
                "active" if desired[block.index] else "inactive",
            )

    return plan
