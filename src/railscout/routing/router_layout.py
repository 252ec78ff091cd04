"""Static analysis of junction router layouts.

A junction router sends a cart down the first exit whose destination
argument matches the cart's destination as a prefix. When one exit
lists ``icenia`` and another lists ``icenia-city``, a router that happens to
test ``icenia`` first sends ``icenia-city`` traffic the wrong way. Such a
layout cannot be built unordered: the more specific argument must be
checked physically before its prefix.
"""

from __future__ import annotations

__all__ = [
    "ConflictDetected",
    "PrefixConflict",
    "RouterStatus",
    "UnorderedSafe",
    "iter_prefix_conflicts",
    "suggest_check_order",
    "validate_router_layout",
]

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Union

import networkx as nx

from railscout.parser.model import Exit


class RouterStatus(str, Enum):
    UNORDERED_SAFE = "UNORDERED_SAFE"
    CONFLICT_DETECTED = "CONFLICT_DETECTED"


@dataclass(frozen=True)
class PrefixConflict:
    """``arg_a`` on ``exit_a`` is a literal prefix of ``arg_b`` on ``exit_b``."""

    arg_a: str
    arg_b: str
    exit_a: Exit
    exit_b: Exit

    @property
    def reason(self) -> str:
        return (
            f"Argument '{self.arg_a}' is a prefix of '{self.arg_b}' on a "
            "different exit. Ordered Physical Layout required."
        )


@dataclass(frozen=True)
class UnorderedSafe:
    @property
    def status(self) -> RouterStatus:
        return RouterStatus.UNORDERED_SAFE


@dataclass(frozen=True)
class ConflictDetected:
    reason: str
    conflict: PrefixConflict

    @property
    def status(self) -> RouterStatus:
        return RouterStatus.CONFLICT_DETECTED


RouterValidationResult = Union[UnorderedSafe, ConflictDetected]


def iter_prefix_conflicts(exits: Sequence[Exit]) -> Iterator[PrefixConflict]:
    """Yield every prefix conflict between distinct exits.

    Order: prefix exit index, then the other exit's index, then argument
    positions within each.
    """
    for i, exit_a in enumerate(exits):
        for j, exit_b in enumerate(exits):
            if i == j:
                continue
            for arg_a in exit_a.onedest_args:
                for arg_b in exit_b.onedest_args:
                    if arg_a != arg_b and arg_b.startswith(arg_a):
                        yield PrefixConflict(arg_a, arg_b, exit_a, exit_b)


def validate_router_layout(exits: Sequence[Exit]) -> RouterValidationResult:
    """Report whether ``exits`` can be wired in any order.

    Only the first conflict found is reported; use iter_prefix_conflicts()
    for the complete list.
    """
    conflict = next(iter_prefix_conflicts(exits), None)
    if conflict is None:
        return UnorderedSafe()
    return ConflictDetected(reason=conflict.reason, conflict=conflict)


def suggest_check_order(exits: Sequence[Exit]) -> list[tuple[str, Exit]]:
    """Order every (argument, exit) pair for an ordered physical layout.

    A more specific argument always comes before any prefix of it that is
    routed to a different exit. Unconstrained pairs keep declaration order.
    """
    G = nx.DiGraph()
    slots: dict[tuple[int, int], tuple[str, Exit]] = {}
    for i, ex in enumerate(exits):
        for k, arg in enumerate(ex.onedest_args):
            slots[(i, k)] = (arg, ex)
            G.add_node((i, k))

    for (i, k), (arg_a, _) in slots.items():
        for (j, m), (arg_b, _) in slots.items():
            if i != j and arg_a != arg_b and arg_b.startswith(arg_a):
                # the longer, more specific string is checked first
                G.add_edge((j, m), (i, k))

    return [slots[n] for n in nx.lexicographical_topological_sort(G)]
