"""Routing subpackage: path finding and junction router analysis.

Public API:
- shortest_path: Directed Dijkstra between two nodes
- validate_router_layout: Prefix-conflict check for a junction's exits
- iter_prefix_conflicts / suggest_check_order: Full conflict listing and
  a physical check order that resolves them
"""

from railscout.routing.pathfinder import (
    RoutePath,
    ShortestPath,
    build_adjacency,
    shortest_path,
)
from railscout.routing.router_layout import (
    ConflictDetected,
    PrefixConflict,
    RouterStatus,
    UnorderedSafe,
    iter_prefix_conflicts,
    suggest_check_order,
    validate_router_layout,
)

__all__ = [
    "ConflictDetected",
    "PrefixConflict",
    "RoutePath",
    "RouterStatus",
    "ShortestPath",
    "UnorderedSafe",
    "build_adjacency",
    "iter_prefix_conflicts",
    "shortest_path",
    "suggest_check_order",
    "validate_router_layout",
]
