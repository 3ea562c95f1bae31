"""Evacuation graph model and route searches."""

from .graph import EvacuationGraph, ExitInfo, GraphValidationError, Node
from .paths import PathCandidate, path_distance
from .schemas import EvacuationGraphState, NodeState, RouteState
from .pathfinding import (
    is_passable,
    shortest_path,
    nearest_exit,
    k_shortest_paths,
    rank_exit_routes,
)

__all__ = [
    "EvacuationGraph",
    "ExitInfo",
    "GraphValidationError",
    "Node",
    "PathCandidate",
    "path_distance",
    "EvacuationGraphState",
    "NodeState",
    "RouteState",
    "is_passable",
    "shortest_path",
    "nearest_exit",
    "k_shortest_paths",
    "rank_exit_routes",
]
