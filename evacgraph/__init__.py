"""
Evacgraph - evacuation routing over graphs with live hazard readings.

Nodes become impassable when temperature or gas concentration cross their
thresholds (or when overridden). Queries return exact shortest routes, ranked
loop-free alternatives, and the best routes across every usable exit.

No file I/O required. No global graph state.
"""

__version__ = "0.1.0"

from .config import Config
from .environment import (
    EvacuationGraph,
    ExitInfo,
    GraphValidationError,
    Node,
    PathCandidate,
    path_distance,
    EvacuationGraphState,
    NodeState,
    RouteState,
    is_passable,
    shortest_path,
    nearest_exit,
    k_shortest_paths,
    rank_exit_routes,
)
from .scenario import build_sample_building

__all__ = [
    "Config",
    # Graph model
    "EvacuationGraph",
    "ExitInfo",
    "GraphValidationError",
    "Node",
    "PathCandidate",
    "path_distance",
    # Snapshots
    "EvacuationGraphState",
    "NodeState",
    "RouteState",
    # Queries
    "is_passable",
    "shortest_path",
    "nearest_exit",
    "k_shortest_paths",
    "rank_exit_routes",
    # Sample data
    "build_sample_building",
]
