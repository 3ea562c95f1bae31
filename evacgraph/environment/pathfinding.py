"""Route searches over an evacuation graph.

All searches are exact Dijkstra variants over non-negative weights. They only
step onto nodes that are passable *at the moment they are examined*; nothing is
cached between calls, so new sensor readings take effect on the next query.
Exclusions for Yen's algorithm are passed in as sets and the shared graph is
never modified.
"""

from __future__ import annotations

import heapq
import itertools
import math
from typing import AbstractSet, Dict, List, Optional, Set, Tuple

from ..config import Config
from ..logging_utils import log_deterministic, log_info
from .graph import EvacuationGraph, Node
from .paths import PathCandidate, path_distance

EdgeKey = Tuple[str, str]


def is_passable(node: Node) -> bool:
    """Return whether ``node`` can currently be traversed."""
    return node.is_passable()


def _restricted_dijkstra(
    graph: EvacuationGraph,
    source: str,
    target: str,
    *,
    excluded_nodes: AbstractSet[str] = frozenset(),
    excluded_edges: AbstractSet[EdgeKey] = frozenset(),
) -> Optional[List[str]]:
    """Return the node ids of the cheapest route, or None if unreachable.

    A neighbor is relaxed only if it is passable, except ``target`` which is
    always accepted as a terminal so callers can see routes to blocked exits.
    """
    graph.node(source)
    graph.node(target)

    dist: Dict[str, float] = {source: 0.0}
    prev: Dict[str, str] = {}
    # Counter breaks distance ties in insertion order and keeps ids out of comparisons.
    counter = itertools.count()
    frontier: List[Tuple[float, int, str]] = [(0.0, next(counter), source)]

    while frontier:
        current_dist, _, node_id = heapq.heappop(frontier)
        if node_id == target:
            break
        if current_dist > dist.get(node_id, math.inf):
            continue  # stale entry

        for neighbor_id, weight in graph.nodes[node_id].neighbors.items():
            if neighbor_id in excluded_nodes:
                continue
            if (node_id, neighbor_id) in excluded_edges:
                continue
            neighbor = graph.get_node(neighbor_id)
            if neighbor is None:
                continue
            if neighbor_id != target and not neighbor.is_passable():
                continue

            candidate_dist = current_dist + weight
            if candidate_dist < dist.get(neighbor_id, math.inf):
                dist[neighbor_id] = candidate_dist
                prev[neighbor_id] = node_id
                heapq.heappush(frontier, (candidate_dist, next(counter), neighbor_id))

    if target not in dist:
        return None

    path = [target]
    while path[-1] != source:
        path.append(prev[path[-1]])
    path.reverse()
    return path


def shortest_path(graph: EvacuationGraph, source: str, target: str) -> Optional[PathCandidate]:
    """Return the cheapest route from ``source`` to ``target``.

    Intermediate nodes must be passable; ``target`` itself is always eligible.
    Returns None when no route exists. ``shortest_path(g, a, a)`` is the
    single-node route of distance 0.

    Raises:
        KeyError: If either id is not registered
    """
    nodes = _restricted_dijkstra(graph, source, target)
    if nodes is None:
        return None
    return PathCandidate(distance=path_distance(graph, nodes), nodes=tuple(nodes))


def nearest_exit(graph: EvacuationGraph, source: str) -> Optional[Node]:
    """Return the closest exit that is currently passable, or None.

    Unlike ``shortest_path`` there is no terminal exception: blocked exits are
    skipped like any other blocked node. A passable exit at ``source`` is
    returned immediately.
    """
    graph.node(source)

    dist: Dict[str, float] = {source: 0.0}
    counter = itertools.count()
    frontier: List[Tuple[float, int, str]] = [(0.0, next(counter), source)]

    while frontier:
        current_dist, _, node_id = heapq.heappop(frontier)
        if current_dist > dist.get(node_id, math.inf):
            continue

        node = graph.nodes[node_id]
        if node.is_exit and node.is_passable():
            return node

        for neighbor_id, weight in node.neighbors.items():
            neighbor = graph.get_node(neighbor_id)
            if neighbor is None or not neighbor.is_passable():
                continue
            candidate_dist = current_dist + weight
            if candidate_dist < dist.get(neighbor_id, math.inf):
                dist[neighbor_id] = candidate_dist
                heapq.heappush(frontier, (candidate_dist, next(counter), neighbor_id))

    return None


def k_shortest_paths(
    graph: EvacuationGraph,
    source: str,
    target: str,
    k: int,
) -> List[PathCandidate]:
    """Return up to ``k`` loop-free routes to ``target``, cheapest first (Yen's algorithm).

    For each confirmed route, every node but the last is tried as a spur: the
    root prefix up to the spur is kept, the next edge of every confirmed route
    sharing that root is excluded, and the root's other nodes are excluded so the
    spur search cannot loop back. Candidates are deduplicated by full node
    sequence, since distinct routes can tie on distance.

    Fewer than ``k`` routes are returned when fewer exist.

    Raises:
        ValueError: If ``k`` < 1
        KeyError: If either id is not registered
    """
    if k < 1:
        raise ValueError(f"k must be at least 1 (got {k})")

    first = shortest_path(graph, source, target)
    if first is None:
        return []

    confirmed: List[PathCandidate] = [first]
    seen: Set[Tuple[str, ...]] = {first.nodes}
    counter = itertools.count()
    pending: List[Tuple[float, int, PathCandidate]] = []

    for kth in range(1, k):
        previous = confirmed[kth - 1].nodes

        for spur_index in range(len(previous) - 1):
            spur_node = previous[spur_index]
            root = previous[: spur_index + 1]

            excluded_edges: Set[EdgeKey] = set()
            for path in confirmed:
                if len(path.nodes) > spur_index + 1 and path.nodes[: spur_index + 1] == root:
                    excluded_edges.add((spur_node, path.nodes[spur_index + 1]))
            excluded_nodes = set(root[:-1])

            spur = _restricted_dijkstra(
                graph,
                spur_node,
                target,
                excluded_nodes=excluded_nodes,
                excluded_edges=excluded_edges,
            )
            if spur is None:
                continue

            total_nodes = root + tuple(spur[1:])
            if total_nodes in seen:
                continue
            seen.add(total_nodes)
            candidate = PathCandidate(
                distance=path_distance(graph, total_nodes), nodes=total_nodes
            )
            heapq.heappush(pending, (candidate.distance, next(counter), candidate))

        if not pending:
            break
        _, _, best = heapq.heappop(pending)
        confirmed.append(best)

    return confirmed


def rank_exit_routes(
    graph: EvacuationGraph,
    source: str,
    *,
    routes_per_exit: Optional[int] = None,
    limit: Optional[int] = None,
    verbose: Optional[bool] = None,
) -> List[PathCandidate]:
    """Return the best evacuation routes from ``source`` across all passable exits.

    Runs ``k_shortest_paths`` with ``routes_per_exit`` against every exit that is
    passable right now, pools the results and keeps the ``limit`` cheapest.
    Blocked exits are never queried. An empty list means no route exists.

    Defaults come from ``Config.ROUTES_PER_EXIT`` and ``Config.MAX_ROUTES`` (3 each).
    Ties keep discovery order: exits in registration order, then each exit's
    own ranking.
    """
    routes_per_exit = Config.ROUTES_PER_EXIT if routes_per_exit is None else routes_per_exit
    limit = Config.MAX_ROUTES if limit is None else limit
    verbose = Config.VERBOSE if verbose is None else verbose
    if limit < 1:
        raise ValueError(f"limit must be at least 1 (got {limit})")

    graph.node(source)
    exits = graph.exits(passable_only=True)
    if not exits:
        if verbose:
            log_info("No passable exits in the graph.")
        return []

    pool: List[PathCandidate] = []
    for exit_node in exits:
        routes = k_shortest_paths(graph, source, exit_node.node_id, routes_per_exit)
        if verbose:
            log_deterministic(
                f"[Routes] {len(routes)} route(s) from {source} to {exit_node.exit_name}"
            )
        pool.extend(routes)

    pool.sort(key=lambda candidate: candidate.distance)
    ranked = pool[:limit]

    if verbose:
        if ranked:
            log_info(f"Top {len(ranked)} route(s) from {source} across {len(exits)} exit(s).")
        else:
            log_info(f"No reachable routes from {source}.")
    return ranked
