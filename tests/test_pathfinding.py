"""Tests for restricted shortest-path and nearest-exit searches."""

import pytest

from evacgraph.environment import (
    EvacuationGraph,
    nearest_exit,
    path_distance,
    shortest_path,
)


def make_diamond() -> EvacuationGraph:
    """A-B(5), A-C(3), B-D(4), C-D(2), D-E(7)."""
    graph = EvacuationGraph()
    for node_id in ("A", "B", "C", "D"):
        graph.add_location(node_id)
    graph.add_exit("E", "Main Exit")
    graph.connect_bidirectional("A", "B", 5)
    graph.connect_bidirectional("A", "C", 3)
    graph.connect_bidirectional("B", "D", 4)
    graph.connect_bidirectional("C", "D", 2)
    graph.connect_bidirectional("D", "E", 7)
    return graph


def test_shortest_path_example():
    graph = make_diamond()
    route = shortest_path(graph, "A", "E")

    assert route is not None
    assert route.nodes == ("A", "C", "D", "E")
    assert route.distance == 12.0
    assert route.distance == path_distance(graph, route.nodes)
    assert str(route) == "12.0  [ A -> C -> D -> E ]"


def test_shortest_path_to_self():
    graph = make_diamond()
    route = shortest_path(graph, "A", "A")

    assert route is not None
    assert route.nodes == ("A",)
    assert route.distance == 0.0


def test_shortest_path_avoids_impassable_nodes():
    graph = make_diamond()
    graph.update_conditions("C", temperature=95.0)

    route = shortest_path(graph, "A", "E")
    assert route is not None
    assert route.nodes == ("A", "B", "D", "E")
    assert route.distance == 16.0


def test_blocked_target_is_still_reachable_as_terminal():
    graph = make_diamond()
    graph.set_passable("E", False)

    route = shortest_path(graph, "A", "E")
    assert route is not None
    assert route.target == "E"
    assert route.nodes == ("A", "C", "D", "E")


def test_no_route_returns_none():
    graph = make_diamond()
    graph.set_passable("D", False)

    assert shortest_path(graph, "A", "E") is None


def test_node_without_passable_neighbors_is_never_crossed():
    graph = EvacuationGraph()
    for node_id in ("S", "M", "T"):
        graph.add_location(node_id)
    graph.add_location("hot", temperature=120.0)
    graph.connect_bidirectional("S", "M", 1)
    graph.connect_bidirectional("M", "hot", 1)
    graph.connect_bidirectional("hot", "T", 1)

    assert shortest_path(graph, "S", "T") is None
    # Still reachable when it is the target itself
    assert shortest_path(graph, "S", "hot").nodes == ("S", "M", "hot")


def test_directed_edges_are_respected():
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")
    graph.connect("a", "b", 1.0)

    assert shortest_path(graph, "a", "b").distance == 1.0
    assert shortest_path(graph, "b", "a") is None


def test_unknown_ids_raise():
    graph = make_diamond()
    with pytest.raises(KeyError):
        shortest_path(graph, "A", "Z")
    with pytest.raises(KeyError):
        nearest_exit(graph, "Z")


def test_nearest_exit_prefers_closest_passable():
    graph = make_diamond()
    graph.add_exit("F", "Side Door")
    graph.connect_bidirectional("B", "F", 2)

    # A-B-F = 7 beats A-C-D-E = 12
    assert nearest_exit(graph, "A").node_id == "F"

    graph.set_passable("F", False)
    assert nearest_exit(graph, "A").node_id == "E"


def test_nearest_exit_skips_blocked_exits_entirely():
    graph = make_diamond()
    graph.set_passable("E", False)
    assert nearest_exit(graph, "A") is None


def test_nearest_exit_from_an_exit():
    graph = make_diamond()
    assert nearest_exit(graph, "E").node_id == "E"


def test_path_distance_missing_edge_is_infinite():
    graph = make_diamond()
    assert path_distance(graph, ["A", "D"]) == float("inf")
    assert path_distance(graph, ["A"]) == 0.0
