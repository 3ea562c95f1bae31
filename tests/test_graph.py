"""Tests for graph construction, registry lookups and validation."""

from dataclasses import FrozenInstanceError

import pytest

from evacgraph.environment import (
    EvacuationGraph,
    GraphValidationError,
    Node,
)


def test_bidirectional_edges_are_symmetric():
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")
    graph.connect_bidirectional("a", "b", 4.5)

    assert graph.weight("a", "b") == 4.5
    assert graph.weight("b", "a") == 4.5


def test_directed_edge_only_one_way():
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")
    graph.connect("a", "b", 1.0)

    assert graph.weight("a", "b") == 1.0
    assert graph.weight("b", "a") is None


def test_negative_weight_rejected():
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")

    with pytest.raises(ValueError):
        graph.connect("a", "b", -1.0)
    with pytest.raises(ValueError):
        graph.connect_bidirectional("a", "b", -0.5)

    # No half-edge left behind by the failed bidirectional call
    assert graph.weight("a", "b") is None
    assert graph.weight("b", "a") is None

    with pytest.raises(ValueError):
        graph.node("a").add_neighbor("b", -3)


def test_zero_weight_allowed():
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")
    graph.connect("a", "b", 0)
    assert graph.weight("a", "b") == 0.0


def test_duplicate_and_unknown_ids():
    graph = EvacuationGraph()
    graph.add_location("a")

    with pytest.raises(ValueError):
        graph.add_node(Node(node_id="a"))
    with pytest.raises(ValueError):
        graph.connect("a", "ghost", 1.0)
    with pytest.raises(KeyError):
        graph.node("ghost")
    assert graph.get_node("ghost") is None


def test_registry_enumeration_keeps_order():
    graph = EvacuationGraph()
    graph.add_location("r1")
    graph.add_exit("x1", "West Door")
    graph.add_location("r2")
    graph.add_exit("x2", "East Door", passable=False)

    assert [n.node_id for n in graph.all_nodes()] == ["r1", "x1", "r2", "x2"]
    assert [n.node_id for n in graph.exits()] == ["x1", "x2"]
    assert [n.node_id for n in graph.exits(passable_only=True)] == ["x1"]
    assert len(graph) == 4
    assert "r2" in graph

    with pytest.raises(TypeError):
        graph.nodes["r3"] = Node(node_id="r3")


def test_validate_reports_isolated_nodes(capsys):
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_location("b")
    graph.add_location("lonely")
    graph.add_location("stray")
    graph.connect_bidirectional("a", "b", 1.0)

    with pytest.raises(GraphValidationError) as excinfo:
        graph.validate()
    assert excinfo.value.isolated == ["lonely", "stray"]
    assert "lonely" in str(excinfo.value)


def test_validate_success_prints_summary(capsys, monkeypatch):
    monkeypatch.setenv("EVACGRAPH_NO_COLOR", "1")
    graph = EvacuationGraph()
    graph.add_location("a")
    graph.add_exit("x", "Gate")
    graph.connect_bidirectional("a", "x", 2.0)

    graph.validate()
    out = capsys.readouterr().out
    assert "Graph validated successfully: 2 nodes registered." in out
    assert "\033[" not in out


def test_mutation_helpers_require_known_ids():
    graph = EvacuationGraph()
    with pytest.raises(KeyError):
        graph.update_conditions("missing", temperature=10.0)
    with pytest.raises(KeyError):
        graph.set_passable("missing", False)


def test_negative_weight_rejected_in_constructor():
    with pytest.raises(ValueError):
        Node(node_id="a", neighbors={"b": -5.0})
    with pytest.raises(ValueError):
        Node(node_id="a", neighbors={"b": float("nan")})

    node = Node(node_id="a", neighbors={"b": 2})
    assert node.neighbors == {"b": 2.0}


def test_node_identity_is_read_only():
    graph = EvacuationGraph()
    room = graph.add_location("a", floor=1)
    gate = graph.add_exit("x", "Front Door")

    with pytest.raises(FrozenInstanceError):
        room.node_id = "z"
    with pytest.raises(FrozenInstanceError):
        room.floor = 2
    with pytest.raises(FrozenInstanceError):
        gate.exit = None

    assert room.node_id == "a"
    assert graph.node("a") is room
    assert gate.exit_name == "Front Door"

    # Live readings stay mutable
    room.temperature = 30.0
    assert room.temperature == 30.0


def test_exit_accepts_custom_thresholds():
    graph = EvacuationGraph()
    gate = graph.add_exit(
        "x",
        "Loading Dock",
        temperature=50.0,
        gas_concentration=0.3,
        temperature_threshold=45.0,
        gas_concentration_threshold=0.4,
    )

    assert gate.temperature_threshold == 45.0
    assert gate.gas_concentration_threshold == 0.4
    assert gate.is_passable() is False
