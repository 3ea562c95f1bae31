"""Evacuation graph: locations, exits and weighted corridors.

Nodes are indexed by id. Adjacency is stored per node as ``neighbor_id -> weight``
so nothing relies on object identity. An exit is an ordinary ``Node`` that carries
``ExitInfo`` metadata; search code checks ``node.is_exit`` instead of a type test.
"""

from __future__ import annotations

import math
from dataclasses import FrozenInstanceError, dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ..config import Config
from ..logging_utils import log_error, log_success
from .schemas import EvacuationGraphState, NodeState


class GraphValidationError(Exception):
    """Raised when the graph fails its structural precondition check.

    Every registered node needs at least one neighbor. All offending ids are
    collected so a builder can fix them in one pass.
    """

    def __init__(self, *, isolated: List[str]) -> None:
        self.isolated = isolated
        message_lines = [
            f"{len(isolated)} node(s) have no connections:",
        ]
        for node_id in isolated:
            message_lines.append(f"  - {node_id}")
        message_lines.extend(
            [
                "\nRemediation tips:",
                "  - Connect each node with connect() or connect_bidirectional()",
                "  - Check for typos in node ids passed to connect()",
            ]
        )
        super().__init__("\n".join(message_lines))


def _check_weight(weight: float) -> float:
    weight = float(weight)
    if math.isnan(weight) or weight < 0:
        raise ValueError(f"Edge weight must be a non-negative number (got {weight})")
    return weight


# Identity fields are fixed once set; the registry keys on node_id.
_IDENTITY_FIELDS = frozenset({"node_id", "floor", "exit"})


@dataclass(frozen=True)
class ExitInfo:
    """Metadata that marks a node as an evacuation exit."""

    name: str


@dataclass(eq=False)
class Node:
    """A physical location with live environmental readings.

    Passability is derived from the readings on every call unless an override
    is installed. Thresholds are per node so independent graphs never share them.
    ``node_id``, ``floor`` and ``exit`` cannot be reassigned after construction.
    """

    node_id: str
    floor: int = 0
    temperature: float = 20.0
    gas_concentration: float = 0.0
    temperature_threshold: float = field(
        default_factory=lambda: Config.DEFAULT_TEMPERATURE_THRESHOLD
    )
    gas_concentration_threshold: float = field(
        default_factory=lambda: Config.DEFAULT_GAS_CONCENTRATION_THRESHOLD
    )
    passable_override: Optional[bool] = None
    exit: Optional[ExitInfo] = None
    neighbors: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        neighbors: Dict[str, float] = {}
        for neighbor_id, weight in self.neighbors.items():
            if not neighbor_id:
                raise ValueError("Neighbor id must be a non-empty string")
            neighbors[neighbor_id] = _check_weight(weight)
        self.neighbors = neighbors

    def __setattr__(self, name: str, value: object) -> None:
        if name in _IDENTITY_FIELDS and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field '{name}'")
        super().__setattr__(name, value)

    @property
    def is_exit(self) -> bool:
        return self.exit is not None

    @property
    def exit_name(self) -> Optional[str]:
        return self.exit.name if self.exit is not None else None

    def is_passable(self) -> bool:
        """Return whether this node can currently be walked through.

        An installed override wins unconditionally. Otherwise both readings must
        be at or below their thresholds.
        """
        if self.passable_override is not None:
            return self.passable_override
        return (
            self.temperature <= self.temperature_threshold
            and self.gas_concentration <= self.gas_concentration_threshold
        )

    def set_passable(self, passable: bool) -> None:
        """Install a manual override that bypasses threshold evaluation."""
        self.passable_override = bool(passable)

    def clear_override(self) -> None:
        self.passable_override = None

    def has_override(self) -> bool:
        return self.passable_override is not None

    def add_neighbor(self, neighbor_id: str, weight: float) -> None:
        """Add (or replace) a directed edge from this node to ``neighbor_id``."""
        if not neighbor_id:
            raise ValueError("Neighbor id must be a non-empty string")
        self.neighbors[neighbor_id] = _check_weight(weight)

    def describe(self) -> str:
        """One-line status summary used by debug output and renderers."""
        source = "override" if self.has_override() else "threshold"
        if self.is_exit:
            return (
                f"Exit {self.node_id!r} ({self.exit_name}) floor={self.floor} "
                f"passable={self.is_passable()} ({source}) "
                f"temp={self.temperature:.1f} gas={self.gas_concentration:.2f}"
            )
        return (
            f"Node {self.node_id!r} floor={self.floor} "
            f"passable={self.is_passable()} ({source}) "
            f"temp={self.temperature:.1f}/{self.temperature_threshold:.1f} "
            f"gas={self.gas_concentration:.2f}/{self.gas_concentration_threshold:.2f}"
        )

    def to_state(self) -> NodeState:
        return NodeState(
            node_id=self.node_id,
            floor=self.floor,
            temperature=self.temperature,
            gas_concentration=self.gas_concentration,
            temperature_threshold=self.temperature_threshold,
            gas_concentration_threshold=self.gas_concentration_threshold,
            passable_override=self.passable_override,
            passable=self.is_passable(),
            exit_name=self.exit_name,
        )


class EvacuationGraph:
    """Registry of nodes keyed by id, plus the construction and mutation API.

    Edges are only ever added. Searches read the graph without modifying it, so
    several read-only queries may share one instance as long as no node changes
    while they run.
    """

    def __init__(self) -> None:
        # Insertion order is registration order; exit ranking relies on it.
        self._nodes: Dict[str, Node] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        """Register a node. Raises ValueError if the id is already taken."""
        if not node.node_id:
            raise ValueError("Node id must be a non-empty string")
        if node.node_id in self._nodes:
            raise ValueError(f"Node '{node.node_id}' is already registered")
        self._nodes[node.node_id] = node
        return node

    def add_location(
        self,
        node_id: str,
        *,
        floor: int = 0,
        temperature: float = 20.0,
        gas_concentration: float = 0.0,
        temperature_threshold: Optional[float] = None,
        gas_concentration_threshold: Optional[float] = None,
    ) -> Node:
        """Create and register a regular location node."""
        node = Node(
            node_id=node_id,
            floor=floor,
            temperature=temperature,
            gas_concentration=gas_concentration,
        )
        if temperature_threshold is not None:
            node.temperature_threshold = temperature_threshold
        if gas_concentration_threshold is not None:
            node.gas_concentration_threshold = gas_concentration_threshold
        return self.add_node(node)

    def add_exit(
        self,
        node_id: str,
        name: str,
        *,
        floor: int = 0,
        passable: bool = True,
        temperature: float = 20.0,
        gas_concentration: float = 0.0,
        temperature_threshold: Optional[float] = None,
        gas_concentration_threshold: Optional[float] = None,
    ) -> Node:
        """Create and register an exit.

        ``passable=False`` force-blocks the exit by installing an override, so it
        stays blocked regardless of readings until the override is cleared.
        """
        node = Node(
            node_id=node_id,
            floor=floor,
            temperature=temperature,
            gas_concentration=gas_concentration,
            exit=ExitInfo(name=name),
        )
        if temperature_threshold is not None:
            node.temperature_threshold = temperature_threshold
        if gas_concentration_threshold is not None:
            node.gas_concentration_threshold = gas_concentration_threshold
        if not passable:
            node.set_passable(False)
        return self.add_node(node)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def node(self, node_id: str) -> Node:
        """Return the node with ``node_id`` or raise KeyError."""
        try:
            return self._nodes[node_id]
        except KeyError:
            raise KeyError(f"Node '{node_id}' not found") from None

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only view of node_id -> Node."""
        return MappingProxyType(self._nodes)

    def all_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def exits(self, *, passable_only: bool = False) -> List[Node]:
        """Return exits in registration order, optionally only the passable ones."""
        return [
            node
            for node in self._nodes.values()
            if node.is_exit and (not passable_only or node.is_passable())
        ]

    def neighbors(self, node_id: str) -> Mapping[str, float]:
        return MappingProxyType(self.node(node_id).neighbors)

    def weight(self, from_id: str, to_id: str) -> Optional[float]:
        """Return the directed edge weight, or None if there is no such edge."""
        node = self._nodes.get(from_id)
        if node is None:
            return None
        return node.neighbors.get(to_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def connect(self, from_id: str, to_id: str, weight: float) -> None:
        """Add a directed edge. Both ids must already be registered."""
        for node_id in (from_id, to_id):
            if node_id not in self._nodes:
                raise ValueError(f"Cannot connect unknown node '{node_id}'")
        self._nodes[from_id].add_neighbor(to_id, weight)

    def connect_bidirectional(self, a_id: str, b_id: str, weight: float) -> None:
        """Add edges a->b and b->a with the same weight."""
        # Weight is checked up front; a bad weight leaves no half-edge.
        _check_weight(weight)
        self.connect(a_id, b_id, weight)
        self.connect(b_id, a_id, weight)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update_conditions(
        self,
        node_id: str,
        *,
        temperature: Optional[float] = None,
        gas_concentration: Optional[float] = None,
    ) -> Node:
        """Apply new sensor readings to a node. Omitted readings are unchanged."""
        node = self.node(node_id)
        if temperature is not None:
            node.temperature = float(temperature)
        if gas_concentration is not None:
            node.gas_concentration = float(gas_concentration)
        return node

    def set_thresholds(
        self,
        node_id: str,
        *,
        temperature_threshold: Optional[float] = None,
        gas_concentration_threshold: Optional[float] = None,
    ) -> Node:
        node = self.node(node_id)
        if temperature_threshold is not None:
            node.temperature_threshold = float(temperature_threshold)
        if gas_concentration_threshold is not None:
            node.gas_concentration_threshold = float(gas_concentration_threshold)
        return node

    def set_passable(self, node_id: str, passable: bool) -> Node:
        node = self.node(node_id)
        node.set_passable(passable)
        return node

    def clear_override(self, node_id: str) -> Node:
        node = self.node(node_id)
        node.clear_override()
        return node

    # ------------------------------------------------------------------
    # Validation and snapshots
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check that every registered node has at least one neighbor.

        Raises:
            GraphValidationError: listing every isolated node id
        """
        isolated = [node.node_id for node in self._nodes.values() if not node.neighbors]
        if isolated:
            log_error(f"Graph validation failed: {len(isolated)} isolated node(s)")
            raise GraphValidationError(isolated=isolated)
        log_success(f"Graph validated successfully: {len(self._nodes)} nodes registered.")

    def snapshot(self) -> EvacuationGraphState:
        """Return a detached, serializable copy of the current graph state."""
        return EvacuationGraphState(
            nodes={node_id: node.to_state() for node_id, node in self._nodes.items()},
            adjacency={
                node_id: dict(node.neighbors) for node_id, node in self._nodes.items()
            },
        )
