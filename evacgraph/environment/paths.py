"""Route candidates produced by the shortest-path searches."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, Tuple

from .schemas import RouteState

if TYPE_CHECKING:
    from .graph import EvacuationGraph


@dataclass(frozen=True)
class PathCandidate:
    """A complete route and its total edge weight.

    Candidates order by distance only. Equal distances compare as neither less
    nor greater, so stable sorts keep discovery order between ties.
    """

    distance: float
    nodes: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def __lt__(self, other: "PathCandidate") -> bool:
        if not isinstance(other, PathCandidate):
            return NotImplemented
        return self.distance < other.distance

    @property
    def source(self) -> str:
        return self.nodes[0]

    @property
    def target(self) -> str:
        return self.nodes[-1]

    def __len__(self) -> int:
        return len(self.nodes)

    def __str__(self) -> str:
        return f"{self.distance:.1f}  [ {' -> '.join(self.nodes)} ]"

    def to_state(self) -> RouteState:
        return RouteState(distance=self.distance, nodes=list(self.nodes))


def path_distance(graph: "EvacuationGraph", nodes: Sequence[str]) -> float:
    """Sum the edge weights along ``nodes``. A missing edge yields ``math.inf``."""
    total = 0.0
    for current, nxt in zip(nodes, nodes[1:]):
        weight = graph.weight(current, nxt)
        if weight is None:
            return math.inf
        total += weight
    return total
