"""Pydantic schemas for evacuation graph snapshots.

These models mirror the live dataclasses in ``graph.py`` and ``paths.py`` but are
detached copies, so renderers can hold on to them while the graph keeps changing.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class NodeState(BaseModel):
    """Point-in-time view of one location (or exit)."""

    node_id: str
    floor: int = 0
    temperature: float
    gas_concentration: float
    temperature_threshold: float
    gas_concentration_threshold: float
    passable_override: Optional[bool] = Field(
        None, description="Manual override; None means thresholds decide",
    )
    passable: bool = Field(..., description="Passability evaluated at snapshot time")
    exit_name: Optional[str] = Field(
        None, description="Human-readable exit label; None for regular locations",
    )

    @property
    def is_exit(self) -> bool:
        return self.exit_name is not None


class EvacuationGraphState(BaseModel):
    """Weighted adjacency map between locations."""

    nodes: Dict[str, NodeState] = Field(
        default_factory=dict,
        description="Map of node_id → node state",
    )
    adjacency: Dict[str, Dict[str, float]] = Field(
        default_factory=dict,
        description="Map of node_id → {neighbor_id: edge weight}",
    )


class RouteState(BaseModel):
    """Serializable form of a ranked route."""

    distance: float
    nodes: List[str] = Field(default_factory=list, description="Node ids from source to target")
