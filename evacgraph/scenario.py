"""
Sample building used by demos and tests.

Layout:
- Four floors (0-3), each a ring of six locations with ids "<floor><letter>"
  ("0A" .. "3F")
- Ring corridors weigh 1 or 2 (random)
- Adjacent floors are bridged at ring indices 1 and 4 (stairwells, weight 2)
- Floor 0 indices 0, 2 and 4 are exits: North Gate, East Gate, South Gate
- Temperatures are drawn from 18-30 and gas from 0-0.1, so every node starts
  passable under the default thresholds

A seeded ``random.Random`` keeps the layout reproducible.

Usage:
    graph = build_sample_building()
    routes = rank_exit_routes(graph, "3C")
"""

import random
from typing import Optional

from .environment import EvacuationGraph

FLOORS = 4
NODES_PER_FLOOR = 6
EXIT_NAMES = {0: "North Gate", 2: "East Gate", 4: "South Gate"}
BRIDGE_INDICES = (1, 4)
BRIDGE_WEIGHT = 2.0


def node_id_for(floor: int, index: int) -> str:
    """Return the id of ring position ``index`` on ``floor`` (e.g. 0, 2 -> "0C")."""
    return f"{floor}{chr(ord('A') + index)}"


def build_sample_building(seed: Optional[int] = 42) -> EvacuationGraph:
    """Build the four-floor demo building and return its graph."""
    rng = random.Random(seed)
    graph = EvacuationGraph()

    for floor in range(FLOORS):
        for index in range(NODES_PER_FLOOR):
            node_id = node_id_for(floor, index)
            temperature = 18.0 + rng.random() * 12.0
            gas = rng.random() * 0.1

            if floor == 0 and index in EXIT_NAMES:
                graph.add_exit(
                    node_id,
                    EXIT_NAMES[index],
                    floor=floor,
                    temperature=temperature,
                    gas_concentration=gas,
                )
            else:
                graph.add_location(
                    node_id,
                    floor=floor,
                    temperature=temperature,
                    gas_concentration=gas,
                )

    for floor in range(FLOORS):
        for index in range(NODES_PER_FLOOR):
            weight = float(rng.randint(1, 2))
            graph.connect_bidirectional(
                node_id_for(floor, index),
                node_id_for(floor, (index + 1) % NODES_PER_FLOOR),
                weight,
            )

    for floor in range(FLOORS - 1):
        for index in BRIDGE_INDICES:
            graph.connect_bidirectional(
                node_id_for(floor, index),
                node_id_for(floor + 1, index),
                BRIDGE_WEIGHT,
            )

    return graph
