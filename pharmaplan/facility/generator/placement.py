"""
placement.py - Force-directed room placement v1.0

Facility Layout Engine
Positions room nodes with an iterative force simulation followed by a
deterministic overlap-resolution pass.

Forces per iteration:
  - attraction along every non-prohibited relationship, constant magnitude
    priority x attraction strength
  - inverse-square repulsion between all pairs closer than the interaction
    radius, multiplied for prohibited-near pairs
  - constant clustering pull between rooms of the same cleanroom class

Velocities are damped and integrated each iteration. The simulation is a
heuristic; the overlap pass afterwards is what enforces the minimum
separation (half widths plus min_distance) between room centres.

Simulation state lives in an index-addressed arena of numpy arrays, kept
apart from the immutable RoomNode records.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from pharmaplan.bootstrap.config import LayoutConfig
from pharmaplan.facility.schema.request import LayoutConstraints, LayoutStyle, PrioritizeFlow
from pharmaplan.facility.schema.room import RelationshipType, RoomNode, RoomRelationship

__all__ = [
    'SimulationArena',
    'PlacementResult',
    'ForceDirectedPlacer',
]

logger = logging.getLogger(__name__)

FLOW_PRIORITY_BOOST = 1.5

_PRIORITIZED_TYPE = {
    PrioritizeFlow.MATERIAL: RelationshipType.MATERIAL_FLOW,
    PrioritizeFlow.PERSONNEL: RelationshipType.PERSONNEL_FLOW,
}


# =============================================================================
# SIMULATION STATE
# =============================================================================

class SimulationArena:
    """
    Flat simulation state for a list of room nodes.

    Row i of `positions`/`velocities` belongs to `nodes[i]`; positions are
    room centres in metres.
    """

    def __init__(self, nodes: Sequence[RoomNode], positions: Optional[np.ndarray] = None):
        self.nodes: List[RoomNode] = list(nodes)
        self.index: Dict[str, int] = {n.room_id: i for i, n in enumerate(self.nodes)}
        if positions is None:
            positions = np.array([[n.x, n.y] for n in self.nodes], dtype=float).reshape(-1, 2)
        self.positions = np.asarray(positions, dtype=float).reshape(-1, 2).copy()
        self.velocities = np.zeros_like(self.positions)
        self.widths = np.array([n.width for n in self.nodes], dtype=float)

    def __len__(self) -> int:
        return len(self.nodes)

    def pair_distances(self) -> Tuple[np.ndarray, np.ndarray]:
        """(diff, dist) where diff[i, j] = pos[j] - pos[i]."""
        diff = self.positions[None, :, :] - self.positions[:, None, :]
        dist = np.linalg.norm(diff, axis=2)
        return diff, dist

    def to_nodes(self) -> List[RoomNode]:
        return [
            node.with_position(x, y)
            for node, (x, y) in zip(self.nodes, self.positions)
        ]


@dataclass
class PlacementResult:
    """Placed nodes and overlap-resolution outcome."""

    nodes: List[RoomNode] = field(default_factory=list)
    iterations: int = 0
    overlap_rounds: int = 0
    converged: bool = True


# =============================================================================
# PLACER
# =============================================================================

class ForceDirectedPlacer:
    """
    Force-directed placement of room nodes.

    Usage:
        placer = ForceDirectedPlacer(LayoutConfig(seed=7))
        result = placer.place(nodes, relationships)
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or LayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def place(
        self,
        nodes: Sequence[RoomNode],
        relationships: Sequence[RoomRelationship],
        constraints: Optional[LayoutConstraints] = None,
    ) -> PlacementResult:
        """
        Run the force simulation and the overlap pass.

        Args:
            nodes: Sized room nodes (positions ignored)
            relationships: Retrieved relationships between the nodes
            constraints: Optional layout style / flow priority

        Returns:
            PlacementResult with new, positioned nodes
        """
        constraints = constraints or LayoutConstraints()
        if not nodes:
            return PlacementResult()

        arena = SimulationArena(nodes, self._initial_positions(len(nodes), constraints.layout_style))
        src, dst, strength = self._attraction_edges(arena, relationships, constraints.prioritize_flow)
        repulsion = self._repulsion_matrix(arena, relationships)
        clustering = self._clustering_matrix(arena, constraints.layout_style)

        for _ in range(self.config.iterations):
            self.step(arena, src, dst, strength, repulsion, clustering)

        rounds, converged = self.resolve_overlaps(arena)
        logger.info(
            f"Placed {len(arena)} rooms in {self.config.iterations} iterations, "
            f"{rounds} overlap rounds"
        )
        return PlacementResult(
            nodes=arena.to_nodes(),
            iterations=self.config.iterations,
            overlap_rounds=rounds,
            converged=converged,
        )

    def separate(self, nodes: Sequence[RoomNode]) -> PlacementResult:
        """Run only the overlap pass on already positioned nodes."""
        if not nodes:
            return PlacementResult()
        arena = SimulationArena(nodes)
        rounds, converged = self.resolve_overlaps(arena)
        return PlacementResult(nodes=arena.to_nodes(), overlap_rounds=rounds, converged=converged)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _initial_positions(self, count: int, style: Optional[LayoutStyle]) -> np.ndarray:
        extent = self.config.initial_extent
        if style is LayoutStyle.LINEAR:
            size = np.array([extent * 2.0, extent / 4.0])
        elif style is LayoutStyle.COMPACT:
            size = np.array([extent / 2.0, extent / 2.0])
        else:
            size = np.array([extent, extent])
        return self.rng.random((count, 2)) * size

    def _attraction_edges(
        self,
        arena: SimulationArena,
        relationships: Sequence[RoomRelationship],
        prioritize: Optional[PrioritizeFlow],
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        boosted = _PRIORITIZED_TYPE.get(prioritize)
        src, dst, strength = [], [], []
        for rel in relationships:
            if rel.is_prohibited:
                continue
            i = arena.index.get(rel.from_room_id)
            j = arena.index.get(rel.to_room_id)
            if i is None or j is None or i == j:
                continue
            weight = self.config.attraction_strength * rel.priority
            if rel.type is boosted:
                weight *= FLOW_PRIORITY_BOOST
            src.append(i)
            dst.append(j)
            strength.append(weight)
        return (
            np.array(src, dtype=int),
            np.array(dst, dtype=int),
            np.array(strength, dtype=float),
        )

    def _repulsion_matrix(
        self,
        arena: SimulationArena,
        relationships: Sequence[RoomRelationship],
    ) -> np.ndarray:
        n = len(arena)
        matrix = np.full((n, n), self.config.repulsion_strength)
        for rel in relationships:
            if not rel.is_prohibited:
                continue
            i = arena.index.get(rel.from_room_id)
            j = arena.index.get(rel.to_room_id)
            if i is None or j is None:
                continue
            prohibited = self.config.repulsion_strength * self.config.prohibited_repulsion_multiplier
            matrix[i, j] = matrix[j, i] = prohibited
        np.fill_diagonal(matrix, 0.0)
        return matrix

    def _clustering_matrix(self, arena: SimulationArena, style: Optional[LayoutStyle]) -> np.ndarray:
        strength = self.config.clustering_strength
        if style is LayoutStyle.CLUSTERED:
            strength *= 2.0
        classes = [n.cleanroom_class for n in arena.nodes]
        n = len(arena)
        matrix = np.zeros((n, n))
        for i in range(n):
            for j in range(i + 1, n):
                if classes[i] is not None and classes[i] is classes[j]:
                    matrix[i, j] = matrix[j, i] = strength
        return matrix

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def step(
        self,
        arena: SimulationArena,
        src: np.ndarray,
        dst: np.ndarray,
        strength: np.ndarray,
        repulsion: np.ndarray,
        clustering: np.ndarray,
    ) -> None:
        """Advance the simulation by one iteration."""
        forces = np.zeros_like(arena.positions)

        # Attraction
        if len(src):
            delta = arena.positions[dst] - arena.positions[src]
            dist = np.linalg.norm(delta, axis=1)
            unit = np.divide(delta, dist[:, None], out=np.zeros_like(delta), where=dist[:, None] > 0)
            pull = unit * strength[:, None]
            np.add.at(forces, src, pull)
            np.add.at(forces, dst, -pull)

        diff, dist = arena.pair_distances()
        unit = np.divide(diff, dist[..., None], out=np.zeros_like(diff), where=dist[..., None] > 0)

        # Repulsion
        within = (dist > 0) & (dist < self.config.repulsion_radius)
        safe = np.where(within, dist, 1.0)
        magnitude = np.where(within, repulsion / (safe * safe), 0.0)
        forces -= (unit * magnitude[..., None]).sum(axis=1)

        # Clustering
        forces += (unit * clustering[..., None]).sum(axis=1)

        damping = self.config.damping
        arena.velocities = (arena.velocities + forces) * damping
        arena.positions += arena.velocities

    def resolve_overlaps(self, arena: SimulationArena) -> Tuple[int, bool]:
        """
        Push apart pairs closer than their minimum separation.

        Each violating pair moves apart along its separating vector by half
        the deficit plus half the slack. Coincident centres get a random
        direction. Stops after a clean round or when the round budget runs out.

        Returns:
            (rounds used, whether the final state is overlap free)
        """
        pos = arena.positions
        widths = arena.widths
        n = len(arena)
        min_distance = self.config.min_distance
        slack = self.config.overlap_slack

        for round_index in range(self.config.max_overlap_rounds):
            adjusted = False
            for i in range(n):
                for j in range(i + 1, n):
                    delta = pos[j] - pos[i]
                    distance = float(np.hypot(delta[0], delta[1]))
                    required = (widths[i] + widths[j]) / 2 + min_distance
                    if distance >= required:
                        continue
                    adjusted = True
                    if distance > 0:
                        direction = delta / distance
                    else:
                        angle = self.rng.uniform(0.0, 2.0 * np.pi)
                        direction = np.array([np.cos(angle), np.sin(angle)])
                    push = direction * (required - distance + slack) / 2
                    pos[i] -= push
                    pos[j] += push
            if not adjusted:
                return round_index + 1, True

        converged = not self._has_overlap(arena)
        if not converged:
            logger.warning(
                f"Overlap resolution did not converge within "
                f"{self.config.max_overlap_rounds} rounds"
            )
        return self.config.max_overlap_rounds, converged

    def _has_overlap(self, arena: SimulationArena) -> bool:
        _, dist = arena.pair_distances()
        required = (arena.widths[:, None] + arena.widths[None, :]) / 2 + self.config.min_distance
        violating = dist < required
        np.fill_diagonal(violating, False)
        return bool(violating.any())
