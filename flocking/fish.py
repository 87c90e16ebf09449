"""
Fish Agent

This module defines the `Fish` agent and its Boids steering model. Each fish
computes separation, alignment and cohesion forces from the other fish within
independent radii, adds obstacle repulsion, then limits its speed, moves and
wraps around the edges of the world.

Neighbor scans are brute-force over a snapshot of all positions and
velocities. The fish being updated is identified by its index in that
snapshot, and that index is skipped during the scan.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Sequence

import numpy as np
from numba import njit

from flocking.obstacles import AvoidanceParams, Obstacle, obstacle_repulsion
from flocking.utils import as_vec, clamp_length, heading_angle, norm

# -----------------------------------------------------------------------------
# Constants & Configuration
# -----------------------------------------------------------------------------

DEFAULT_BODY_LENGTH = 15.0
DEFAULT_MAX_SPEED = 150.0


@dataclass(frozen=True)
class ForceParams:
    """Per-fish Boids tunables."""

    # Neighborhood radii
    separation_radius: float = 25.0  # Move away from fish closer than this
    alignment_radius: float = 50.0  # Match velocity of fish within this
    cohesion_radius: float = 50.0  # Steer toward the centroid of fish within this

    # Weights
    separation_weight: float = 30.0
    alignment_weight: float = 1.0
    cohesion_weight: float = 0.5

    max_speed: float = DEFAULT_MAX_SPEED

    def __post_init__(self):
        for name in ("separation_radius", "alignment_radius", "cohesion_radius"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value}")
        for name in ("separation_weight", "alignment_weight", "cohesion_weight"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if not math.isfinite(self.max_speed) or self.max_speed < 0:
            raise ValueError(f"max_speed must be finite and >= 0, got {self.max_speed}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ForceParams:
        """Create ForceParams from a dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


# -----------------------------------------------------------------------------
# Fish Class
# -----------------------------------------------------------------------------


class Fish:
    """A single fish: position, velocity and the Boids tunables that drive it."""

    def __init__(
        self,
        position,
        velocity,
        body_length: float = DEFAULT_BODY_LENGTH,
        params: ForceParams | None = None,
    ):
        self.position = as_vec(position).copy()
        self.velocity = as_vec(velocity).copy()
        self.body_length = float(body_length)
        self.params = params if params is not None else ForceParams()

    def __repr__(self) -> str:
        return (
            f"Fish(position={self.position.tolist()}, "
            f"velocity={self.velocity.tolist()})"
        )

    # -------------------------------------------------------------------------
    # Boids Forces
    # -------------------------------------------------------------------------

    def separation(self, i: int, P: np.ndarray) -> np.ndarray:
        """Average unit vector pointing away from fish within the separation radius."""
        return _separation_numba(_contig(P), int(i), float(self.params.separation_radius))

    def alignment(self, i: int, P: np.ndarray, V: np.ndarray) -> np.ndarray:
        """Difference between the neighbors' average velocity and this fish's velocity."""
        return _alignment_numba(
            _contig(P), _contig(V), int(i), float(self.params.alignment_radius)
        )

    def cohesion(self, i: int, P: np.ndarray) -> np.ndarray:
        """Vector from this fish toward the centroid of its neighbors."""
        return _cohesion_numba(_contig(P), int(i), float(self.params.cohesion_radius))

    def obstacle_avoidance(
        self,
        point: np.ndarray,
        obstacles: Sequence[Obstacle],
        avoidance: AvoidanceParams | None = None,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        """Repulsion away from obstacles near `point`."""
        if not obstacles:
            return np.zeros(2)
        if avoidance is None:
            avoidance = AvoidanceParams()
        return obstacle_repulsion(point, obstacles, avoidance, rng)

    def compute_forces(
        self,
        i: int,
        P: np.ndarray,
        V: np.ndarray,
        obstacles: Sequence[Obstacle] = (),
        avoidance: AvoidanceParams | None = None,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        """
        Weighted steering force for the fish at index `i` of the snapshot.

        Args:
            i: Index of this fish in `P` and `V`; skipped in neighbor scans.
            P: (N, 2) snapshot of all positions.
            V: (N, 2) snapshot of all velocities.
            obstacles: Obstacles to avoid; pass an empty sequence to disable.
            avoidance: Obstacle repulsion tunables.
            rng: Generator for the degenerate center-coincident case.

        Returns:
            The velocity change for this step.
        """
        p = self.params
        sep = self.separation(i, P)
        ali = self.alignment(i, P, V)
        coh = self.cohesion(i, P)

        total = (
            sep * p.separation_weight
            + ali * p.alignment_weight
            + coh * p.cohesion_weight
        )
        if obstacles:
            total = total + self.obstacle_avoidance(P[i], obstacles, avoidance, rng)
        return total

    # -------------------------------------------------------------------------
    # Motion
    # -------------------------------------------------------------------------

    def limit_speed(self, max_speed: float) -> None:
        self.velocity = clamp_length(self.velocity, max_speed)

    def integrate(self, dt: float) -> None:
        self.position = self.position + self.velocity * dt

    def wrap_bounds(self, width: float, height: float) -> None:
        """
        Toroidal wrap: leaving one edge puts the fish on the opposite edge.

        Only one correction per axis is applied, so a fish that travels more
        than a full world length in one step lands on the edge rather than at
        its modulo position.
        """
        x, y = self.position
        if x < 0:
            x = width
        if x > width:
            x = 0.0
        if y < 0:
            y = height
        if y > height:
            y = 0.0
        self.position = np.array([x, y], dtype=np.float64)

    def update(
        self,
        i: int,
        P: np.ndarray,
        V: np.ndarray,
        dt: float,
        width: float,
        height: float,
        obstacles: Sequence[Obstacle] = (),
        avoidance: AvoidanceParams | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Apply forces, limit speed, move and wrap."""
        force = self.compute_forces(i, P, V, obstacles, avoidance, rng)
        self.velocity = self.velocity + force
        self.limit_speed(self.params.max_speed)
        self.integrate(dt)
        self.wrap_bounds(width, height)

    # -------------------------------------------------------------------------
    # Rendering Helpers
    # -------------------------------------------------------------------------

    @property
    def speed(self) -> float:
        return float(np.hypot(self.velocity[0], self.velocity[1]))

    def heading(self) -> float:
        """Heading angle in radians."""
        return heading_angle(self.velocity)

    def tail(self) -> np.ndarray:
        """Tail position, `body_length` behind the head along the heading."""
        return self.position - norm(self.velocity) * self.body_length

    def to_dict(self) -> dict:
        return {
            "position": self.position.tolist(),
            "velocity": self.velocity.tolist(),
            "body_length": self.body_length,
        }


def _contig(a: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(a, dtype=np.float64)


# -----------------------------------------------------------------------------
# Numba Optimized Functions
# -----------------------------------------------------------------------------


@njit
def _separation_numba(P: np.ndarray, i: int, radius: float) -> np.ndarray:
    """Average of unit vectors away from neighbors with 0 < d < radius."""
    steer = np.zeros(2, dtype=np.float64)
    px, py = P[i, 0], P[i, 1]
    count = 0

    for j in range(P.shape[0]):
        if j == i:
            continue

        dx = px - P[j, 0]
        dy = py - P[j, 1]
        d = np.sqrt(dx * dx + dy * dy)

        if d > 0.0 and d < radius:
            steer[0] += dx / d
            steer[1] += dy / d
            count += 1

    if count > 0:
        steer[0] /= count
        steer[1] /= count

    return steer


@njit
def _alignment_numba(P: np.ndarray, V: np.ndarray, i: int, radius: float) -> np.ndarray:
    """Neighbors' mean velocity minus own velocity, zero without neighbors."""
    avg = np.zeros(2, dtype=np.float64)
    px, py = P[i, 0], P[i, 1]
    count = 0

    for j in range(P.shape[0]):
        if j == i:
            continue

        dx = px - P[j, 0]
        dy = py - P[j, 1]
        d = np.sqrt(dx * dx + dy * dy)

        if d > 0.0 and d < radius:
            avg[0] += V[j, 0]
            avg[1] += V[j, 1]
            count += 1

    if count == 0:
        return np.zeros(2, dtype=np.float64)

    avg[0] = avg[0] / count - V[i, 0]
    avg[1] = avg[1] / count - V[i, 1]
    return avg


@njit
def _cohesion_numba(P: np.ndarray, i: int, radius: float) -> np.ndarray:
    """Vector toward the neighbors' centroid, zero without neighbors."""
    center = np.zeros(2, dtype=np.float64)
    px, py = P[i, 0], P[i, 1]
    count = 0

    for j in range(P.shape[0]):
        if j == i:
            continue

        dx = px - P[j, 0]
        dy = py - P[j, 1]
        d = np.sqrt(dx * dx + dy * dy)

        if d > 0.0 and d < radius:
            center[0] += P[j, 0]
            center[1] += P[j, 1]
            count += 1

    if count == 0:
        return np.zeros(2, dtype=np.float64)

    center[0] = center[0] / count - px
    center[1] = center[1] / count - py
    return center
