"""
World Simulation

This module defines the `World` class, which owns the school of fish and the
static obstacles, and advances them through time. The caller supplies the
timestep; the world has no clock of its own.

By default every fish reacts to the same snapshot of the previous step
(simultaneous update). A sequential mode reproduces the classic in-place loop
where fish later in the list see neighbors that have already moved.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

import numpy as np

from flocking import state
from flocking.fish import DEFAULT_BODY_LENGTH, Fish, ForceParams
from flocking.obstacles import AvoidanceParams, Obstacle
from simulation.scenarios import LAYOUTS, spawn_headings, spawn_school

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Configuration
# -----------------------------------------------------------------------------

DEFAULT_WIDTH = 800.0
DEFAULT_HEIGHT = 600.0
DEFAULT_MIN_SPEED = 50.0
DEFAULT_MAX_INITIAL_SPEED = 100.0

UpdateMode = Literal["snapshot", "sequential"]
UPDATE_MODES = ("snapshot", "sequential")


# -----------------------------------------------------------------------------
# World Class
# -----------------------------------------------------------------------------


class World:
    """
    Simulates a school of fish swimming in a toroidal tank, optionally
    steering around static obstacles.
    """

    def __init__(
        self,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        fish: Optional[Iterable[Fish]] = None,
        obstacles: Optional[Iterable[Obstacle]] = None,
        *,
        obstacles_enabled: bool = True,
        # Tunables given to fish created by the world
        params: Optional[ForceParams] = None,
        body_length: float = DEFAULT_BODY_LENGTH,
        layout: str = "uniform",
        avoidance: Optional[AvoidanceParams] = None,
        # Spawn speeds
        min_speed: float = DEFAULT_MIN_SPEED,
        max_initial_speed: float = DEFAULT_MAX_INITIAL_SPEED,
        update_mode: UpdateMode = "snapshot",
        seed: int = 0,
    ):
        for name, value in (("width", width), ("height", height)):
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"World {name} must be finite and > 0, got {value}")
        if not (math.isfinite(min_speed) and math.isfinite(max_initial_speed)):
            raise ValueError("Spawn speeds must be finite")
        if min_speed < 0 or min_speed > max_initial_speed:
            raise ValueError(
                f"Need 0 <= min_speed <= max_initial_speed, got {min_speed}, {max_initial_speed}"
            )
        if not math.isfinite(body_length) or body_length < 0:
            raise ValueError(f"body_length must be finite and >= 0, got {body_length}")
        if layout not in LAYOUTS:
            raise ValueError(f"layout must be one of {LAYOUTS}, got {layout!r}")
        if update_mode not in UPDATE_MODES:
            raise ValueError(f"update_mode must be one of {UPDATE_MODES}, got {update_mode!r}")

        self.width = float(width)
        self.height = float(height)

        self.params = params if params is not None else ForceParams()
        self.body_length = float(body_length)
        self.layout = layout
        self.avoidance = avoidance if avoidance is not None else AvoidanceParams()
        self.min_speed = float(min_speed)
        self.max_initial_speed = float(max_initial_speed)
        self.update_mode = update_mode

        self.fish: List[Fish] = list(fish) if fish is not None else []
        self._obstacles: List[Obstacle] = list(obstacles) if obstacles is not None else []
        self._obstacles_enabled = bool(obstacles_enabled)

        # Simulation time
        self.t = 0.0
        self.paused = False

        self.rng = np.random.default_rng(seed)

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def initialize(
        self, agent_count: int, bounds: Optional[Tuple[float, float]] = None
    ) -> None:
        """
        Replace the school with `agent_count` fish placed by the world's
        layout ("uniform", "clusters" or "ball"), with random headings and
        speeds in [min_speed, max_initial_speed).

        Args:
            agent_count: Number of fish to create.
            bounds: Optional new (width, height) for the world.
        """
        if agent_count < 0:
            raise ValueError(f"agent_count must be >= 0, got {agent_count}")
        if bounds is not None:
            width, height = bounds
            if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
                raise ValueError(f"World bounds must be finite and > 0, got {bounds}")
            self.width, self.height = float(width), float(height)

        P, V = spawn_school(
            agent_count,
            (0.0, self.width, 0.0, self.height),
            self.min_speed,
            self.max_initial_speed,
            seed=self.rng,
            layout=self.layout,
        )
        self.fish = [self._make_fish(P[i], V[i]) for i in range(agent_count)]
        logger.debug(
            "Initialized %d fish in %.1fx%.1f world", agent_count, self.width, self.height
        )

    def add_fish(self, x: float, y: float) -> int:
        """
        Add a fish at (x, y) with a random heading and speed.

        Existing fish are left untouched.

        Returns:
            Index of the new fish.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Fish position must be finite, got ({x}, {y})")
        v = spawn_headings(1, self.min_speed, self.max_initial_speed, seed=self.rng)[0]
        self.fish.append(self._make_fish(np.array([x, y], dtype=np.float64), v))
        logger.debug("Added fish %d at (%.1f, %.1f)", len(self.fish) - 1, x, y)
        return len(self.fish) - 1

    def remove_fish(self, index: int) -> Fish:
        """Remove the fish at `index`; later fish shift down by one."""
        if not -len(self.fish) <= index < len(self.fish):
            raise IndexError(f"No fish at index {index} (have {len(self.fish)})")
        removed = self.fish.pop(index)
        logger.debug("Removed fish %d", index)
        return removed

    def _make_fish(self, position: np.ndarray, velocity: np.ndarray) -> Fish:
        return Fish(position, velocity, body_length=self.body_length, params=self.params)

    # -------------------------------------------------------------------------
    # Obstacle Management
    # -------------------------------------------------------------------------

    def add_obstacle(self, obstacle: Obstacle) -> None:
        self._obstacles.append(obstacle)

    def add_obstacles(self, obstacles: Iterable[Obstacle]) -> None:
        for obstacle in obstacles:
            self.add_obstacle(obstacle)

    def clear_obstacles(self) -> None:
        """Remove all obstacles."""
        self._obstacles = []

    def set_obstacles_enabled(self, enabled: bool) -> None:
        """Toggle whether fish react to obstacles at all."""
        self._obstacles_enabled = bool(enabled)
        logger.debug("Obstacle avoidance %s", "enabled" if enabled else "disabled")

    @property
    def obstacles(self) -> Tuple[Obstacle, ...]:
        return tuple(self._obstacles)

    @property
    def obstacles_enabled(self) -> bool:
        return self._obstacles_enabled

    @property
    def active_obstacles(self) -> Tuple[Obstacle, ...]:
        """Obstacles the fish currently react to (empty when disabled)."""
        if not self._obstacles_enabled:
            return ()
        return tuple(self._obstacles)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def agents(self) -> Tuple[Fish, ...]:
        """Read-only ordered view of the fish."""
        return tuple(self.fish)

    @property
    def num_agents(self) -> int:
        return len(self.fish)

    @property
    def agents_xy(self) -> np.ndarray:
        """(N, 2) array of fish positions (a copy)."""
        return self._positions()

    @property
    def velocities(self) -> np.ndarray:
        """(N, 2) array of fish velocities (a copy)."""
        return self._velocities()

    @property
    def bounds(self) -> Tuple[float, float]:
        return self.width, self.height

    def _positions(self) -> np.ndarray:
        if not self.fish:
            return np.zeros((0, 2), dtype=np.float64)
        return np.ascontiguousarray([f.position for f in self.fish], dtype=np.float64)

    def _velocities(self) -> np.ndarray:
        if not self.fish:
            return np.zeros((0, 2), dtype=np.float64)
        return np.ascontiguousarray([f.velocity for f in self.fish], dtype=np.float64)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance the simulation by `dt` seconds."""
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be finite and >= 0, got {dt}")
        if self.paused:
            return

        obstacles = self.active_obstacles

        # Snapshot of the pre-step state; in snapshot mode nothing below
        # writes to it.
        P = self._positions()
        V = self._velocities()

        for i, f in enumerate(self.fish):
            f.update(
                i,
                P,
                V,
                dt,
                self.width,
                self.height,
                obstacles=obstacles,
                avoidance=self.avoidance,
                rng=self.rng,
            )
            if self.update_mode == "sequential":
                P[i] = f.position
                V[i] = f.velocity

        self.t += dt

    def compute_forces(self) -> np.ndarray:
        """Steering force each fish would receive from the current state."""
        P = self._positions()
        V = self._velocities()
        obstacles = self.active_obstacles
        forces = np.zeros_like(P)
        for i, f in enumerate(self.fish):
            forces[i] = f.compute_forces(i, P, V, obstacles, self.avoidance, self.rng)
        return forces

    def get_state(self) -> state.State:
        """Get the current simulation state."""
        return state.State(
            positions=self._positions(),
            velocities=self._velocities(),
            obstacles=list(self._obstacles),
            obstacles_enabled=self._obstacles_enabled,
            width=self.width,
            height=self.height,
            t=self.t,
        )

    def pause(self):
        """Toggle simulation pause state."""
        self.paused = not self.paused


def world_from_arrays(
    positions: np.ndarray,
    velocities: np.ndarray,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    obstacles: Optional[Sequence[Obstacle]] = None,
    **kwargs,
) -> World:
    """Build a world whose fish start at the given (N, 2) positions and velocities."""
    positions = np.asarray(positions, dtype=np.float64)
    velocities = np.asarray(velocities, dtype=np.float64)
    if positions.shape != velocities.shape:
        raise ValueError(
            f"positions {positions.shape} and velocities {velocities.shape} must match"
        )
    w = World(width, height, obstacles=obstacles, **kwargs)
    w.fish = [w._make_fish(positions[i], velocities[i]) for i in range(positions.shape[0])]
    return w
