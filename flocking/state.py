"""
Simulation State Definitions

This module defines the snapshot handed from the simulation engine to
renderers and other readers. A `State` is a copy: mutating it never affects
the world it came from.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from flocking.obstacles import Obstacle

# -----------------------------------------------------------------------------
# World State
# -----------------------------------------------------------------------------


@dataclass
class State:
    """
    Snapshot of the entire simulation at a specific time step.
    Includes fish positions and velocities, obstacles and the world bounds.
    """

    # n-by-2 array of fish positions
    positions: np.ndarray

    # n-by-2 array of fish velocities
    velocities: np.ndarray

    # Static obstacles, in insertion order
    obstacles: List[Obstacle]

    # Whether the fish currently react to the obstacles
    obstacles_enabled: bool

    width: float
    height: float

    # Simulated seconds elapsed
    t: float = 0.0

    @property
    def num_agents(self) -> int:
        return self.positions.shape[0]

    def to_dict(self) -> dict:
        """Convert world state to a plain dictionary."""
        return {
            "positions": self.positions.tolist(),
            "velocities": self.velocities.tolist(),
            "obstacles": [o.to_dict() for o in self.obstacles],
            "obstacles_enabled": self.obstacles_enabled,
            "bounds": [self.width, self.height],
            "t": self.t,
        }
