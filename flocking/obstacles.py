"""
Static Obstacles

This module defines the obstacles fish steer around: circles and axis-aligned
rectangles. Obstacles are immutable once created and only answer two
geometric questions, the distance from a point to their surface and the
outward direction from their center, plus the avoidance force built on top
of those.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Union

import numpy as np

from flocking.utils import as_vec, distance, inverse_push, normalize

# -----------------------------------------------------------------------------
# Shapes
# -----------------------------------------------------------------------------


def _frozen_center(center) -> np.ndarray:
    c = as_vec(center).copy()
    c.setflags(write=False)
    return c


def _direction_from(
    center: np.ndarray, point: np.ndarray, rng: np.random.Generator | None
) -> np.ndarray:
    # A point on the center gets a random direction
    return normalize(as_vec(point) - center, rng)


@dataclass(frozen=True, eq=False)
class CircleObstacle:
    """A circular rock."""

    center: np.ndarray
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "center", _frozen_center(self.center))
        if not math.isfinite(self.radius) or self.radius < 0:
            raise ValueError(f"Circle radius must be finite and >= 0, got {self.radius}")
        object.__setattr__(self, "radius", float(self.radius))

    def distance_to_point(self, point: np.ndarray) -> float:
        """Distance from `point` to the circle's surface (0 inside)."""
        return max(0.0, distance(point, self.center) - self.radius)

    def direction_from_center(
        self, point: np.ndarray, rng: np.random.Generator | None = None
    ) -> np.ndarray:
        """Unit vector from the center toward `point`."""
        return _direction_from(self.center, point, rng)

    def to_dict(self) -> dict:
        return {
            "type": "circle",
            "center": self.center.tolist(),
            "radius": self.radius,
        }


@dataclass(frozen=True, eq=False)
class RectangleObstacle:
    """An axis-aligned rectangle given by its center and size."""

    center: np.ndarray
    width: float
    height: float

    def __post_init__(self):
        object.__setattr__(self, "center", _frozen_center(self.center))
        for name in ("width", "height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"Rectangle {name} must be finite and >= 0, got {value}"
                )
            object.__setattr__(self, name, float(value))

    @property
    def corner(self) -> np.ndarray:
        """Lower-left corner."""
        return np.array(
            [self.center[0] - self.width / 2, self.center[1] - self.height / 2]
        )

    def distance_to_point(self, point: np.ndarray) -> float:
        """Distance from `point` to the nearest point of the rectangle (0 inside)."""
        rx, ry = self.corner
        closest_x = max(rx, min(point[0], rx + self.width))
        closest_y = max(ry, min(point[1], ry + self.height))
        dx = point[0] - closest_x
        dy = point[1] - closest_y
        return math.sqrt(dx * dx + dy * dy)

    def direction_from_center(
        self, point: np.ndarray, rng: np.random.Generator | None = None
    ) -> np.ndarray:
        """Unit vector from the center toward `point`."""
        return _direction_from(self.center, point, rng)

    def to_dict(self) -> dict:
        return {
            "type": "rectangle",
            "center": self.center.tolist(),
            "width": self.width,
            "height": self.height,
        }


Obstacle = Union[CircleObstacle, RectangleObstacle]


def obstacle_from_dict(data: dict) -> Obstacle:
    """
    Build an obstacle from its dictionary form.

    Rectangles may be given a `radius` instead of a size, in which case a
    missing or zero width/height defaults to `2 * radius`.
    """
    kind = data.get("type", "circle")
    if kind == "circle":
        return CircleObstacle(center=data["center"], radius=float(data["radius"]))
    if kind == "rectangle":
        radius = float(data.get("radius", 0.0))
        width = float(data.get("width") or radius * 2)
        height = float(data.get("height") or radius * 2)
        return RectangleObstacle(center=data["center"], width=width, height=height)
    raise ValueError(f"Unknown obstacle type: {kind!r}")


# -----------------------------------------------------------------------------
# Avoidance
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AvoidanceParams:
    """Tunables for the obstacle repulsion force."""

    radius: float = 40.0  # Surface distance at which avoidance kicks in
    strength: float = 300.0  # Push at unit distance
    min_distance: float = 1.0  # Push stops growing below this distance

    def __post_init__(self):
        if not math.isfinite(self.radius) or self.radius < 0:
            raise ValueError(f"Avoidance radius must be finite and >= 0, got {self.radius}")
        if not math.isfinite(self.strength) or self.strength < 0:
            raise ValueError(f"Avoidance strength must be finite and >= 0, got {self.strength}")
        if not math.isfinite(self.min_distance) or self.min_distance <= 0:
            raise ValueError(
                f"Avoidance min_distance must be finite and > 0, got {self.min_distance}"
            )


def obstacle_repulsion(
    point: np.ndarray,
    obstacles: Iterable[Obstacle],
    params: AvoidanceParams,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Sum the push away from every obstacle whose surface is within range.

    Each obstacle closer than `params.radius` pushes along its
    center-to-point direction with an inverse-distance magnitude.
    """
    force = np.zeros(2)
    for obstacle in obstacles:
        d = obstacle.distance_to_point(point)
        if d >= params.radius:
            continue
        push = float(inverse_push(d, params.radius, params.strength, params.min_distance))
        force += push * obstacle.direction_from_center(point, rng)
    return force
