"""
Flocking Utilities

This module provides the small vector toolkit used by the fish, obstacle and
world logic: distances, normalization with an explicit zero-length fallback,
length clamping and the inverse-distance push used for obstacle avoidance.
"""

from __future__ import annotations

import numpy as np

# -----------------------------------------------------------------------------
# Vector Operations
# -----------------------------------------------------------------------------


def as_vec(v) -> np.ndarray:
    """Coerce a 2-sequence into a float64 vector of shape (2,)."""
    return np.asarray(v, dtype=np.float64).reshape(2)


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return float(np.sqrt(dx * dx + dy * dy))


def norm(v: np.ndarray, eps: float = 1e-9) -> np.ndarray:
    """
    Normalize a vector `v` to unit length.

    A zero vector stays zero, which is what the renderer wants when drawing a
    fish that is not moving.

    Args:
        v: Input vector (NumPy array).
        eps: Small epsilon to prevent division by zero.

    Returns:
        The normalized unit vector.
    """
    x = np.linalg.norm(v)
    return v / (x + eps)


def random_unit(rng: np.random.Generator | None = None) -> np.ndarray:
    """Return a unit vector pointing in a uniformly random direction."""
    if rng is None:
        rng = np.random.default_rng()
    angle = rng.uniform(0.0, 2.0 * np.pi)
    return np.array([np.cos(angle), np.sin(angle)])


def normalize(v: np.ndarray, rng: np.random.Generator | None = None) -> np.ndarray:
    """
    Normalize `v` to unit length.

    The direction of a zero vector is undefined; instead of dividing by zero
    a random unit vector is returned.

    Args:
        v: Input vector.
        rng: Generator used for the zero-length fallback.

    Returns:
        A unit vector.
    """
    length = np.sqrt(v[0] * v[0] + v[1] * v[1])
    if length == 0.0:
        return random_unit(rng)
    return np.array([v[0] / length, v[1] / length])


def clamp_length(v: np.ndarray, max_length: float) -> np.ndarray:
    """Return `v` unchanged if |v| <= max_length, else rescaled to max_length."""
    length = np.sqrt(v[0] * v[0] + v[1] * v[1])
    if length <= max_length:
        return np.array(v, dtype=np.float64)
    return np.array([v[0] / length * max_length, v[1] / length * max_length])


# -----------------------------------------------------------------------------
# Force Functions
# -----------------------------------------------------------------------------


def inverse_push(
    dist: float | np.ndarray,
    radius: float,
    strength: float,
    min_distance: float = 1.0,
) -> float | np.ndarray:
    """
    Inverse-distance push magnitude.

    Inside `radius` the magnitude is `strength / max(dist, min_distance)`, so
    the push grows as the distance shrinks but never exceeds
    `strength / min_distance`. At or beyond `radius` it is 0.

    Args:
        dist: Distance to the surface being avoided (float or NumPy array).
        radius: Influence radius.
        strength: Push strength.
        min_distance: Distance below which the push stops growing.

    Returns:
        Push magnitude.
    """
    clipped = np.maximum(dist, min_distance)
    return np.where(np.asarray(dist) < radius, strength / clipped, 0.0)


def heading_angle(v: np.ndarray) -> float:
    """Angle of a velocity vector in radians."""
    return float(np.arctan2(v[1], v[0]))
