"""
Scenario Spawning Functions

This module provides functions to generate initial positions and velocities
for a school of fish: positions uniformly spread over the tank, clustered
shoals or a tight ball, and random headings with speeds drawn from a range.
These are used to initialize the world and the demo presets.
"""

from typing import Optional, Tuple, Union

import numpy as np

Seed = Union[int, np.random.Generator, None]

LAYOUTS = ("uniform", "clusters", "ball")

# -----------------------------------------------------------------------------
# Spawning Functions
# -----------------------------------------------------------------------------


def spawn_uniform(
    N: int, bounds: Tuple[float, float, float, float], seed: Seed = 2
) -> np.ndarray:
    """
    Generates N points uniformly distributed within the given bounds.

    Args:
        N: Number of points to generate.
        bounds: Tuple of (xmin, xmax, ymin, ymax).
        seed: Random seed or generator.

    Returns:
        (N, 2) array of point coordinates.
    """
    rng = np.random.default_rng(seed)
    xmin, xmax, ymin, ymax = bounds

    x = rng.uniform(xmin, xmax, N)
    y = rng.uniform(ymin, ymax, N)

    return np.stack([x, y], axis=1)


def spawn_headings(
    N: int,
    min_speed: float = 50.0,
    max_speed: float = 100.0,
    seed: Seed = 2,
) -> np.ndarray:
    """
    Generates N velocities with uniformly random headings.

    Args:
        N: Number of velocities.
        min_speed: Lowest speed (inclusive).
        max_speed: Highest speed (exclusive).
        seed: Random seed or generator.

    Returns:
        (N, 2) array of velocities.
    """
    rng = np.random.default_rng(seed)

    angles = rng.uniform(0.0, 2 * np.pi, N)
    speeds = min_speed + rng.random(N) * (max_speed - min_speed)

    return np.stack([np.cos(angles) * speeds, np.sin(angles) * speeds], axis=1)


def spawn_clusters(
    N: int,
    k: int,
    bounds: Tuple[float, float, float, float],
    spread: float = 12.0,
    seed: Seed = 2,
) -> np.ndarray:
    """
    Generates N points distributed in k Gaussian shoals, clipped to the bounds.

    Args:
        N: Total number of points.
        k: Number of clusters.
        bounds: Tuple of (xmin, xmax, ymin, ymax).
        spread: Standard deviation of the clusters.
        seed: Random seed or generator.

    Returns:
        (N, 2) array of point coordinates.
    """
    rng = np.random.default_rng(seed)
    xmin, xmax, ymin, ymax = bounds

    # Cluster centers well within bounds
    margin_x = min(3 * spread, (xmax - xmin) / 2)
    margin_y = min(3 * spread, (ymax - ymin) / 2)
    centers = np.stack(
        [
            rng.uniform(xmin + margin_x, xmax - margin_x, k),
            rng.uniform(ymin + margin_y, ymax - margin_y, k),
        ],
        axis=1,
    )

    base = N // k
    extras = N - base * k
    sizes = [base + (1 if i < extras else 0) for i in range(k)]

    pts = [rng.normal(loc=c, scale=spread, size=(sizes[i], 2)) for i, c in enumerate(centers)]
    pts = np.vstack(pts) if pts else np.zeros((0, 2))

    pts[:, 0] = np.clip(pts[:, 0], xmin, xmax)
    pts[:, 1] = np.clip(pts[:, 1], ymin, ymax)
    return pts


def spawn_circle(
    N: int, center: Tuple[float, float] = (0, 0), radius: float = 5.0, seed: Seed = 2
) -> np.ndarray:
    """
    Generates N points uniformly distributed within a circle.

    Args:
        N: Number of points.
        center: (x, y) center of the circle.
        radius: Radius of the circle.
        seed: Random seed or generator.

    Returns:
        (N, 2) array of point coordinates.
    """
    rng = np.random.default_rng(seed)
    c = np.array(center, float)

    # sqrt for uniform area distribution
    th = rng.random(N) * 2 * np.pi
    r = radius * np.sqrt(rng.random(N))

    return c + np.stack([r * np.cos(th), r * np.sin(th)], axis=1)


def spawn_school(
    N: int,
    bounds: Tuple[float, float, float, float],
    min_speed: float = 50.0,
    max_speed: float = 100.0,
    seed: Seed = 2,
    layout: str = "uniform",
    clusters: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Positions and velocities for a whole school.

    Args:
        N: Number of fish.
        bounds: Tuple of (xmin, xmax, ymin, ymax).
        min_speed: Lowest initial speed.
        max_speed: Highest initial speed (exclusive).
        seed: Random seed or generator.
        layout: "uniform", "clusters" or "ball".
        clusters: Cluster count for layout="clusters".

    Returns:
        Tuple of (N, 2) positions and (N, 2) velocities.
    """
    rng = np.random.default_rng(seed)
    xmin, xmax, ymin, ymax = bounds

    if layout == "uniform":
        P = spawn_uniform(N, bounds, seed=rng)
    elif layout == "clusters":
        P = spawn_clusters(N, clusters or 3, bounds, seed=rng)
    elif layout == "ball":
        center = (0.5 * (xmin + xmax), 0.5 * (ymin + ymax))
        radius = 0.15 * min(xmax - xmin, ymax - ymin)
        P = spawn_circle(N, center, radius, seed=rng)
    else:
        raise ValueError(f"Unknown layout: {layout!r}")

    V = spawn_headings(N, min_speed, max_speed, seed=rng)
    return P, V
