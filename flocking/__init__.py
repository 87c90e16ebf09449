"""
Flocking Module

This package contains the fish agent and its Boids steering model, the static
obstacles it avoids, the state snapshot handed to renderers, and the named
world configurations.
"""

from . import utils
from .fish import Fish, ForceParams
from .obstacles import AvoidanceParams, CircleObstacle, RectangleObstacle

__all__ = [
    "AvoidanceParams",
    "CircleObstacle",
    "Fish",
    "ForceParams",
    "RectangleObstacle",
    "utils",
]
