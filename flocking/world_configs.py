"""
WorldConfig system for configurable schools.

This module provides a single source of truth for simulation parameters,
with named presets and support for custom overrides.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from simulation.world import UpdateMode


# -----------------------------------------------------------------------------
# Data Structures
# -----------------------------------------------------------------------------


@dataclass
class WorldConfig:
    """
    Configuration for a fish school simulation.

    This dataclass defines all tunable parameters for the World and the fish
    it creates: tank size, population, Boids radii and weights, obstacles and
    the update order.
    """

    # Identity/meta
    key: str = "default"
    name: str = "Default School"
    description: str = "Eighty fish in an open tank"

    # Tank
    width: float = 800.0
    height: float = 600.0

    # Population
    agent_count: int = 80
    seed: int = 0
    min_speed: float = 50.0
    max_initial_speed: float = 100.0
    body_length: float = 15.0
    layout: str = "uniform"  # "uniform", "clusters" or "ball"

    # Boids radii
    separation_radius: float = 25.0
    alignment_radius: float = 50.0
    cohesion_radius: float = 50.0

    # Boids weights
    separation_weight: float = 30.0
    alignment_weight: float = 1.0
    cohesion_weight: float = 0.5

    max_speed: float = 150.0

    # Obstacles, as dicts understood by obstacle_from_dict
    obstacles_enabled: bool = False
    obstacles: List[Dict[str, Any]] = field(default_factory=list)
    avoidance_radius: float = 40.0
    avoidance_strength: float = 300.0
    avoidance_min_distance: float = 1.0

    update_mode: UpdateMode = "snapshot"

    # Timestep used by the demo when it is not driven by the wall clock
    fixed_dt: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert WorldConfig to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WorldConfig:
        """
        Create WorldConfig from dictionary, ignoring unknown keys.

        Extra keys in the dict are silently ignored, and missing keys use the
        default values from the dataclass.
        """
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered_data)


# -----------------------------------------------------------------------------
# Presets
# -----------------------------------------------------------------------------

_ROCKS = [
    {"type": "circle", "center": [250.0, 200.0], "radius": 40.0},
    {"type": "circle", "center": [560.0, 380.0], "radius": 55.0},
    {"type": "rectangle", "center": [420.0, 150.0], "width": 120.0, "height": 40.0},
]

WORLD_PRESETS: Dict[str, WorldConfig] = {
    "default": WorldConfig(),
    "obstacles": WorldConfig(
        key="obstacles",
        name="Rocky Tank",
        description="The default school swimming around rocks",
        obstacles_enabled=True,
        obstacles=[dict(o) for o in _ROCKS],
    ),
    "dense": WorldConfig(
        key="dense",
        name="Dense School",
        description="A larger school with tighter spacing",
        agent_count=200,
        separation_radius=15.0,
        alignment_radius=40.0,
        cohesion_radius=60.0,
        separation_weight=20.0,
        cohesion_weight=0.8,
        layout="clusters",
    ),
    "sequential": WorldConfig(
        key="sequential",
        name="Sequential Update",
        description="Fish update in list order and see neighbors that already moved",
        update_mode="sequential",
    ),
}


# -----------------------------------------------------------------------------
# Factory
# -----------------------------------------------------------------------------


def resolve_config(
    world_config: Optional[Union[str, dict, WorldConfig]] = None
) -> WorldConfig:
    """
    Turn any supported config input into a WorldConfig.

    Args:
        world_config: Can be:
            - None: uses "default" preset
            - str: preset key (e.g. "obstacles"), falls back to "default" if not found
            - dict: either a preset override (if "key" field matches a preset)
                   or a complete custom config
            - WorldConfig: use directly
    """
    if world_config is None:
        return WORLD_PRESETS["default"]

    if isinstance(world_config, str):
        return WORLD_PRESETS.get(world_config, WORLD_PRESETS["default"])

    if isinstance(world_config, dict):
        key = world_config.get("key")
        if key and key in WORLD_PRESETS:
            # Start from preset, overlay custom fields
            base_dict = WORLD_PRESETS[key].to_dict()
            base_dict.update(world_config)
            return WorldConfig.from_dict(base_dict)
        return WorldConfig.from_dict(world_config)

    if isinstance(world_config, WorldConfig):
        return world_config

    raise TypeError(f"Unsupported world_config type: {type(world_config)}")


def build_world(world_config: Optional[Union[str, dict, WorldConfig]] = None):
    """
    Build and populate a World from any supported config input.

    Returns:
        World instance with `agent_count` fish already spawned.
    """
    from flocking.fish import ForceParams
    from flocking.obstacles import AvoidanceParams, obstacle_from_dict
    from simulation.world import World

    config = resolve_config(world_config)

    params = ForceParams(
        separation_radius=config.separation_radius,
        alignment_radius=config.alignment_radius,
        cohesion_radius=config.cohesion_radius,
        separation_weight=config.separation_weight,
        alignment_weight=config.alignment_weight,
        cohesion_weight=config.cohesion_weight,
        max_speed=config.max_speed,
    )
    avoidance = AvoidanceParams(
        radius=config.avoidance_radius,
        strength=config.avoidance_strength,
        min_distance=config.avoidance_min_distance,
    )

    world = World(
        config.width,
        config.height,
        obstacles=[obstacle_from_dict(o) for o in config.obstacles],
        obstacles_enabled=config.obstacles_enabled,
        params=params,
        body_length=config.body_length,
        layout=config.layout,
        avoidance=avoidance,
        min_speed=config.min_speed,
        max_initial_speed=config.max_initial_speed,
        update_mode=config.update_mode,
        seed=config.seed,
    )
    world.initialize(config.agent_count)
    return world
