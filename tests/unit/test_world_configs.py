import pytest

from flocking import world_configs
from flocking.obstacles import CircleObstacle, RectangleObstacle
from flocking.world_configs import WORLD_PRESETS, WorldConfig, build_world, resolve_config
from simulation import world


def test_presets_are_keyed_consistently():
    for key, config in WORLD_PRESETS.items():
        assert config.key == key


def test_config_round_trip():
    config = WORLD_PRESETS["obstacles"]
    assert WorldConfig.from_dict(config.to_dict()) == config


def test_from_dict_ignores_unknown_keys():
    config = WorldConfig.from_dict({"agent_count": 12, "canvas_id": "canvas"})
    assert config.agent_count == 12
    assert config.width == 800.0


def test_resolve_config_inputs():
    assert resolve_config(None) is WORLD_PRESETS["default"]
    assert resolve_config("dense") is WORLD_PRESETS["dense"]

    # Unknown preset names fall back to the default
    assert resolve_config("no-such-preset") is WORLD_PRESETS["default"]

    # Dict with a known key overlays the preset
    c = resolve_config({"key": "obstacles", "agent_count": 5})
    assert c.agent_count == 5
    assert c.obstacles_enabled is True
    assert len(c.obstacles) == 3

    # Dict without a known key is a full custom config
    c = resolve_config({"agent_count": 7, "width": 320.0})
    assert (c.agent_count, c.width, c.key) == (7, 320.0, "default")

    custom = WorldConfig(agent_count=3)
    assert resolve_config(custom) is custom


def test_resolve_config_rejects_other_types():
    with pytest.raises(TypeError):
        resolve_config(42)


def test_build_default_world():
    """The default preset matches the original tank: 80 fish, 800x600."""
    w = build_world()

    assert w.num_agents == 80
    assert (w.width, w.height) == (800.0, 600.0)
    assert w.obstacles == ()
    assert w.update_mode == "snapshot"
    assert w.params.max_speed == 150.0


def test_build_obstacle_world():
    w = build_world("obstacles")

    assert w.obstacles_enabled
    kinds = [type(o) for o in w.obstacles]
    assert kinds.count(CircleObstacle) == 2
    assert kinds.count(RectangleObstacle) == 1


def test_build_world_passes_tunables():
    w = build_world(
        {
            "agent_count": 4,
            "separation_radius": 12.0,
            "max_speed": 90.0,
            "avoidance_radius": 25.0,
            "update_mode": "sequential",
        }
    )

    assert w.num_agents == 4
    assert all(f.params.separation_radius == 12.0 for f in w.agents)
    assert all(f.params.max_speed == 90.0 for f in w.agents)
    assert w.avoidance.radius == 25.0
    assert w.update_mode == "sequential"


def test_build_world_rejects_invalid_tunables():
    with pytest.raises(ValueError):
        build_world({"separation_radius": -3.0})
    with pytest.raises(ValueError):
        build_world({"update_mode": "random"})
    with pytest.raises(ValueError):
        build_world({"avoidance_strength": -300.0})
    with pytest.raises(ValueError):
        build_world({"body_length": float("nan")})
    with pytest.raises(ValueError):
        build_world({"layout": "spiral"})


def test_build_world_is_seeded():
    a = build_world({"agent_count": 10, "seed": 9})
    b = build_world({"agent_count": 10, "seed": 9})
    assert (a.agents_xy == b.agents_xy).all()
    assert (a.velocities == b.velocities).all()


def test_presets_do_not_share_obstacle_lists():
    c = world_configs.resolve_config({"key": "obstacles"})
    c.obstacles.append({"type": "circle", "center": [0, 0], "radius": 1})
    assert len(WORLD_PRESETS["obstacles"].obstacles) == 3


def test_dense_preset_spawns_in_clusters():
    w = build_world({"key": "dense", "agent_count": 30})

    assert WORLD_PRESETS["dense"].layout == "clusters"
    assert w.layout == "clusters"
    assert w.num_agents == 30


def test_update_mode_type_is_shared():
    assert world_configs.UpdateMode is world.UpdateMode
