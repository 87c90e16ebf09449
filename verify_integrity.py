"""
Integrity Verification Script

This script performs a smoke test on the codebase to ensure that:
1. All modules can be imported (checking for circular dependencies or syntax errors).
2. The core simulation loop runs without errors, with and without obstacles.
3. Basic logic produces valid output (finite, in-bounds, speed-limited).

Usage:
    python verify_integrity.py
"""

import sys
import traceback

import numpy as np


def log(msg):
    print(f"[VERIFY] {msg}")


def check_imports():
    log("Checking imports...")
    try:
        import flocking.fish  # noqa: F401
        import flocking.obstacles  # noqa: F401
        import flocking.state  # noqa: F401
        import flocking.utils  # noqa: F401
        import flocking.world_configs  # noqa: F401
        import simulation.scenarios  # noqa: F401
        import simulation.world  # noqa: F401

        log("Imports successful.")
    except ImportError as e:
        log(f"Import failed: {e}")
        traceback.print_exc()
        sys.exit(1)


def check_simulation_loop(preset: str):
    log(f"Checking simulation loop with preset {preset!r}...")
    try:
        from flocking.world_configs import build_world

        w = build_world({"key": preset, "agent_count": 50, "seed": 42})
        max_speed = w.params.max_speed

        steps = 20
        dt = 1.0 / 60.0
        log(f"Running {steps} simulation steps...")
        for i in range(steps):
            w.step(dt)
            state = w.get_state()

            if not np.isfinite(state.positions).all():
                raise ValueError(f"Non-finite fish positions at step {i}")
            if (state.positions[:, 0] < 0).any() or (state.positions[:, 0] > w.width).any():
                raise ValueError(f"Fish left the tank horizontally at step {i}")
            if (state.positions[:, 1] < 0).any() or (state.positions[:, 1] > w.height).any():
                raise ValueError(f"Fish left the tank vertically at step {i}")
            speeds = np.linalg.norm(state.velocities, axis=1)
            if (speeds > max_speed + 1e-9).any():
                raise ValueError(f"Speed limit exceeded at step {i}")

        log("Simulation loop completed successfully.")

    except Exception as e:
        log(f"Simulation loop failed: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    check_imports()
    check_simulation_loop("default")
    check_simulation_loop("obstacles")
    log("ALL CHECKS PASSED.")
