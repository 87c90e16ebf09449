"""
Simulation Demo Runner

This script runs a visual demonstration of the fish school. It uses Matplotlib
for real-time rendering of the fish and obstacles. Clicking in the tank adds a
fish at the cursor and pressing "o" toggles obstacle avoidance.

Usage:
    python -m flocking.run_demo --preset obstacles
"""

import argparse
import time
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle as MplCircle
from matplotlib.patches import Rectangle as MplRectangle

from flocking.obstacles import CircleObstacle, Obstacle, RectangleObstacle
from flocking.world_configs import WORLD_PRESETS, resolve_config, build_world
from simulation import world

# -----------------------------------------------------------------------------
# Constants & Configuration
# -----------------------------------------------------------------------------

FISH_COLOR = "#00d4ff"
OBSTACLE_COLOR = "#5a5a5a"
OBSTACLE_EDGE_COLOR = "#3a3a3a"
WATER_COLOR = "#0b1e2d"
MAX_FRAME_DT = 0.1


# -----------------------------------------------------------------------------
# Renderer Class
# -----------------------------------------------------------------------------


class Renderer:
    """Handles the visualization of the simulation state using Matplotlib."""

    def __init__(self, world_instance: world.World):
        """Initialize figure, axes, fish bodies and obstacle patches."""
        self.world = world_instance

        plt.ion()
        self.fig, self.ax = plt.subplots(figsize=(8, 6))
        self.ax.set_aspect("equal")
        self.ax.set_facecolor(WATER_COLOR)
        self.ax.set_xlim(0, world_instance.width)
        # Screen coordinates: y grows downward
        self.ax.set_ylim(world_instance.height, 0)

        self.obstacle_patches: List = []
        self._draw_obstacles(world_instance.obstacles)

        # Fish: a line from tail to head plus a dot for the head
        self.bodies = LineCollection([], colors=FISH_COLOR, linewidths=2)
        self.ax.add_collection(self.bodies)
        self.heads = self.ax.scatter([], [], s=12, c=FISH_COLOR)

        self.fig.canvas.mpl_connect("button_press_event", self._on_click)
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)

    def _draw_obstacles(self, obstacles: List[Obstacle]):
        for obstacle in obstacles:
            if isinstance(obstacle, CircleObstacle):
                patch = MplCircle(
                    tuple(obstacle.center),
                    obstacle.radius,
                    facecolor=OBSTACLE_COLOR,
                    edgecolor=OBSTACLE_EDGE_COLOR,
                    linewidth=3,
                )
            elif isinstance(obstacle, RectangleObstacle):
                patch = MplRectangle(
                    tuple(obstacle.corner),
                    obstacle.width,
                    obstacle.height,
                    facecolor=OBSTACLE_COLOR,
                    edgecolor=OBSTACLE_EDGE_COLOR,
                    linewidth=3,
                )
            else:
                raise TypeError(f"Cannot draw obstacle {obstacle!r}")
            self.ax.add_patch(patch)
            self.obstacle_patches.append(patch)

    def _on_click(self, event):
        if event.inaxes is not self.ax or event.xdata is None:
            return
        self.world.add_fish(float(event.xdata), float(event.ydata))

    def _on_key(self, event):
        if event.key == "o":
            self.world.set_obstacles_enabled(not self.world.obstacles_enabled)
        elif event.key == " ":
            self.world.pause()

    def render_world(self, step_number: int):
        """Update fish bodies and the title for the current state of the world."""
        state = self.world.get_state()

        heads = state.positions
        tails = np.array([f.tail() for f in self.world.agents]).reshape(-1, 2)

        self.bodies.set_segments(np.stack([tails, heads], axis=1))
        self.heads.set_offsets(heads)

        for patch in self.obstacle_patches:
            patch.set_alpha(1.0 if state.obstacles_enabled else 0.3)

        self.ax.set_title(f"Fish: {state.num_agents}   Step {step_number}")
        self.fig.canvas.draw_idle()


# -----------------------------------------------------------------------------
# Main Loop
# -----------------------------------------------------------------------------


def run(
    world_instance: world.World,
    steps: int,
    fixed_dt: Optional[float] = None,
    render_every: int = 1,
) -> None:
    """Drive the world from the wall clock (or a fixed dt) and render it."""
    renderer = Renderer(world_instance)
    last_time = time.perf_counter()

    for t in range(steps):
        if not plt.fignum_exists(renderer.fig.number):
            break

        now = time.perf_counter()
        dt = fixed_dt if fixed_dt is not None else min(now - last_time, MAX_FRAME_DT)
        last_time = now

        world_instance.step(dt)

        if t % render_every == 0:
            renderer.render_world(t)

        plt.pause(0.001)

    plt.ioff()
    plt.show()


def main(argv=None):
    p = argparse.ArgumentParser(description="Run fish school simulation demo.")
    p.add_argument(
        "--preset",
        choices=sorted(WORLD_PRESETS),
        default="default",
        help="Named world configuration",
    )
    p.add_argument("--N", type=int, default=None, help="Number of fish")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--steps", type=int, default=100000, help="Max simulation steps")
    p.add_argument(
        "--fixed-dt",
        type=float,
        default=None,
        help="Step by a fixed dt instead of wall-clock time",
    )
    p.add_argument(
        "--obstacles",
        action="store_true",
        default=None,
        help="Enable obstacle avoidance",
    )
    p.add_argument(
        "--no-obstacles",
        dest="obstacles",
        action="store_false",
        help="Disable obstacle avoidance",
    )
    p.set_defaults(obstacles=None)
    args = p.parse_args(argv)

    overrides = {"key": args.preset}
    if args.N is not None:
        overrides["agent_count"] = args.N
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.obstacles is not None:
        overrides["obstacles_enabled"] = args.obstacles
    if args.fixed_dt is not None:
        overrides["fixed_dt"] = args.fixed_dt

    config = resolve_config(overrides)
    W = build_world(config)

    print(f"Preset: {config.name} ({config.description})")
    print(f"Fish: {W.num_agents}, tank {W.width:.0f}x{W.height:.0f}")
    print(f"Obstacles: {len(W.obstacles)} ({'on' if W.obstacles_enabled else 'off'})")
    print("Click to add a fish, 'o' toggles obstacles, space pauses.")

    run(W, args.steps, fixed_dt=config.fixed_dt)


if __name__ == "__main__":
    main()
