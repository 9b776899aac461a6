"""Grid factory for creating preset and randomized grid layouts."""

from collections import deque
from typing import Optional, List, Iterable
from ..domain.types import Coord, GridConfig, ConfigurationError, ACTION_DELTAS
from .rng import SeededRNG, default_rng


def default_grid_config() -> GridConfig:
    """The classic 5x5 layout: start (0,0), goal (4,4), four obstacles."""
    return GridConfig()


def create_grid_config(size: int, goal: Optional[Coord] = None,
                       obstacles: Iterable[Coord] = (),
                       start: Coord = (0, 0),
                       max_steps_per_episode: int = 100) -> GridConfig:
    """
    Create a grid layout, defaulting the goal to the bottom-right corner.

    Raises:
        ConfigurationError: If the layout is inconsistent
    """
    if goal is None:
        goal = (size - 1, size - 1)
    return GridConfig(
        size=size,
        goal=goal,
        obstacles=tuple(tuple(obs) for obs in obstacles),
        start=start,
        max_steps_per_episode=max_steps_per_episode,
    )


def reachable_cells(config: GridConfig, origin: Optional[Coord] = None) -> set:
    """Breadth-first search over non-obstacle cells from ``origin`` (start by default)."""
    origin = origin or config.start
    obstacles = config.obstacle_set
    seen = {origin}
    queue = deque([origin])
    while queue:
        row, col = queue.popleft()
        for d_row, d_col in ACTION_DELTAS.values():
            nxt = (row + d_row, col + d_col)
            if config.in_bounds(nxt) and nxt not in obstacles and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def is_solvable(config: GridConfig) -> bool:
    """Check whether the goal can be reached from the start."""
    return config.goal in reachable_cells(config)


def random_obstacles(size: int, density: float, excluded: Iterable[Coord],
                     rng: Optional[SeededRNG] = None) -> List[Coord]:
    """
    Pick random obstacle cells.

    Args:
        size: Grid size
        density: Obstacle density (0.0 to 1.0) relative to all cells
        excluded: Cells that must stay free (start, goal)
        rng: Random number generator to use (uses default if None)
    """
    if not (0.0 <= density <= 1.0):
        raise ValueError(f"Density must be between 0.0 and 1.0, got {density}")

    if rng is None:
        rng = default_rng

    excluded = set(tuple(c) for c in excluded)
    free_cells = [(row, col) for row in range(size) for col in range(size)
                  if (row, col) not in excluded]
    num_obstacles = min(int(size * size * density), len(free_cells))
    return rng.sample(free_cells, num_obstacles)


def generate_solvable_grid(size: int, density: float = 0.2, seed: Optional[int] = None,
                           max_attempts: int = 100) -> GridConfig:
    """
    Generate a random layout whose goal is reachable from the start.

    Start is the top-left corner and goal the bottom-right corner.

    Raises:
        ConfigurationError: If no solvable layout was found
    """
    if size < 2:
        raise ConfigurationError(f"Random grids need size >= 2, got {size}")

    rng = SeededRNG(seed)
    start, goal = (0, 0), (size - 1, size - 1)

    for _ in range(max_attempts):
        obstacles = random_obstacles(size, density, (start, goal), rng)
        config = create_grid_config(size, goal=goal, obstacles=sorted(obstacles), start=start)
        if is_solvable(config):
            return config

    raise ConfigurationError(
        f"Could not generate a solvable {size}x{size} grid at density {density}"
    )
