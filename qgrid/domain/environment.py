"""Grid environment: geometry, validity and reward rules."""

from typing import List, Optional
from .types import Coord, GridConfig, ActionInt, ACTION_DELTAS


class GridEnvironment:
    """Read-only environment model for the grid world.

    Every query is a pure function of position, so a single instance can be
    shared between the agent and any presentation layer.
    """

    def __init__(self, config: Optional[GridConfig] = None):
        self.config = config or GridConfig()
        self._obstacles = self.config.obstacle_set

    @property
    def size(self) -> int:
        return self.config.size

    @property
    def goal(self) -> Coord:
        return self.config.goal

    @property
    def start(self) -> Coord:
        return self.config.start

    @property
    def obstacles(self):
        return self.config.obstacles

    @property
    def num_states(self) -> int:
        """Number of rows in the state table (one per cell, obstacles included)."""
        return self.config.size * self.config.size

    def is_obstacle(self, pos: Coord) -> bool:
        return tuple(pos) in self._obstacles

    def is_goal(self, pos: Coord) -> bool:
        return tuple(pos) == self.config.goal

    def is_valid(self, pos: Coord) -> bool:
        """In bounds and not an obstacle. The goal cell is always valid."""
        return self.config.in_bounds(pos) and not self.is_obstacle(pos)

    def reward(self, pos: Coord) -> float:
        """Reward for occupying a cell."""
        if self.is_goal(pos):
            return self.config.reward_goal
        elif self.is_obstacle(pos):
            return self.config.reward_obstacle
        else:
            return self.config.reward_step

    def next_position(self, pos: Coord, action: ActionInt) -> Coord:
        """Candidate cell reached by applying an action's displacement."""
        delta = ACTION_DELTAS[action]
        return (pos[0] + delta[0], pos[1] + delta[1])

    def state_index(self, pos: Coord) -> int:
        """
        Map a valid cell to its row in the state table.

        Raises:
            ValueError: If the cell is out of bounds or an obstacle
        """
        if not self.is_valid(pos):
            raise ValueError(f"{tuple(pos)} is not a valid state")
        return pos[0] * self.config.size + pos[1]

    def valid_cells(self) -> List[Coord]:
        """All non-obstacle cells in row-major order."""
        return [
            (row, col)
            for row in range(self.config.size)
            for col in range(self.config.size)
            if not self.is_obstacle((row, col))
        ]

