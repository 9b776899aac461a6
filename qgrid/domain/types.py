"""Core type definitions for the Q-learning grid trainer."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Literal, Dict, FrozenSet

# Coordinate type for grid positions: (row, col)
Coord = Tuple[int, int]

# Actions the agent can take: 0=up, 1=right, 2=down, 3=left
ActionInt = Literal[0, 1, 2, 3]

NUM_ACTIONS = 4


class ConfigurationError(ValueError):
    """Raised when a grid layout is inconsistent."""


class Termination(Enum):
    """How a step ended the current episode, if it did."""
    NONE = "none"
    GOAL = "goal"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class GridConfig:
    """Immutable description of the grid world.

    The grid is ``size`` x ``size``. Coordinates are ``(row, col)`` with
    ``(0, 0)`` in the top-left corner. Construction fails fast with
    :class:`ConfigurationError` when the layout is inconsistent.
    """
    size: int = 5
    goal: Coord = (4, 4)
    obstacles: Tuple[Coord, ...] = ((1, 1), (2, 2), (3, 1), (1, 3))
    start: Coord = (0, 0)
    max_steps_per_episode: int = 100
    reward_goal: float = 100.0
    reward_obstacle: float = -100.0
    reward_step: float = -1.0
    reward_invalid_move: float = -10.0

    def __post_init__(self):
        # Normalize list/list-of-list input into hashable tuples
        object.__setattr__(self, "goal", tuple(self.goal))
        object.__setattr__(self, "start", tuple(self.start))
        object.__setattr__(self, "obstacles", tuple(tuple(obs) for obs in self.obstacles))
        self._validate()

    def _validate(self):
        if self.size <= 0:
            raise ConfigurationError(f"Grid size must be positive, got {self.size}")
        if self.max_steps_per_episode <= 0:
            raise ConfigurationError(
                f"Step budget must be positive, got {self.max_steps_per_episode}"
            )
        if not self.in_bounds(self.goal):
            raise ConfigurationError(f"Goal {self.goal} is out of bounds")
        if not self.in_bounds(self.start):
            raise ConfigurationError(f"Start {self.start} is out of bounds")

        seen = set()
        for obs in self.obstacles:
            if not self.in_bounds(obs):
                raise ConfigurationError(f"Obstacle {obs} is out of bounds")
            if obs in seen:
                raise ConfigurationError(f"Duplicate obstacle {obs}")
            seen.add(obs)

        if self.goal in seen:
            raise ConfigurationError(f"Goal {self.goal} overlaps an obstacle")
        if self.start in seen:
            raise ConfigurationError(f"Start {self.start} overlaps an obstacle")
        if self.start == self.goal:
            raise ConfigurationError("Start and goal cannot be the same cell")

    def in_bounds(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    @property
    def obstacle_set(self) -> FrozenSet[Coord]:
        return frozenset(self.obstacles)


@dataclass
class Hyperparameters:
    """Learning parameters; mutable by the driver, effective on the next step.

    Values are accepted as given. Out-of-range numbers (e.g. epsilon > 1)
    flow straight into the update arithmetic.
    """
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    epsilon: float = 0.1
    step_delay: int = 500  # milliseconds between driver ticks
    epsilon_decay: float = 0.995
    epsilon_min: float = 0.01


@dataclass
class EpisodeCounters:
    """Training counters. Monotonic except on a full reset."""
    episode: int = 0
    steps: int = 0
    episode_reward: float = 0.0
    total_reward: float = 0.0
    success_count: int = 0

    @property
    def success_rate(self) -> float:
        """Percentage of finished episodes that reached the goal."""
        return self.success_count / self.episode * 100 if self.episode > 0 else 0.0


@dataclass(frozen=True)
class HistoryEntry:
    """One row of the recent-action history."""
    episode: int
    step: int
    state: Coord
    action: str
    reward: float
    q_value: float
    position: Coord


@dataclass(frozen=True)
class QUpdate:
    """Snapshot of the most recent Bellman update, for inspection only."""
    state: Coord
    action: ActionInt
    action_name: str
    old_q: float
    new_q: float
    reward: float
    next_state: Optional[Coord]
    next_max_q: float
    learning_rate: float
    discount_factor: float
    timestamp: float = field(default_factory=time.time)

    @property
    def q_change(self) -> float:
        return self.new_q - self.old_q


@dataclass(frozen=True)
class Episode:
    """Represents a single finished training episode."""
    number: int
    steps: int
    total_reward: float
    reached_goal: bool
    epsilon_used: float


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a single agent step.

    ``position`` is the cell the agent ended the step on, before any
    episode reset moved it back to the start.
    """
    done: bool
    reward: float
    action: ActionInt
    q_value: float
    termination: Termination = Termination.NONE
    position: Optional[Coord] = None
    moved: bool = True

    @property
    def reached_goal(self) -> bool:
        return self.termination is Termination.GOAL

    @property
    def timed_out(self) -> bool:
        return self.termination is Termination.TIMEOUT


# Action mappings
ACTION_DELTAS: Dict[ActionInt, Coord] = {
    0: (-1, 0),  # up
    1: (0, 1),   # right
    2: (1, 0),   # down
    3: (0, -1)   # left
}

ACTION_SYMBOLS: Dict[ActionInt, str] = {
    0: "↑",
    1: "→",
    2: "↓",
    3: "←"
}
