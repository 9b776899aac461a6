"""Q-Learning algorithm implementation for grid navigation."""

from collections import deque
from dataclasses import replace
from typing import Optional, List, Dict

import numpy as np

from .environment import GridEnvironment
from .types import (
    Coord, ActionInt, GridConfig, Hyperparameters, EpisodeCounters, HistoryEntry,
    QUpdate, Episode, Termination, TransitionResult, NUM_ACTIONS, ACTION_SYMBOLS
)
from ..utils.rng import SeededRNG

HISTORY_LIMIT = 50


class QLearningAgent:
    """
    Tabular Q-Learning agent with epsilon-greedy exploration.

    The agent owns its Q-table, position, counters and hyperparameters. It
    knows nothing about scheduling: a driver calls :meth:`step` whenever it
    wants the simulation to advance.

    The Q-table is a ``(size * size, 4)`` array indexed by
    ``row * size + col``. Rows belonging to obstacle cells are allocated but
    never read or written, so they stay at zero.
    """

    def __init__(self, environment: Optional[GridEnvironment] = None,
                 params: Optional[Hyperparameters] = None,
                 rng: Optional[SeededRNG] = None):
        self.environment = environment or GridEnvironment(GridConfig())
        self.params = replace(params) if params is not None else Hyperparameters()
        self.rng = rng if rng is not None else SeededRNG()

        self.position: Coord = self.environment.start
        self.counters = EpisodeCounters()
        self.last_update: Optional[QUpdate] = None
        self.last_episode: Optional[Episode] = None
        self._history: deque = deque(maxlen=HISTORY_LIMIT)
        self._q_table = np.zeros((self.environment.num_states, NUM_ACTIONS), dtype=np.float64)

    # Read surface

    @property
    def q_table(self) -> np.ndarray:
        """Copy of the full Q-table."""
        return self._q_table.copy()

    @property
    def history(self) -> List[HistoryEntry]:
        """Recent steps, newest first."""
        return list(self._history)

    @property
    def epsilon(self) -> float:
        return self.params.epsilon

    def q_values(self, pos: Coord) -> np.ndarray:
        """Copy of the four action values for a valid cell."""
        return self._q_table[self.environment.state_index(pos)].copy()

    def get_q_value(self, pos: Coord, action: ActionInt) -> float:
        """Get Q-value for state-action pair."""
        return float(self._q_table[self.environment.state_index(pos), action])

    def _set_q_value(self, pos: Coord, action: ActionInt, value: float):
        """Overwrite one entry directly, bypassing the update rule."""
        self._q_table[self.environment.state_index(pos), action] = value

    def max_q(self, pos: Coord) -> float:
        return float(self._q_table[self.environment.state_index(pos)].max())

    def best_actions(self, pos: Coord) -> List[ActionInt]:
        """Every action attaining the maximum Q-value at ``pos``."""
        values = self._q_table[self.environment.state_index(pos)]
        return [int(a) for a in np.flatnonzero(values == values.max())]

    def greedy_policy(self) -> Dict[Coord, List[ActionInt]]:
        """Best actions for every valid cell."""
        return {cell: self.best_actions(cell) for cell in self.environment.valid_cells()}

    # Decision making

    def choose_action(self, pos: Coord) -> ActionInt:
        """Select action using epsilon-greedy policy with random tie-break."""
        state = self.environment.state_index(pos)

        if self.rng.random() < self.params.epsilon:
            return self.rng.randint(0, NUM_ACTIONS - 1)

        values = self._q_table[state]
        best = np.flatnonzero(values == values.max())
        return int(self.rng.choice(best))

    def update_q_value(self, pos: Coord, action: ActionInt, reward: float,
                       next_pos: Optional[Coord]) -> float:
        """
        Apply the one-step Q-learning update and return the new estimate.

        ``next_pos`` is ``None`` when the move was illegal; the bootstrapped
        term is then zero.
        """
        state = self.environment.state_index(pos)
        current_q = float(self._q_table[state, action])

        if next_pos is None:
            next_max_q = 0.0
        else:
            next_max_q = float(self._q_table[self.environment.state_index(next_pos)].max())

        alpha = self.params.learning_rate
        gamma = self.params.discount_factor
        new_q = current_q + alpha * (reward + gamma * next_max_q - current_q)

        self.last_update = QUpdate(
            state=tuple(pos),
            action=action,
            action_name=ACTION_SYMBOLS[action],
            old_q=current_q,
            new_q=new_q,
            reward=reward,
            next_state=tuple(next_pos) if next_pos is not None else None,
            next_max_q=next_max_q,
            learning_rate=alpha,
            discount_factor=gamma,
        )

        self._q_table[state, action] = new_q
        return new_q

    # Transitions

    def step(self) -> TransitionResult:
        """Advance the simulation by exactly one action."""
        env = self.environment
        current_pos = self.position
        action = self.choose_action(current_pos)
        candidate = env.next_position(current_pos, action)

        if env.is_valid(candidate):
            self.position = candidate
            reward = env.reward(candidate)
            next_pos: Optional[Coord] = candidate
        else:
            # Wall or obstacle: stay in place
            reward = env.config.reward_invalid_move
            next_pos = None

        new_q = self.update_q_value(current_pos, action, reward, next_pos)

        self.counters.steps += 1
        self.counters.episode_reward += reward
        self.counters.total_reward += reward

        self._history.appendleft(HistoryEntry(
            episode=self.counters.episode,
            step=self.counters.steps,
            state=current_pos,
            action=ACTION_SYMBOLS[action],
            reward=reward,
            q_value=new_q,
            position=self.position,
        ))

        end_pos = self.position
        if env.is_goal(end_pos):
            termination = Termination.GOAL
            self.counters.success_count += 1
            self._finish_episode(reached_goal=True)
        elif self.counters.steps > env.config.max_steps_per_episode:
            termination = Termination.TIMEOUT
            self._finish_episode(reached_goal=False)
        else:
            termination = Termination.NONE

        return TransitionResult(
            done=termination is not Termination.NONE,
            reward=reward,
            action=action,
            q_value=new_q,
            termination=termination,
            position=end_pos,
            moved=next_pos is not None,
        )

    def _finish_episode(self, reached_goal: bool):
        self.last_episode = Episode(
            number=self.counters.episode,
            steps=self.counters.steps,
            total_reward=self.counters.episode_reward,
            reached_goal=reached_goal,
            epsilon_used=self.params.epsilon,
        )
        self.reset_episode()

    # Lifecycle

    def reset_episode(self):
        """Start a new episode. Learned values are kept."""
        self.counters.episode += 1
        self.counters.steps = 0
        self.counters.episode_reward = 0.0
        self.position = self.environment.start

    def reset(self):
        """Forget everything: counters, history and the whole Q-table."""
        self.counters = EpisodeCounters()
        self._history.clear()
        self.position = self.environment.start
        self.last_update = None
        self.last_episode = None
        self._q_table = np.zeros((self.environment.num_states, NUM_ACTIONS), dtype=np.float64)

    def update_parameters(self, learning_rate: float, discount_factor: float,
                          epsilon: float, step_delay: int):
        """Replace the hyperparameters; takes effect on the next step."""
        self.params = Hyperparameters(
            learning_rate=learning_rate,
            discount_factor=discount_factor,
            epsilon=epsilon,
            step_delay=step_delay,
            epsilon_decay=self.params.epsilon_decay,
            epsilon_min=self.params.epsilon_min,
        )

    def decay_epsilon(self):
        """Decay epsilon for less exploration over time."""
        if self.params.epsilon > self.params.epsilon_min:
            self.params = replace(self.params, epsilon=self.params.epsilon * self.params.epsilon_decay)
