"""Controller that schedules agent steps on a timer and reports results."""

from dataclasses import replace
from typing import Optional, List
from PySide6.QtCore import QObject, QTimer, Signal

from ..domain.types import Episode, TransitionResult
from ..domain.qlearning import QLearningAgent
from .fsm import TrainerStateMachine, TrainerState


class TrainingController(QObject):
    """
    Drives a :class:`QLearningAgent` one step at a time.

    The agent is owned by the caller and passed in; the controller only
    decides *when* it steps. Continuous training runs on a ``QTimer`` whose
    interval is the agent's ``step_delay``. Pausing stops the timer, so no
    step is ever interrupted.

    Signals:
        step_completed: Emitted after every agent step
        episode_completed: Emitted when a step ends an episode
        state_changed: Emitted when the trainer state changes
        parameters_changed: Emitted after hyperparameters are replaced
        training_finished: Emitted when ``max_episodes`` is reached
    """

    # Qt Signals
    step_completed = Signal(object)  # TransitionResult
    episode_completed = Signal(object)  # Episode
    state_changed = Signal(object)  # TrainerState
    parameters_changed = Signal(object)  # Hyperparameters
    training_finished = Signal()

    def __init__(self, agent: Optional[QLearningAgent] = None,
                 max_episodes: Optional[int] = None, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._agent = agent or QLearningAgent()
        self._state_machine = TrainerStateMachine()
        self.max_episodes = max_episodes

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_timer_tick)

        self._setup_state_callbacks()

    def _setup_state_callbacks(self):
        """Setup callbacks for state machine transitions."""
        self._state_machine.on_state_enter(TrainerState.TRAINING, self._on_training_entered)
        self._state_machine.on_state_enter(TrainerState.PAUSED, self._on_paused_entered)
        self._state_machine.on_state_enter(TrainerState.IDLE, self._on_idle_entered)

    # Properties

    @property
    def agent(self) -> QLearningAgent:
        return self._agent

    @property
    def current_state(self) -> TrainerState:
        return self._state_machine.current_state

    @property
    def is_training(self) -> bool:
        return self._state_machine.is_training()

    @property
    def timer_interval(self) -> int:
        return self._timer.interval()

    # Commands

    def start_training(self) -> bool:
        """Start or resume continuous training."""
        if self._reached_episode_limit():
            return False
        return self._state_machine.start_training()

    def pause_training(self) -> bool:
        """Stop scheduling further steps. The agent keeps its state."""
        return self._state_machine.pause()

    def stop_training(self) -> bool:
        """Return to idle without touching the agent."""
        return self._state_machine.reset_to_idle()

    def step_once(self) -> Optional[TransitionResult]:
        """Run a single manual step. Ignored while training continuously."""
        if self._state_machine.is_training():
            return None
        return self._advance(decay=False)

    def reset(self):
        """Stop training and wipe everything the agent has learned."""
        self._timer.stop()
        self._state_machine.reset_to_idle()
        self._agent.reset()

    def update_parameters(self, learning_rate: float, discount_factor: float,
                          epsilon: float, step_delay: int):
        """Replace hyperparameters; the next tick uses them."""
        self._agent.update_parameters(learning_rate, discount_factor, epsilon, step_delay)
        self._timer.setInterval(step_delay)
        self.parameters_changed.emit(replace(self._agent.params))

    def run_headless(self, episodes: int) -> List[Episode]:
        """
        Train synchronously, without the timer, until ``episodes`` more
        episodes have ended.

        Returns:
            The finished episodes in order
        """
        if self._state_machine.is_training():
            return []

        finished: List[Episode] = []
        while len(finished) < episodes:
            result = self._advance(decay=True)
            if result.done:
                finished.append(self._agent.last_episode)
        return finished

    def get_statistics(self) -> dict:
        """Current counters and parameters for display."""
        counters = self._agent.counters
        params = self._agent.params
        return {
            "state": self._state_machine.get_state_description(),
            "episode": counters.episode,
            "steps": counters.steps,
            "episode_reward": counters.episode_reward,
            "total_reward": counters.total_reward,
            "success_count": counters.success_count,
            "success_rate": counters.success_rate,
            "position": self._agent.position,
            "learning_rate": params.learning_rate,
            "discount_factor": params.discount_factor,
            "epsilon": params.epsilon,
            "step_delay": params.step_delay,
        }

    def cleanup(self):
        """Stop the timer before the controller is discarded."""
        self._timer.stop()

    # Internals

    def _advance(self, decay: bool) -> TransitionResult:
        result = self._agent.step()
        self.step_completed.emit(result)
        if result.done:
            # Exploration shrinks only while training continuously
            if decay:
                self._agent.decay_epsilon()
            self.episode_completed.emit(self._agent.last_episode)
        return result

    def _reached_episode_limit(self) -> bool:
        return self.max_episodes is not None and self._agent.counters.episode >= self.max_episodes

    def _on_timer_tick(self):
        if not self._state_machine.is_training():
            self._timer.stop()
            return

        self._advance(decay=True)

        if self._reached_episode_limit():
            self._state_machine.reset_to_idle()
            self.training_finished.emit()

    # State machine callbacks

    def _on_training_entered(self, context):
        self._timer.start(self._agent.params.step_delay)
        self.state_changed.emit(TrainerState.TRAINING)

    def _on_paused_entered(self, context):
        self._timer.stop()
        self.state_changed.emit(TrainerState.PAUSED)

    def _on_idle_entered(self, context):
        self._timer.stop()
        self.state_changed.emit(TrainerState.IDLE)
