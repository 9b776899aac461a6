"""Finite State Machine for the training driver."""

from enum import Enum, auto
from typing import Dict, Callable, Optional


class TrainerState(Enum):
    """States of the driver that schedules agent steps."""
    IDLE = auto()
    TRAINING = auto()
    PAUSED = auto()


class TrainerStateMachine:
    """State machine for managing continuous training."""

    def __init__(self):
        self.current_state = TrainerState.IDLE
        self._enter_callbacks: Dict[TrainerState, Callable[[Optional[Dict]], None]] = {}

        # Define valid state transitions
        self._valid_transitions = {
            TrainerState.IDLE: {TrainerState.TRAINING},
            TrainerState.TRAINING: {TrainerState.PAUSED, TrainerState.IDLE},
            TrainerState.PAUSED: {TrainerState.TRAINING, TrainerState.IDLE},
        }

    def on_state_enter(self, state: TrainerState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state entry."""
        self._enter_callbacks[state] = callback

    def can_transition(self, to_state: TrainerState) -> bool:
        """Check if transition to target state is valid."""
        return to_state in self._valid_transitions.get(self.current_state, set())

    def transition(self, to_state: TrainerState, context: Optional[Dict] = None) -> bool:
        """Attempt to transition to target state."""
        if not self.can_transition(to_state):
            return False

        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](context)

        return True

    # Convenience methods for common transitions

    def start_training(self, context: Optional[Dict] = None) -> bool:
        """Start (or resume) continuous training."""
        return self.transition(TrainerState.TRAINING, context)

    def pause(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainerState.PAUSED, context)

    def reset_to_idle(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainerState.IDLE, context)

    # State checking methods

    def is_idle(self) -> bool:
        return self.current_state == TrainerState.IDLE

    def is_training(self) -> bool:
        return self.current_state == TrainerState.TRAINING

    def is_paused(self) -> bool:
        return self.current_state == TrainerState.PAUSED

    def get_state_description(self) -> str:
        """Get human-readable state description."""
        descriptions = {
            TrainerState.IDLE: "Ready - start training or step manually",
            TrainerState.TRAINING: "Training agent with Q-Learning",
            TrainerState.PAUSED: "Training paused",
        }
        return descriptions.get(self.current_state, "Unknown state")
