"""Pure domain logic: grid environment, Q-learning agent and their types."""
