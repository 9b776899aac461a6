"""Q-Learning Grid Trainer - tabular reinforcement learning on a small grid world.

This package implements a Q-Learning agent that learns to reach a goal cell while
avoiding obstacles, plus a timer-driven controller that advances it step by step.
"""

__version__ = "1.0.0"
__author__ = "Q-Learning Grid Demo"
