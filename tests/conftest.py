import pytest
from PySide6.QtCore import QCoreApplication

from qgrid.domain.environment import GridEnvironment
from qgrid.domain.qlearning import QLearningAgent
from qgrid.domain.types import GridConfig, Hyperparameters
from qgrid.utils.rng import SeededRNG


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def env():
    return GridEnvironment(GridConfig())


@pytest.fixture
def agent(env):
    return QLearningAgent(env, Hyperparameters(), SeededRNG(1234))


@pytest.fixture
def greedy_agent(env):
    """Agent that never explores, so tests can steer it through Q-values."""
    return QLearningAgent(env, Hyperparameters(epsilon=0.0), SeededRNG(1234))


@pytest.fixture
def walled_goal_config():
    """3x3 grid whose goal (2,2) is sealed off by obstacles."""
    return GridConfig(size=3, goal=(2, 2), obstacles=((1, 2), (2, 1)))
