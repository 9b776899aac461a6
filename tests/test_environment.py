import pytest

from qgrid.domain.environment import GridEnvironment
from qgrid.domain.types import ConfigurationError, GridConfig


OBSTACLES = [(1, 1), (2, 2), (3, 1), (1, 3)]


def test_rewards_for_every_cell(env):
    for row in range(5):
        for col in range(5):
            pos = (row, col)
            if pos == (4, 4):
                assert env.reward(pos) == 100
            elif pos in OBSTACLES:
                assert env.reward(pos) == -100
            else:
                assert env.reward(pos) == -1


def test_validity_rules(env):
    assert env.is_valid((0, 0))
    assert env.is_valid((4, 4))  # goal may be occupied
    for obs in OBSTACLES:
        assert env.is_obstacle(obs)
        assert not env.is_valid(obs)
    for outside in [(-1, 0), (0, -1), (5, 0), (0, 5), (5, 5)]:
        assert not env.is_valid(outside)


def test_goal_detection(env):
    assert env.is_goal((4, 4))
    assert not env.is_goal((0, 0))
    assert not env.is_obstacle((4, 4))


def test_state_index_is_row_major_and_rejects_obstacles(env):
    assert env.state_index((0, 0)) == 0
    assert env.state_index((2, 3)) == 13
    with pytest.raises(ValueError):
        env.state_index((1, 1))
    with pytest.raises(ValueError):
        env.state_index((5, 0))


def test_valid_cells_exclude_obstacles(env):
    cells = env.valid_cells()
    assert len(cells) == 21
    assert not set(OBSTACLES) & set(cells)
    assert len(set(cells)) == len(cells)


def test_next_position(env):
    assert env.next_position((2, 3), 0) == (1, 3)
    assert env.next_position((2, 3), 1) == (2, 4)
    assert env.next_position((2, 3), 2) == (3, 3)
    assert env.next_position((2, 3), 3) == (2, 2)


def test_default_layout():
    env = GridEnvironment()
    assert env.size == 5
    assert env.goal == (4, 4)
    assert env.start == (0, 0)
    assert list(env.obstacles) == OBSTACLES


@pytest.mark.parametrize("kwargs", [
    dict(size=0),
    dict(goal=(5, 5)),
    dict(goal=(1, 1)),
    dict(obstacles=((1, 1), (1, 1))),
    dict(obstacles=((7, 0),)),
    dict(obstacles=((0, 0),)),
    dict(start=(4, 4)),
    dict(start=(-1, 0)),
    dict(max_steps_per_episode=0),
])
def test_inconsistent_layout_fails_fast(kwargs):
    with pytest.raises(ConfigurationError):
        GridConfig(**kwargs)


def test_config_accepts_lists():
    config = GridConfig(size=4, goal=[3, 3], obstacles=[[1, 2], [2, 1]])
    assert config.goal == (3, 3)
    assert config.obstacles == ((1, 2), (2, 1))
    assert config.obstacle_set == frozenset({(1, 2), (2, 1)})


def test_unused_action_tables_are_gone():
    import qgrid.domain.types as types

    assert not hasattr(types, "ACTION_TO_INT")
    assert not hasattr(types, "INT_TO_ACTION")
    assert not hasattr(GridEnvironment, "get_valid_actions")
    assert not hasattr(GridEnvironment, "position_of")
