"""Plain-text summaries of the agent's grid, policy and Q-table."""

from typing import List, Optional

from ..domain.qlearning import QLearningAgent
from ..domain.types import QUpdate, ACTION_SYMBOLS


def render_grid(agent: QLearningAgent) -> str:
    """Board view: A=agent, G=goal, #=obstacle, .=free cell."""
    env = agent.environment
    lines = []
    for row in range(env.size):
        cells = []
        for col in range(env.size):
            pos = (row, col)
            if pos == agent.position:
                cells.append("A")
            elif env.is_goal(pos):
                cells.append("G")
            elif env.is_obstacle(pos):
                cells.append("#")
            else:
                cells.append(".")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def render_policy(agent: QLearningAgent) -> str:
    """
    Greedy policy as arrows.

    Cells where two or three actions tie for the best value show ``*``;
    cells where all four tie (a fresh cell, for instance) show ``·``.
    """
    env = agent.environment
    policy = agent.greedy_policy()
    lines = []
    for row in range(env.size):
        cells = []
        for col in range(env.size):
            pos = (row, col)
            if env.is_obstacle(pos):
                cells.append("#")
            elif env.is_goal(pos):
                cells.append("G")
            elif len(policy[pos]) == 1:
                cells.append(ACTION_SYMBOLS[policy[pos][0]])
            elif len(policy[pos]) == len(ACTION_SYMBOLS):
                cells.append("·")
            else:
                cells.append("*")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def cell_type(agent: QLearningAgent, pos) -> str:
    env = agent.environment
    if env.is_goal(pos):
        return "Goal"
    elif env.is_obstacle(pos):
        return "Obstacle"
    elif tuple(pos) == agent.position:
        return "Agent"
    return "Normal"


def q_table_rows(agent: QLearningAgent) -> List[str]:
    """One formatted line per valid cell: values, max and best actions."""
    header = f"{'cell':<8}{'type':<10}" + "".join(f"{ACTION_SYMBOLS[a]:>9}" for a in range(4)) \
        + f"{'max':>9}  best"
    rows = [header]
    for pos in agent.environment.valid_cells():
        values = agent.q_values(pos)
        best = " ".join(ACTION_SYMBOLS[a] for a in agent.best_actions(pos))
        rows.append(
            f"{str(pos):<8}{cell_type(agent, pos):<10}"
            + "".join(f"{v:>9.3f}" for v in values)
            + f"{values.max():>9.3f}  {best}"
        )
    return rows


def format_update(update: Optional[QUpdate]) -> str:
    """Spell out the most recent Bellman update with its numbers."""
    if update is None:
        return "No update yet"
    return (
        f"Q({update.state}, {update.action_name}) <- {update.old_q:.3f} + "
        f"{update.learning_rate}[{update.reward} + {update.discount_factor} x "
        f"{update.next_max_q:.3f} - {update.old_q:.3f}] = {update.new_q:.3f} "
        f"(change {update.q_change:+.3f})"
    )
