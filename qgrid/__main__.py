"""Command line entry point for the Q-learning grid trainer."""

import argparse
import signal
import sys
from typing import Optional

from PySide6.QtCore import QCoreApplication

from .app.controller import TrainingController
from .domain.environment import GridEnvironment
from .domain.qlearning import QLearningAgent
from .domain.types import Episode, GridConfig, Hyperparameters
from .utils.grid_factory import default_grid_config, generate_solvable_grid
from .utils.grid_serialization import load_grid_config
from .utils.report import render_policy, q_table_rows, format_update
from .utils.rng import SeededRNG


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tabular Q-learning on a grid world")
    parser.add_argument("--episodes", type=int, default=200, help="Number of episodes to train")
    parser.add_argument("--grid", type=str, help="Path to a saved grid layout (JSON)")
    parser.add_argument("--size", type=int, help="Generate a random solvable grid of this size")
    parser.add_argument("--density", type=float, default=0.2, help="Obstacle density for generated grids")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--alpha", type=float, default=0.1, help="Learning rate")
    parser.add_argument("--gamma", type=float, default=0.9, help="Discount factor")
    parser.add_argument("--epsilon", type=float, default=0.1, help="Initial exploration rate")
    parser.add_argument("--delay", type=int, default=0, help="Milliseconds between steps in timed mode")
    parser.add_argument("--timed", action="store_true", help="Drive training with a Qt timer instead of a tight loop")
    parser.add_argument("--report-every", type=int, default=50, help="Episodes between progress lines")
    parser.add_argument("--show-q-table", action="store_true", help="Print the full Q-table after training")
    return parser


def load_config(args: argparse.Namespace) -> GridConfig:
    if args.grid:
        return load_grid_config(args.grid)
    if args.size:
        return generate_solvable_grid(args.size, args.density, seed=args.seed)
    return default_grid_config()


def make_progress_printer(report_every: int):
    def on_episode(episode: Episode):
        if report_every > 0 and (episode.number + 1) % report_every == 0:
            outcome = "goal" if episode.reached_goal else "timeout"
            print(f"Episode {episode.number + 1}: {episode.steps} steps, "
                  f"reward {episode.total_reward:.0f} ({outcome}), epsilon {episode.epsilon_used:.3f}")
    return on_episode


def run_timed(controller: TrainingController, app: QCoreApplication) -> int:
    """Run training on the controller's timer until the episode limit."""
    controller.training_finished.connect(app.quit)

    def signal_handler(sig, frame):
        print(f"\nReceived signal {sig}, stopping training...")
        controller.stop_training()
        app.quit()

    previous_handler = signal.signal(signal.SIGINT, signal_handler)
    try:
        if not controller.start_training():
            return 1
        return app.exec()
    finally:
        signal.signal(signal.SIGINT, previous_handler)


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except (ValueError, OSError) as e:
        print(f"❌ Invalid grid: {e}")
        return 2

    params = Hyperparameters(
        learning_rate=args.alpha,
        discount_factor=args.gamma,
        epsilon=args.epsilon,
        step_delay=args.delay,
    )
    agent = QLearningAgent(GridEnvironment(config), params, SeededRNG(args.seed))

    print("🧠 Q-Learning Grid Trainer")
    print("=" * 50)
    print(f"Grid {config.size}x{config.size}, start {config.start}, goal {config.goal}, "
          f"{len(config.obstacles)} obstacles")

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    controller = TrainingController(agent, max_episodes=args.episodes)
    controller.episode_completed.connect(make_progress_printer(args.report_every))

    try:
        if args.timed:
            status = run_timed(controller, app)
            if status != 0:
                return status
        else:
            controller.run_headless(args.episodes)
    finally:
        controller.cleanup()

    stats = controller.get_statistics()
    print("=" * 50)
    print(f"Episodes: {stats['episode']}  Successes: {stats['success_count']} "
          f"({stats['success_rate']:.1f}%)  Total reward: {stats['total_reward']:.0f}")
    print(f"Final epsilon: {stats['epsilon']:.3f}")
    print(f"Last update: {format_update(agent.last_update)}")
    print("\nLearned policy:")
    print(render_policy(agent))

    if args.show_q_table:
        print()
        print("\n".join(q_table_rows(agent)))

    return 0


if __name__ == "__main__":
    sys.exit(main())
