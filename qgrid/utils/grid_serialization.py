"""
Grid layout serialization for saving and loading grid configurations.
Only the layout is stored; learned Q-values never leave the process.
"""

import json
import os
from datetime import datetime
from typing import Dict, Any

from ..domain.types import GridConfig, ConfigurationError

FORMAT_VERSION = "1.0"


class GridData:
    """Container for a grid layout with metadata."""

    def __init__(self, config: GridConfig, name: str = "", description: str = ""):
        self.config = config
        self.name = name
        self.description = description
        self.created_at = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert grid data to dictionary for serialization."""
        return {
            'size': self.config.size,
            'start': list(self.config.start),
            'goal': list(self.config.goal),
            'obstacles': [list(obs) for obs in self.config.obstacles],
            'max_steps_per_episode': self.config.max_steps_per_episode,
            'name': self.name,
            'description': self.description,
            'created_at': self.created_at,
            'version': FORMAT_VERSION
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridData':
        """
        Create grid data from dictionary.

        Raises:
            ConfigurationError: If required fields are missing or malformed
        """
        try:
            config = GridConfig(
                size=int(data['size']),
                goal=tuple(int(v) for v in data['goal']),
                obstacles=tuple(tuple(int(v) for v in obs) for obs in data.get('obstacles', [])),
                start=tuple(int(v) for v in data.get('start', (0, 0))),
                max_steps_per_episode=int(data.get('max_steps_per_episode', 100)),
            )
        except ConfigurationError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed grid data: {e}") from e

        grid = cls(config, name=data.get('name', ''), description=data.get('description', ''))
        grid.created_at = data.get('created_at', grid.created_at)
        return grid


def save_grid(grid_data: GridData, filepath: str) -> str:
    """Save grid data to a JSON file and return the path."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(grid_data.to_dict(), f, indent=2)
    return filepath


def load_grid(filepath: str) -> GridData:
    """Load grid data from a JSON file."""
    with open(filepath, 'r') as f:
        data = json.load(f)
    return GridData.from_dict(data)


def load_grid_config(filepath: str) -> GridConfig:
    """Shortcut returning just the layout of a saved grid."""
    return load_grid(filepath).config
