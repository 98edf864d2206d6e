"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the search budget (time and iterations), the expansion
depth limit and the UCB1 exploration constant.
"""
from dataclasses import dataclass, fields
from datetime import timedelta
from typing import ClassVar, Union
import math


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    A search always runs at least one iteration, then keeps going while the
    elapsed time is under `duration` and the iteration cap (if any) has not
    been reached.
    """
    # Budget
    duration: float = 1.0
    """Search time in seconds (zero or negative still runs one iteration)"""

    max_iterations: int = 0
    """Iteration cap (0 or less = bounded by duration only)"""

    # Tree shape
    max_depth: int = 0
    """Maximum expansion depth below the root (0 or less = unlimited)"""

    exploration_weight: float = math.sqrt(2)
    """UCB1 exploration parameter (default is sqrt(2))"""

    # Constants
    UNLIMITED: ClassVar[int] = 0
    """Value disabling the depth or iteration limit"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if isinstance(self.duration, timedelta):
            self.duration = self.duration.total_seconds()

        if self.exploration_weight <= 0:
            raise ValueError("exploration_weight must be positive")

        if self.max_depth < 0:
            self.max_depth = self.UNLIMITED

        if self.max_iterations < 0:
            self.max_iterations = self.UNLIMITED

    @staticmethod
    def seconds(duration: Union[float, timedelta]) -> float:
        """
        Normalize a duration to seconds.

        Args:
            duration: Seconds or a timedelta

        Returns:
            Duration in seconds
        """
        if isinstance(duration, timedelta):
            return duration.total_seconds()
        return float(duration)

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration for quick decisions (short time budget).

        Returns:
            Fast MCTSConfig object
        """
        return cls(duration=0.1, max_iterations=500)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration for thorough searches.

        Returns:
            Deep MCTSConfig object
        """
        return cls(duration=5.0, max_iterations=20000)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"
