"""
Exceptions raised by the Monte Carlo Tree Search engine.

Collaborator failures are never retried: a single illegal move reported by
the rules evaluator aborts the whole search call.
"""


class SearchError(Exception):
    """Base class for all search failures."""


class RuleViolation(SearchError):
    """Raised by a rules evaluator when a move cannot be applied to a board."""

    def __init__(self, message: str, side: int = 0, move=None):
        super().__init__(message)
        self.side = side
        self.move = move


class NoChildrenAtDecision(SearchError):
    """Raised when the root has no children once the search budget is spent."""
