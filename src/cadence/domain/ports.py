"""
Ports (interfaces) for problem persistence.

The engine never touches storage; application services depend on this
abstraction, not on concrete adapters.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import Problem


class ProblemStore(ABC):
    """
    Port for loading and saving the problem list and stored settings.

    Implementations:
        - FileProblemStore: single JSON or YAML blob on disk.
    """

    @abstractmethod
    def load_problems(self) -> list[Problem]:
        """Return every stored problem in stored order."""
        pass

    @abstractmethod
    def save_problems(self, problems: list[Problem]) -> None:
        """Replace the stored problem list."""
        pass

    @abstractmethod
    def load_settings(self) -> dict[str, Any] | None:
        """
        Return the raw stored settings object, or None if the host never saved one.

        Keys use the stored (camelCase) names, e.g. ``growthFactor``.
        """
        pass
