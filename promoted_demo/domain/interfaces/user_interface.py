"""Interface for interacting with the user (output only).

Defines the contract for displaying the banner, ranked results, configuration
and errors, allowing different UI implementations.
"""

import abc
from typing import Any, Dict

from promoted_demo.domain.models.delivery import DeliveryOutcome


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_banner(self, metrics_endpoint: str) -> None:
        """Displays the program header and the metrics endpoint in use."""
        pass

    @abc.abstractmethod
    def display_outcome(self, outcome: DeliveryOutcome) -> None:
        """Displays the re-ranked results of a delivery call.

        Args:
            outcome: The translated delivery result.
        """
        pass

    @abc.abstractmethod
    def display_config(self, config: Dict[str, Any]) -> None:
        """Displays resolved configuration values (secrets already masked)."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass
