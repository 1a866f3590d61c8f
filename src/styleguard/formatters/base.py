"""Base formatter interface for styleguard output rendering."""

from abc import ABC, abstractmethod

from ..reporting.models import Report


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: Report) -> None:
        """Render a report to stdout."""

    @abstractmethod
    def format(self, report: Report) -> str:
        """Return formatted string representation of a report."""
