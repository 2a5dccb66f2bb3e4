"""Abstract base class for calendar event transformers."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from coursecal.models import CalendarEvent


class BaseTransformer(ABC):
    """Interface for turning a calendar feed into an output format.

    Extend this class to add further formats (e.g. CSV, a calendar API
    payload).
    """

    extension: str = ""

    @abstractmethod
    def transform(self, events: Sequence[CalendarEvent]) -> Any:
        """Transform calendar events into the target format.

        Args:
            events: Events to transform, in the order they should appear.

        Returns:
            Transformed data in the target format.
        """
        pass

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Serialize the last transformation result.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        pass

    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.

        Args:
            output_path: Path to the output file.
        """
        data = self.to_bytes()
        with open(output_path, "wb") as f:
            f.write(data)
