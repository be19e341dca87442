"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from busledger.domain.entities import AppData


class Database(ABC):
    """Abstract database interface for busledger.

    The ledger is persisted as one aggregate per application key: it is
    loaded wholesale at startup and rewritten wholesale after each mutation.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def load_app_data(self, app_key: str) -> Optional[AppData]:
        """Load the aggregate stored under an application key, or None."""
        pass

    @abstractmethod
    def save_app_data(self, app_key: str, data: AppData) -> None:
        """Replace the aggregate stored under an application key."""
        pass

    @abstractmethod
    def delete_app_data(self, app_key: str) -> None:
        """Remove the aggregate stored under an application key."""
        pass
