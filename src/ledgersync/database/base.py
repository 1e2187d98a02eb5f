"""Abstract database interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from ledgersync.domain.entities import AccountMapping


class Database(ABC):
    """Abstract database interface for ledgersync."""

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

    # Account mapping operations
    @abstractmethod
    def list_mappings(self, integration: str) -> list[AccountMapping]:
        """List persisted mappings for one integration, in no guaranteed order."""
        pass

    @abstractmethod
    def list_integrations(self) -> list[str]:
        """List integration tags that have at least one mapping."""
        pass

    @abstractmethod
    def replace_all_mappings(self, integration: str, mappings: list[AccountMapping]) -> None:
        """Replace every mapping of an integration with the given set.

        Implementations must apply the delete and the inserts in a single
        transaction: either the new set is fully visible afterwards or the
        previous one is left untouched.
        """
        pass
