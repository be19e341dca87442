"""Remote sync port.

The ledger store reports every local mutation through this interface and
receives remote changes through its ``apply_collection_snapshot`` and
``apply_document_snapshot`` operations. Implementations are fire-and-forget:
they must not raise back into the mutation that triggered them.

Remote state is last-writer-wins per document. Two collaborators editing the
same entity overwrite each other without a merge, and a delete racing an
update of the same id may resurrect or drop the record depending on arrival
order. A daily entry and the matching cash balance change travel as two
independent writes.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from busledger.domain.entities import Settings


class SyncPort(ABC):
    """Outbound half of the remote sync adapter."""

    @abstractmethod
    def push_entity(self, collection_name: str, entity: Any) -> None:
        """Persist one entity of a collection remotely."""
        pass

    @abstractmethod
    def push_removal(self, collection_name: str, entity_id: str) -> None:
        """Remove one entity of a collection remotely."""
        pass

    @abstractmethod
    def push_settings(self, settings: Settings) -> None:
        """Persist the settings document remotely."""
        pass

    @abstractmethod
    def push_cash_balance(self, cash_balance: Decimal) -> None:
        """Persist the cash balance document remotely."""
        pass


class NullSync(SyncPort):
    """Sync port used when no remote store is configured."""

    def push_entity(self, collection_name: str, entity: Any) -> None:
        pass

    def push_removal(self, collection_name: str, entity_id: str) -> None:
        pass

    def push_settings(self, settings: Settings) -> None:
        pass

    def push_cash_balance(self, cash_balance: Decimal) -> None:
        pass
