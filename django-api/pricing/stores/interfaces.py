"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from pricing.domain import RuleTableSnapshot


class RuleTableStore(ABC):
    """Interface for reading pricing rule tables."""

    @abstractmethod
    def load_snapshot(self, fresh: bool = False) -> RuleTableSnapshot:
        """Return the current rule tables as one immutable snapshot.

        With `fresh` the tables are read from their source of record,
        bypassing any cache, so usage counts are current.

        Raises:
            ConfigurationError: If the stored tables cannot form a snapshot.
        """
        ...

    @abstractmethod
    def claim_discount_use(self, code: str) -> bool:
        """Atomically consume one use of a discount code.

        Returns False when the code is unknown or its usage cap is reached.
        """
        ...
