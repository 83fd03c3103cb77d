"""
Transaction Store

The single source of truth for the transaction list and the selected
user profile.

DESIGN DECISION: Every mutation builds a complete new list, writes it
to storage, and only then swaps it in. Subscribers are notified after
the swap so they can recompute everything derived from the list. There
is one logical writer (the user), so no locking is needed.
"""

import json
from typing import Any, Callable, Iterable, Iterator, Optional, Union
from uuid import uuid4

from finsight.config import get_settings
from finsight.logger import get_logger
from finsight.models.transaction import Transaction, UserProfile
from finsight.services.storage import KeyValueStorage, StorageError
from finsight.validation import filter_valid


logger = get_logger(__name__)

Listener = Callable[[tuple[Transaction, ...]], None]
TransactionInput = Union[dict[str, Any], Transaction]


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class TransactionNotFoundError(StoreError):
    """No transaction with the requested id."""
    pass


class DuplicateTransactionError(StoreError):
    """Two transactions share an id."""
    pass


def _field_values(values: TransactionInput) -> dict[str, Any]:
    """Normalize input to python field names (accepts camelCase aliases)."""
    if isinstance(values, Transaction):
        return values.model_dump()

    alias_to_field = {
        info.alias: name
        for name, info in Transaction.model_fields.items()
        if info.alias
    }
    return {alias_to_field.get(key, key): value for key, value in values.items()}


class TransactionStore:
    """
    Ordered-by-insertion set of transactions keyed by id, persisted
    through an injected key-value storage.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        transactions_key: Optional[str] = None,
        user_type_key: Optional[str] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        settings = get_settings().storage
        self._storage = storage
        self._transactions_key = transactions_key or settings.transactions_key
        self._user_type_key = user_type_key or settings.user_type_key
        self._id_factory = id_factory or (lambda: str(uuid4()))

        self._transactions: tuple[Transaction, ...] = ()
        self._user_type: Optional[UserProfile] = None
        self._issued_ids: set[str] = set()
        self._listeners: list[Listener] = []

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Immutable snapshot of the current list."""
        return self._transactions

    @property
    def user_type(self) -> Optional[UserProfile]:
        return self._user_type

    def snapshot(self) -> list[Transaction]:
        """A copy of the list that callers may reorder freely."""
        return list(self._transactions)

    def get(self, transaction_id: str) -> Transaction:
        for t in self._transactions:
            if t.id == transaction_id:
                return t
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return any(t.id == transaction_id for t in self._transactions)

    # -------------------------------------------------------------------------
    # Subscribers
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback run after every change.

        Returns a function that removes the callback.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._transactions)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> tuple[Transaction, ...]:
        """
        Replace in-memory state with what storage holds.

        Unreadable data starts the store empty; individual invalid
        records are skipped. Both cases are logged.
        """
        transactions: list[Transaction] = []
        try:
            raw = self._storage.get(self._transactions_key)
            raw_user_type = self._storage.get(self._user_type_key)
        except StorageError as e:
            logger.error("transactions_load_failed", key=self._transactions_key, error=str(e))
            raw, raw_user_type = None, None

        if raw:
            try:
                records = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.error("transactions_load_failed", key=self._transactions_key, error=str(e))
                records = []
            if not isinstance(records, list):
                logger.error("transactions_load_failed", key=self._transactions_key, error="not a list")
                records = []
            transactions = self._dedupe(filter_valid(records))

        self._user_type = self._parse_user_type(raw_user_type)
        self._transactions = tuple(transactions)
        self._issued_ids.update(t.id for t in transactions)

        logger.info("store_loaded", count=len(transactions), user_type=self._user_type)
        self._notify()
        return self._transactions

    def save(self) -> None:
        """Write the current list; an empty list removes the key."""
        self._write(self._transactions)

    def _write(self, transactions: Iterable[Transaction]) -> None:
        records = [t.to_record() for t in transactions]
        if records:
            self._storage.put(self._transactions_key, json.dumps(records))
        else:
            self._storage.clear(self._transactions_key)

    @staticmethod
    def _parse_user_type(raw: Optional[str]) -> Optional[UserProfile]:
        if not raw:
            return None
        try:
            return UserProfile(raw)
        except ValueError:
            logger.warning("unknown_user_type", value=raw)
            return None

    @staticmethod
    def _dedupe(transactions: list[Transaction]) -> list[Transaction]:
        seen: set[str] = set()
        unique = []
        for t in transactions:
            if t.id in seen:
                logger.warning("duplicate_transaction_skipped", transaction_id=t.id)
                continue
            seen.add(t.id)
            unique.append(t)
        return unique

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def mutate(
        self,
        change: Callable[[list[Transaction]], Iterable[Transaction]],
    ) -> tuple[Transaction, ...]:
        """
        Apply a full-list replacement.

        The change receives a copy of the current list and returns the
        new one. Storage is written before the new list becomes current,
        so a failed write leaves the store unchanged.

        Raises:
            DuplicateTransactionError: If the new list repeats an id
            StorageError: If the write fails
        """
        updated = tuple(change(self.snapshot()))
        self._check_unique(updated)

        self._write(updated)
        self._transactions = updated
        self._issued_ids.update(t.id for t in updated)
        self._notify()
        return self._transactions

    @staticmethod
    def _check_unique(transactions: tuple[Transaction, ...]) -> None:
        ids = [t.id for t in transactions]
        if len(ids) != len(set(ids)):
            raise DuplicateTransactionError("Transaction ids must be unique")

    def _new_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                return candidate

    def add(self, values: TransactionInput) -> Transaction:
        """Create a transaction with a fresh id (any id in values is ignored)."""
        fields = _field_values(values)
        fields["id"] = self._new_id()
        transaction = Transaction.model_validate(fields)

        self.mutate(lambda current: current + [transaction])
        logger.info(
            "transaction_added",
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=transaction.amount,
        )
        return transaction

    def update(self, transaction_id: str, values: TransactionInput) -> Transaction:
        """
        Replace a transaction wholesale, keeping its id.

        Fields missing from values keep their current value.
        """
        existing = self.get(transaction_id)
        fields = {**existing.model_dump(), **_field_values(values), "id": transaction_id}
        replacement = Transaction.model_validate(fields)

        self.mutate(lambda current: [replacement if t.id == transaction_id else t for t in current])
        logger.info("transaction_updated", transaction_id=transaction_id)
        return replacement

    def delete(self, transaction_id: str) -> Transaction:
        removed = self.get(transaction_id)
        self.mutate(lambda current: [t for t in current if t.id != transaction_id])
        logger.info("transaction_deleted", transaction_id=transaction_id)
        return removed

    def replace_all(self, transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
        """Swap in a whole new list (used by restore)."""
        result = self.mutate(lambda current: list(transactions))
        logger.info("transactions_replaced", count=len(result))
        return result

    def restore(
        self,
        transactions: Iterable[Transaction],
        user_type: Optional[UserProfile] = None,
    ) -> tuple[Transaction, ...]:
        """
        Swap in a whole new list and, when given, a new profile.

        This is one change: subscribers are notified once. The profile is
        written first and put back if the list write then fails, so a
        failure leaves both storage and memory as they were.

        Raises:
            DuplicateTransactionError: If the new list repeats an id
            StorageError: If a write fails
        """
        updated = tuple(transactions)
        self._check_unique(updated)

        previous_user_type = self._user_type
        if user_type is not None:
            self._storage.put(self._user_type_key, user_type.value)
        try:
            self._write(updated)
        except StorageError:
            if user_type is not None:
                self._write_user_type(previous_user_type)
            raise

        self._transactions = updated
        self._issued_ids.update(t.id for t in updated)
        if user_type is not None:
            self._user_type = user_type
        logger.info(
            "store_restored",
            count=len(updated),
            user_type=self._user_type.value if self._user_type else None,
        )
        self._notify()
        return self._transactions

    def _write_user_type(self, user_type: Optional[UserProfile]) -> None:
        if user_type is None:
            self._storage.clear(self._user_type_key)
        else:
            self._storage.put(self._user_type_key, user_type.value)

    def set_user_type(self, user_type: Optional[UserProfile]) -> None:
        """Select (or with None, forget) the user profile."""
        self._write_user_type(user_type)
        self._user_type = user_type
        logger.info("user_type_changed", user_type=user_type.value if user_type else None)
        self._notify()

    def clear(self) -> None:
        """
        Delete every transaction and the profile selection.

        Memory follows each key as it is removed, and subscribers are
        notified once even when the second removal fails.
        """
        try:
            self._storage.clear(self._transactions_key)
            self._transactions = ()
            self._storage.clear(self._user_type_key)
            self._user_type = None
        finally:
            self._notify()
        logger.info("store_cleared")
