from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from fintrack.core.errors import TransactionAccessError, TransactionNotFoundError
from fintrack.database.transaction_store import TransactionStore
from fintrack.models.transaction import Transaction, TransactionCreate, TransactionUpdate


def _matches(t: Transaction, category: Optional[str], q: Optional[str]) -> bool:
    if category and t.category != category:
        return False
    if q:
        needle = q.lower()
        haystacks = [t.description or "", t.category or ""]
        return any(needle in h.lower() for h in haystacks)
    return True


@dataclass
class TransactionService:
    """Owner-scoped CRUD. Any id the caller does not own is rejected, never ignored."""

    store: TransactionStore

    def create(self, owner: str, payload: TransactionCreate) -> Transaction:
        stored = self.store.insert(payload.to_transaction(owner))
        logger.info("Transaction created id={} owner={}", stored.id, owner)
        return stored

    def list(self, owner: str, category: Optional[str] = None, q: Optional[str] = None) -> List[Transaction]:
        return [t for t in self.store.find_by_owner(owner) if _matches(t, category, q)]

    def get(self, owner: str, transaction_id: str) -> Transaction:
        t = self.store.find_by_id(transaction_id)
        if t is None:
            raise TransactionNotFoundError(transaction_id)
        if t.owner != owner:
            logger.warning("Ownership check failed id={} caller={}", transaction_id, owner)
            raise TransactionAccessError(transaction_id, owner)
        return t

    def update(self, owner: str, transaction_id: str, patch: TransactionUpdate) -> Transaction:
        current = self.get(owner, transaction_id)
        changes = patch.changes()
        if not changes:
            return current
        updated = self.store.update(transaction_id, changes)
        logger.info("Transaction updated id={} fields={}", transaction_id, sorted(changes))
        return updated

    def delete(self, owner: str, transaction_id: str) -> None:
        self.get(owner, transaction_id)
        self.store.delete(transaction_id)
        logger.info("Transaction deleted id={} owner={}", transaction_id, owner)
