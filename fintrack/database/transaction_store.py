from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from sqlalchemy import delete, insert, select, update

from fintrack.core.errors import TransactionNotFoundError
from fintrack.database.schema import transactions
from fintrack.database.sql_client import SqlClient
from fintrack.models.transaction import UPDATABLE_FIELDS, Transaction, utcnow


class TransactionStore:
    """
    Persistence for transaction records.
    Callers scope every operation by owner; the store does not authorise.
    """

    backend = "abstract"

    def find_by_owner(self, owner: str) -> List[Transaction]:
        raise NotImplementedError

    def insert(self, record: Transaction) -> Transaction:
        raise NotImplementedError

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        raise NotImplementedError

    def update(self, transaction_id: str, partial: Mapping[str, Any]) -> Transaction:
        raise NotImplementedError

    def delete(self, transaction_id: str) -> None:
        raise NotImplementedError


def _new_id() -> str:
    return uuid.uuid4().hex


def _checked(partial: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(partial) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
    return dict(partial)


@dataclass
class MemoryTransactionStore(TransactionStore):
    items: Dict[str, Transaction] = field(default_factory=dict)

    backend = "memory"

    def find_by_owner(self, owner: str) -> List[Transaction]:
        return [t.model_copy() for t in self.items.values() if t.owner == owner]

    def insert(self, record: Transaction) -> Transaction:
        stored = record.model_copy(update={"id": _new_id()})
        self.items[stored.id] = stored
        return stored.model_copy()

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        t = self.items.get(transaction_id)
        return t.model_copy() if t else None

    def update(self, transaction_id: str, partial: Mapping[str, Any]) -> Transaction:
        current = self.items.get(transaction_id)
        if current is None:
            raise TransactionNotFoundError(transaction_id)
        changes = _checked(partial)
        changes["updatedAt"] = utcnow()
        # re-validate so dates stay normalised
        stored = Transaction(**{**current.model_dump(), **changes})
        self.items[transaction_id] = stored
        return stored.model_copy()

    def delete(self, transaction_id: str) -> None:
        if self.items.pop(transaction_id, None) is None:
            raise TransactionNotFoundError(transaction_id)


_COLUMNS = {
    "id": "id",
    "owner": "owner",
    "amount": "amount",
    "currency": "currency",
    "category": "category",
    "description": "description",
    "date": "date",
    "rawText": "raw_text",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _to_row(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {_COLUMNS[k]: v for k, v in values.items()}


def _from_row(row: Mapping[str, Any]) -> Transaction:
    return Transaction(**{name: row[col] for name, col in _COLUMNS.items()})


class SqlTransactionStore(TransactionStore):
    backend = "sql"

    def __init__(self, client: SqlClient) -> None:
        self.client = client

    def find_by_owner(self, owner: str) -> List[Transaction]:
        stmt = select(transactions).where(transactions.c.owner == owner).order_by(transactions.c.created_at)
        with self.client.session() as s:
            rows = s.execute(stmt).mappings().all()
        return [_from_row(r) for r in rows]

    def insert(self, record: Transaction) -> Transaction:
        stored = record.model_copy(update={"id": _new_id()})
        with self.client.session() as s:
            s.execute(insert(transactions).values(**_to_row(stored.model_dump())))
        return stored

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        stmt = select(transactions).where(transactions.c.id == transaction_id)
        with self.client.session() as s:
            row = s.execute(stmt).mappings().first()
        return _from_row(row) if row else None

    def update(self, transaction_id: str, partial: Mapping[str, Any]) -> Transaction:
        changes = _checked(partial)
        changes["updatedAt"] = utcnow()
        stmt = update(transactions).where(transactions.c.id == transaction_id).values(**_to_row(changes))
        with self.client.session() as s:
            result = s.execute(stmt)
            if result.rowcount == 0:
                raise TransactionNotFoundError(transaction_id)
        updated = self.find_by_id(transaction_id)
        if updated is None:
            # deleted between the write and the read-back
            raise TransactionNotFoundError(transaction_id)
        return updated

    def delete(self, transaction_id: str) -> None:
        with self.client.session() as s:
            result = s.execute(delete(transactions).where(transactions.c.id == transaction_id))
            if result.rowcount == 0:
                raise TransactionNotFoundError(transaction_id)


def build_transaction_store(database_url: Optional[str] = None) -> TransactionStore:
    try:
        client = SqlClient(database_url)
        client.init_schema()
        return SqlTransactionStore(client)
    except Exception as e:
        logger.warning("Database not ready; using in-memory transaction store. err={}", str(e))
        return MemoryTransactionStore()
