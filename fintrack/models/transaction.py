from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

INCOME_CATEGORY = "income"
DEFAULT_CURRENCY = "USD"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # naive datetimes (e.g. read back from SQLite) are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_income(category: Optional[str]) -> bool:
    return category is not None and category.lower() == INCOME_CATEGORY


class Transaction(BaseModel):
    id: Optional[str] = None  # assigned by the store on insert
    owner: str
    amount: float
    currency: str = DEFAULT_CURRENCY
    category: Optional[str] = None
    description: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)
    rawText: Optional[str] = None
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    @field_validator("date", "createdAt", "updatedAt")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class TransactionCreate(BaseModel):
    """Body of ``POST /api/transactions``; a parse candidate is accepted as-is."""

    model_config = ConfigDict(allow_inf_nan=False)

    amount: float
    currency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    rawText: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def _currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().upper()

    def to_transaction(self, owner: str) -> Transaction:
        now = utcnow()
        return Transaction(
            owner=owner,
            amount=self.amount,
            currency=self.currency or DEFAULT_CURRENCY,
            category=self.category,
            description=self.description,
            date=self.date or now,
            rawText=self.rawText,
            createdAt=now,
            updatedAt=now,
        )


# Fields a partial update may touch; owner, id, rawText and timestamps are fixed.
UPDATABLE_FIELDS = ("amount", "currency", "category", "description", "date")


class TransactionUpdate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    amount: Optional[float] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None

    def changes(self) -> dict:
        """Fields the caller actually supplied; ``null`` keeps the stored value."""
        data = self.model_dump(exclude_unset=True)
        out = {k: v for k, v in data.items() if v is not None}
        if "date" in out:
            out["date"] = as_utc(out["date"])
        if "currency" in out:
            out["currency"] = out["currency"].strip().upper() or DEFAULT_CURRENCY
        return out
