"""
fintrack: Transaction API Routes
Free-text parsing plus owner-scoped CRUD.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel

from fintrack.api.deps import get_current_user_id, get_extractor, get_transaction_service
from fintrack.core.errors import FintrackError
from fintrack.core.transactions import TransactionService
from fintrack.models.transaction import TransactionCreate, TransactionUpdate
from fintrack.pipelines.text_parser import ExtractionChain

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


class ParseRequest(BaseModel):
    text: str


@router.post("/parse")
async def parse_transaction(
    req: ParseRequest,
    user_id: str = Depends(get_current_user_id),
    extractor: ExtractionChain = Depends(get_extractor),
) -> Dict[str, Any]:
    """Always answers 200; degraded parses carry a lower confidence."""
    parsed = await extractor.extract(req.text)
    return {"success": True, "message": "Transaction parsed successfully", "parsed": parsed}


@router.post("")
async def create_transaction(
    payload: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, Any]:
    try:
        transaction = service.create(user_id, payload)
    except Exception as e:
        logger.exception("Transaction create failed owner={}", user_id)
        raise HTTPException(status_code=500, detail="Transaction not added") from e
    return {"success": True, "message": "Transaction added successfully", "transaction": transaction}


@router.get("")
async def list_transactions(
    category: Optional[str] = None,
    q: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, Any]:
    try:
        items = service.list(user_id, category=category, q=q)
    except Exception as e:
        logger.exception("Transaction list failed owner={}", user_id)
        raise HTTPException(status_code=500, detail="Transactions not found") from e
    return {
        "success": True,
        "message": "No transactions found - returning empty list" if not items else "Transactions found successfully",
        "transactions": items,
    }


@router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, Any]:
    try:
        transaction = service.get(user_id, transaction_id)
    except FintrackError:
        raise
    except Exception as e:
        logger.exception("Transaction read failed id={}", transaction_id)
        raise HTTPException(status_code=500, detail="Transaction not found") from e
    return {"success": True, "message": "Transaction found successfully", "transaction": transaction}


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    patch: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, Any]:
    try:
        transaction = service.update(user_id, transaction_id, patch)
    except FintrackError:
        raise
    except Exception as e:
        logger.exception("Transaction update failed id={}", transaction_id)
        raise HTTPException(status_code=500, detail="Transaction not updated") from e
    return {"success": True, "message": "Transaction updated successfully", "transaction": transaction}


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> Dict[str, Any]:
    try:
        service.delete(user_id, transaction_id)
    except FintrackError:
        raise
    except Exception as e:
        logger.exception("Transaction delete failed id={}", transaction_id)
        raise HTTPException(status_code=500, detail="Transaction not deleted") from e
    return {"success": True, "message": "Transaction deleted successfully"}
