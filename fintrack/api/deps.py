from typing import Optional

from fastapi import Depends, Header, HTTPException
from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger

from fintrack.config import settings
from fintrack.core.analytics import AnalyticsService
from fintrack.core.transactions import TransactionService
from fintrack.database.transaction_store import TransactionStore, build_transaction_store
from fintrack.pipelines.text_parser import ExtractionChain, build_extractor
from fintrack.utils.llm_client import LLMClient

_store: Optional[TransactionStore] = None


def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    """Resolve the caller from an already-issued bearer token (claim ``userId``)."""
    parts = (authorization or "").split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Access token expired")
    except JWTError as e:
        logger.info("Rejected bearer token err={}", str(e))
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("userId")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return str(user_id)


def get_transaction_store() -> TransactionStore:
    global _store
    if _store is None:
        _store = build_transaction_store()
    return _store


def get_transaction_service(store: TransactionStore = Depends(get_transaction_store)) -> TransactionService:
    return TransactionService(store)


def get_analytics_service(store: TransactionStore = Depends(get_transaction_store)) -> AnalyticsService:
    return AnalyticsService(store)


def get_extractor() -> ExtractionChain:
    return build_extractor(LLMClient())
