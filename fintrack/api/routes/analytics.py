"""
fintrack: Analytics API Routes
Summary, spending by category and monthly trends for the caller's transactions.
"""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from fintrack.api.deps import get_analytics_service, get_current_user_id
from fintrack.core.analytics import DEFAULT_PERIOD, AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/summary")
async def get_summary(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    try:
        view = service.summary(user_id)
    except Exception as e:
        logger.exception("Summary failed owner={}", user_id)
        raise HTTPException(status_code=500, detail="Failed to calculate summary") from e
    return {"success": True, **view}


@router.get("/categories")
async def get_categories(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    try:
        view = service.categories(user_id)
    except Exception as e:
        logger.exception("Category breakdown failed owner={}", user_id)
        raise HTTPException(status_code=500, detail="Failed to calculate category spending") from e
    return {"success": True, **view}


@router.get("/trends")
async def get_trends(
    period: str = Query(default=DEFAULT_PERIOD),
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """Buckets are monthly for every ``period``; see ``granularity`` in the response."""
    try:
        view = service.trends(user_id, period)
    except Exception as e:
        logger.exception("Trends failed owner={}", user_id)
        raise HTTPException(status_code=500, detail="Failed to calculate trends") from e
    return {"success": True, **view}
