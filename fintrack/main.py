from __future__ import annotations

import sys
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from fintrack.api.deps import get_transaction_store
from fintrack.api.router import api_router
from fintrack.config import settings
from fintrack.core.errors import TransactionAccessError, TransactionNotFoundError
from fintrack.database.transaction_store import SqlTransactionStore, TransactionStore


app = FastAPI(
    title="fintrack",
    version="1.0.0",
    description="Personal finance tracker: free-text transaction parsing and spending analytics",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


def _envelope(status_code: int, message: Any, headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, exc.detail, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        problems.append(f"{field}: {err.get('msg', 'invalid')}")
    return _envelope(422, "Invalid request - " + "; ".join(problems))


@app.exception_handler(TransactionNotFoundError)
async def _not_found(request: Request, exc: TransactionNotFoundError) -> JSONResponse:
    return _envelope(404, "Transaction not found")


@app.exception_handler(TransactionAccessError)
async def _forbidden(request: Request, exc: TransactionAccessError) -> JSONResponse:
    return _envelope(403, "Forbidden")


@app.on_event("startup")
async def _startup() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())
    store = get_transaction_store()
    logger.info("fintrack started env={} store={}", settings.APP_ENV, store.backend)


@app.get("/health")
async def health(store: TransactionStore = Depends(get_transaction_store)) -> Dict[str, Any]:
    status: Dict[str, Any] = {"ok": True, "service": "fintrack-backend"}

    # Database: True if connected, "memory" if using the in-memory fallback
    if isinstance(store, SqlTransactionStore):
        try:
            status["database"] = store.client.ping()
        except Exception as e:
            logger.warning("Health check: database unreachable err={}", str(e))
            status["database"] = False
            status["ok"] = False
    else:
        status["database"] = "memory"

    # Gemini: True if key set, "fallback" if every parse will take the regex path
    status["gemini"] = True if settings.llm_enabled else "fallback"

    return status


def run() -> None:
    import uvicorn

    uvicorn.run("fintrack.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
