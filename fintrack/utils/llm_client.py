import time
from typing import Any, Optional

import httpx
from loguru import logger

from fintrack.config import settings
from fintrack.core.errors import LLMUnavailableError

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class LLMClient:
    """
    Gemini generateContent wrapper with logging.

    ask(prompt: str) -> str
    - one attempt, no retry; callers decide what a failure means
    - timeout from LLM_TIMEOUT_S unless given
    - raises LLMUnavailableError when no API key is configured
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = settings.GOOGLE_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.timeout = settings.LLM_TIMEOUT_S if timeout is None else timeout
        self._transport = transport

    async def ask(self, prompt: str) -> str:
        if not self.api_key:
            logger.warning("LLMClient.ask called without GOOGLE_API_KEY")
            raise LLMUnavailableError("GOOGLE_API_KEY is not configured")

        logger.info("Gemini call model={}", self.model)
        t0 = time.time()
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0},
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                GEMINI_API_URL.format(model=self.model),
                params={"key": self.api_key},
                json=payload,
            )
        resp.raise_for_status()
        out = _response_text(resp.json())
        logger.info("Gemini response chars={} latency_s={:.2f}", len(out), time.time() - t0)
        return out


def _response_text(body: Any) -> str:
    candidates = body.get("candidates", []) if isinstance(body, dict) else []
    if not candidates:
        raise LLMUnavailableError("Gemini returned no candidates")
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(p.get("text", "") for p in parts)
