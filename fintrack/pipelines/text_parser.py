"""
Free text -> Candidate.

PrimaryExtraction asks Gemini for strict JSON; FallbackExtraction scans the text
for a dollar amount. ExtractionChain runs the primary and picks a fallback by
failure kind, so extraction never raises to its caller:

- inference output that is not a Candidate -> regex fallback, confidence 1.0,
  currency USD only when an amount was found
- inference call failed outright -> regex fallback, confidence 0.25,
  currency always USD
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from fintrack.core.errors import CandidateParseError
from fintrack.models.candidate import UNCATEGORIZED, Candidate
from fintrack.models.transaction import DEFAULT_CURRENCY

_AMOUNT_RE = re.compile(r"\$?([0-9]+(?:\.[0-9]{1,2})?)")

_PROMPT = """
Extract the following fields from the transaction description:
- amount (number, no currency symbol, e.g., $10.50 becomes 10.50)
- currency (USD if not mentioned)
- category (one word, e.g., Food, Transport, Shopping, Income, Other)
- description (short summary)
- date (ISO format YYYY-MM-DD if present, else null)
- confidence (float between 0 and 1)
- rawText (original text)

Respond ONLY with valid JSON, no explanations.

Transaction: "{text}"
"""


class TextGenerator(Protocol):
    async def ask(self, prompt: str) -> str: ...


Strategy = Callable[[str], Awaitable[Candidate]]


def build_prompt(text: str) -> str:
    return _PROMPT.format(text=text)


def strip_fences(text: str) -> str:
    t = text.strip()
    if t.startswith("```"):
        t = t[3:]
        if t.lower().startswith("json"):
            t = t[4:]
    if t.endswith("```"):
        t = t[:-3]
    return t.strip()


def parse_candidate(raw: str) -> Candidate:
    cleaned = strip_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise CandidateParseError(f"Inference output is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise CandidateParseError(f"Inference output is a JSON {type(data).__name__}, expected an object")

    # null means "not reported" for fields that have a default
    data = {k: v for k, v in data.items() if not (v is None and k in {"category", "description", "confidence"})}
    try:
        return Candidate.model_validate(data)
    except ValidationError as e:
        raise CandidateParseError(f"Inference output does not fit a candidate: {e}") from e


def find_amount(text: str) -> Optional[float]:
    m = _AMOUNT_RE.search(text or "")
    return float(m.group(1)) if m else None


class PrimaryExtraction:
    def __init__(self, llm: TextGenerator) -> None:
        self.llm = llm

    async def __call__(self, text: str) -> Candidate:
        raw = await self.llm.ask(build_prompt(text))
        logger.debug("Inference response: {}", raw)
        return parse_candidate(raw)


@dataclass(frozen=True)
class FallbackExtraction:
    confidence: float
    always_usd: bool

    def __call__(self, text: str) -> Candidate:
        amount = find_amount(text)
        currency = DEFAULT_CURRENCY if (amount is not None or self.always_usd) else None
        return Candidate(
            amount=amount,
            currency=currency,
            category=UNCATEGORIZED,
            description=text,
            date=None,
            confidence=self.confidence,
        )


ON_UNPARSEABLE_OUTPUT = FallbackExtraction(confidence=1.0, always_usd=False)
ON_SERVICE_FAILURE = FallbackExtraction(confidence=0.25, always_usd=True)


class ExtractionChain:
    def __init__(
        self,
        primary: Strategy,
        on_unparseable: Callable[[str], Candidate] = ON_UNPARSEABLE_OUTPUT,
        on_failure: Callable[[str], Candidate] = ON_SERVICE_FAILURE,
    ) -> None:
        self.primary = primary
        self.on_unparseable = on_unparseable
        self.on_failure = on_failure

    async def extract(self, text: str) -> Candidate:
        try:
            candidate = await self.primary(text)
        except CandidateParseError as e:
            fallback = self.on_unparseable(text)
            logger.warning("Unparseable inference output; regex fallback amount={} err={}", fallback.amount, str(e))
            return fallback
        except Exception as e:
            fallback = self.on_failure(text)
            logger.warning("Inference call failed; regex fallback amount={} err={!r}", fallback.amount, e)
            return fallback
        logger.info("Parsed transaction text category={} confidence={}", candidate.category, candidate.confidence)
        return candidate

    __call__ = extract


def build_extractor(llm: TextGenerator) -> ExtractionChain:
    return ExtractionChain(PrimaryExtraction(llm))
