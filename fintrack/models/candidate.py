from typing import Optional

from pydantic import BaseModel, ConfigDict

UNCATEGORIZED = "Uncategorized"


class Candidate(BaseModel):
    """Structured guess produced from a free-text transaction description."""

    model_config = ConfigDict(allow_inf_nan=False)

    amount: Optional[float] = None
    currency: Optional[str] = None
    category: str = UNCATEGORIZED
    description: str = ""
    date: Optional[str] = None  # YYYY-MM-DD
    confidence: float = 0.0
    rawText: Optional[str] = None
