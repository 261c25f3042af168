from pydantic import BaseModel


class SummaryView(BaseModel):
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0


class CategoryTotal(BaseModel):
    category: str
    amount: float


class TrendPoint(BaseModel):
    date: str  # bucket label, YYYY-MM
    amount: float
