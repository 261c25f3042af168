class FintrackError(Exception):
    """Base class for errors raised by fintrack."""


class TransactionNotFoundError(FintrackError, LookupError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


class TransactionAccessError(FintrackError, PermissionError):
    def __init__(self, transaction_id: str, owner: str) -> None:
        super().__init__(f"Transaction {transaction_id} is not owned by {owner}")
        self.transaction_id = transaction_id
        self.owner = owner


class CandidateParseError(FintrackError, ValueError):
    """The inference service answered, but not with a usable candidate."""


class LLMUnavailableError(FintrackError, RuntimeError):
    """The inference service could not be reached or refused the call."""
