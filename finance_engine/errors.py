class FinanceEngineError(Exception):
    """Base class for errors raised by the aggregation engine."""


class StoreUnavailable(FinanceEngineError):
    """A Ledger Store query failed, so the whole aggregated view is unavailable."""

    def __init__(self, query: str, account_id=None, reason: str = ""):
        self.query = query
        self.account_id = account_id
        self.reason = reason
        where = f" for account {account_id}" if account_id is not None else ""
        message = f"Ledger store query '{query}' failed{where}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
