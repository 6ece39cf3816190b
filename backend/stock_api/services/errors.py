# services/errors.py

class StockApiError(Exception):
    """
    Base class for failures handed back to API callers.

    `kind` names the error for clients; `detail` is the human readable part.
    """

    kind = "InternalError"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        # graphql-core copies these onto the GraphQL error
        self.extensions = {"kind": self.kind}


class InvalidTicker(StockApiError):
    kind = "InvalidTicker"


class UpstreamUnavailable(StockApiError):
    """The quote provider failed: unknown ticker, network error or rate limit."""

    kind = "UpstreamUnavailable"


class QuoteUnavailable(UpstreamUnavailable):
    """Raised by the quote adapter; clients see it as UpstreamUnavailable."""


class DuplicateSymbol(StockApiError):
    kind = "DuplicateSymbol"


class AlreadyTracked(DuplicateSymbol):
    kind = "AlreadyTracked"


class NotFound(StockApiError):
    kind = "NotFound"


class SymbolNotTracked(NotFound):
    """Raised when price history is written for a symbol missing from the watchlist."""

    kind = "SymbolNotTracked"


class StoreError(StockApiError):
    kind = "StoreError"
