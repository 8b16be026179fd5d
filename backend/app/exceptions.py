"""Error taxonomy shared by the provider clients, adapters and aggregator."""


class TripGenieError(Exception):
    """Base class for errors raised by the pricing backend."""


class AuthError(TripGenieError):
    """Credentials missing, or the auth endpoint rejected the exchange."""


class ProviderError(TripGenieError):
    """Non-success provider response, undecodable body, or retry exhausted."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ValidationError(TripGenieError, ValueError):
    """Malformed candidate input; aborts the whole aggregation run."""
