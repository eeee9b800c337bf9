from typing import Optional


class ChangeGateError(Exception):
    """Base exception for change gate failures.

    Attributes:
        message: Human-readable error description
        diagnostic: Technical diagnostic information for debugging
    """
    def __init__(self, message: str, diagnostic: Optional[str] = None):
        self.message = message
        self.diagnostic = diagnostic
        super().__init__(message)


class NoResponseError(ChangeGateError):
    """Raised by HTTP adapters when the request produced no response at all.

    Covers connection failures and client-side timeouts. Error status codes
    are responses and never raise this.

    Attributes:
        url: Requested URL
    """
    def __init__(self, url: str, diagnostic: Optional[str] = None):
        self.url = url
        super().__init__(
            message=f"No response received from {url}", diagnostic=diagnostic
        )


class ChangeGateConfigurationError(ChangeGateError):
    """Raised when runtime inputs cannot form a valid poll request."""
