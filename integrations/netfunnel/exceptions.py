from typing import Optional


class NetFunnelError(Exception):
    """Base class for every error raised by the NetFunnel client."""


class ConnectivityError(NetFunnelError):
    """The gate could not be reached or the response could not be read."""
    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"failed to connect to the netfunnel server (in {operation}): {reason}")


class UnexpectedStatusError(NetFunnelError):
    """The gate answered with a status code outside the protocol."""
    def __init__(self, status_code: int, operation: str):
        self.status_code = status_code
        self.operation = operation
        super().__init__(f"unexpected HTTP status code in {operation} (HTTP {status_code})")


class DecodeError(NetFunnelError):
    """The response body could not be turned into a Ticket."""
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(f"failed to parse response body: {message}")


class WaitlistTimeoutError(NetFunnelError):
    """
    Admission did not arrive within `max_wait` seconds.

    The ticket was already issued, so it is attached for the caller to
    dispatch.
    """
    def __init__(self, ticket, max_wait: float):
        self.ticket = ticket
        self.max_wait = max_wait
        super().__init__(f"not admitted within {max_wait}s (key={ticket.key})")
