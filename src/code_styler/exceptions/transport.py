"""Exceptions raised while sending or receiving findings between processes."""

from typing import Optional

from .base import CodeStylerError


class TransportError(CodeStylerError):
    """Base class for finding transport errors."""
    pass


class SendTimeoutError(TransportError):
    """Raised when no receiver accepted the findings before the deadline."""

    def __init__(self, address: str, timeout_seconds: float):
        super().__init__(
            f"No receiver listening at {address}",
            details={"address": address, "timeout_seconds": timeout_seconds},
            hint="start 'code-styler receive' before sending",
        )
        self.address = address
        self.timeout_seconds = timeout_seconds


class ReceiveError(TransportError):
    """Base class for errors raised by a pending receive."""
    pass


class ReceiveDecodeError(ReceiveError):
    """Raised when a received payload is not a valid finding list."""

    def __init__(self, reason: str, payload_size: Optional[int] = None):
        super().__init__(
            "Received findings could not be decoded",
            details={"reason": reason, "payload_size": payload_size},
        )
        self.reason = reason
        self.payload_size = payload_size


class ReceiveCancelledError(ReceiveError):
    """Raised when a pending receive is cancelled through its token."""

    def __init__(self):
        super().__init__("Receiving findings was cancelled")
