"""Exception hierarchy for Code Styler."""

from .analysis import (
    AnalysisError,
    CommandExecutionError,
    SourceBranchNotFoundError,
)
from .base import CodeStylerError
from .config import (
    ConfigFileError,
    ConfigurationError,
    InvalidConfigError,
)
from .transport import (
    ReceiveCancelledError,
    ReceiveDecodeError,
    ReceiveError,
    SendTimeoutError,
    TransportError,
)

__all__ = [
    "CodeStylerError",
    "AnalysisError",
    "CommandExecutionError",
    "SourceBranchNotFoundError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "TransportError",
    "SendTimeoutError",
    "ReceiveError",
    "ReceiveDecodeError",
    "ReceiveCancelledError",
]
