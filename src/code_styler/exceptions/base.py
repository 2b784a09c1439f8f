"""Root of the Code Styler exception hierarchy."""

from typing import Any, Dict, Mapping, Optional


def _render(value: Any) -> str:
    # argv lists read best the way they were typed.
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


class CodeStylerError(Exception):
    """Base exception for all Code Styler errors.

    ``details`` keep their native values (return codes, argv lists, sizes)
    and are rendered after the message as ``(key=value, ...)``; entries that
    are None are dropped. ``hint`` is the next step the CLI prints below the
    error line.
    """

    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {
            key: value for key, value in (details or {}).items() if value is not None
        }
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={_render(value)}" for key, value in self.details.items())
        return f"{self.message} ({rendered})"
