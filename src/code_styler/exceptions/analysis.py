"""Analysis-related exceptions: branch resolution, command execution."""

from typing import Optional, Sequence

from .base import CodeStylerError


class AnalysisError(CodeStylerError):
    """Base class for analysis-related errors."""
    pass


class SourceBranchNotFoundError(AnalysisError):
    """Raised when the current branch name cannot be determined."""

    def __init__(self, project_path: str, reason: str = "git branch --show-current returned nothing"):
        super().__init__(
            "Unable to determine the current branch",
            details={"project_path": project_path, "reason": reason},
            hint="check out a branch; detached HEAD has no name to compare",
        )
        self.project_path = project_path
        self.reason = reason


class CommandExecutionError(AnalysisError):
    """Raised when an external command cannot be launched or exits non-zero."""

    def __init__(
        self,
        argv: Sequence[str],
        reason: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(
            f"Command failed: {argv[0] if argv else ''}",
            details={
                "command": list(argv),
                "reason": reason,
                "returncode": returncode,
                "stderr": stderr.strip() or None,
            },
        )
        self.argv = list(argv)
        self.reason = reason
        self.returncode = returncode
        self.stderr = stderr
