"""Git access and the delimiter framing consumed by the resolver and parser.

Raw git output is reframed before parsing:

* name-status records become ``%<path>% #<status>#@delimiter@``
  (renames carry ``<old>\\t<new>`` in the path field);
* diff lines each get ``@delimiter@`` appended.

Name-status output is read with ``-z`` so paths containing whitespace or
newlines survive intact.
"""

from pathlib import Path
from typing import List, Union

from .changes.resolver import DELIMITER
from .exceptions import CommandExecutionError, SourceBranchNotFoundError
from .execution import CommandExecutor
from .logging_config import get_logger

logger = get_logger(__name__)

_GIT = ["git", "-c", "core.quotePath=false"]


def frame_status_output(raw: str) -> str:
    """Frame NUL-separated ``git diff --name-status -z`` output."""
    tokens = raw.split("\0")
    records: List[str] = []
    i = 0
    while i < len(tokens):
        status = tokens[i].strip()
        if not status:
            i += 1
            continue
        # Renames and copies are followed by two paths, everything else by one.
        width = 2 if status[0] in ("R", "C") else 1
        paths = tokens[i + 1 : i + 1 + width]
        i += 1 + width
        if len(paths) != width:
            logger.debug("Truncated name-status record for status %s", status)
            break
        path_field = "\t".join(paths)
        records.append(f"%{path_field}% #{status}#{DELIMITER}")
    return "".join(records)


def frame_diff_output(raw: str) -> str:
    """Append the delimiter to every diff line."""
    lines = raw.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return "".join(f"{line}{DELIMITER}" for line in lines)


class GitClient:
    """Collects framed status and diff output for one repository.

    In CI the local branches may not exist, so ``remote_prefix`` (usually
    ``"origin/"``) is put in front of both branch names.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        project_path: Union[str, Path],
        remote_prefix: str = "",
    ):
        self.executor = executor
        self.project_path = Path(project_path)
        self.remote_prefix = remote_prefix

    def _range(self, target_branch: str, source_branch: str) -> str:
        return f"{self.remote_prefix}{target_branch}...{self.remote_prefix}{source_branch}"

    async def current_branch(self) -> str:
        """Name of the checked-out branch.

        Raises:
            SourceBranchNotFoundError: If git fails or HEAD is detached
        """
        try:
            output = await self.executor.run(["git", "branch", "--show-current"], self.project_path)
        except CommandExecutionError as e:
            raise SourceBranchNotFoundError(str(self.project_path), reason=e.reason) from e
        branch = output.strip()
        if not branch:
            raise SourceBranchNotFoundError(str(self.project_path))
        return branch

    async def branch_name_status(self, target_branch: str, source_branch: str) -> str:
        raw = await self.executor.run(
            [*_GIT, "diff", "--name-status", "-z", self._range(target_branch, source_branch)],
            self.project_path,
        )
        return frame_status_output(raw)

    async def staged_name_status(self) -> str:
        raw = await self.executor.run(
            [*_GIT, "diff", "--name-status", "-z", "--cached"], self.project_path
        )
        return frame_status_output(raw)

    async def file_diff(self, target_branch: str, source_branch: str, path: str) -> str:
        """Framed diff of one path between the branches, else its staged diff."""
        raw = await self.executor.run(
            [*_GIT, "diff", self._range(target_branch, source_branch), "--", path],
            self.project_path,
        )
        if not raw.strip():
            return await self.staged_file_diff(path)
        return frame_diff_output(raw)

    async def staged_file_diff(self, path: str) -> str:
        raw = await self.executor.run([*_GIT, "diff", "--cached", "--", path], self.project_path)
        return frame_diff_output(raw)
