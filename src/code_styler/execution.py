"""Run external commands (git, linters) via asyncio subprocesses."""

import asyncio
from pathlib import Path
from typing import AsyncIterator, Sequence, Union

from .exceptions import CommandExecutionError
from .logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class CommandExecutor:
    """Executes argv-style commands in a working directory.

    ``run`` captures the whole output, ``stream`` yields it line by line.
    Both raise ``CommandExecutionError`` when the program cannot be started,
    and, with ``check=True``, when it exits non-zero.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def _spawn(
        self, argv: Sequence[str], cwd: PathLike, stderr: int = asyncio.subprocess.PIPE
    ) -> asyncio.subprocess.Process:
        logger.debug("Running %s in %s", " ".join(argv), cwd)
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=stderr,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise CommandExecutionError(argv, f"cannot launch: {e}") from e

    async def run(self, argv: Sequence[str], cwd: PathLike, check: bool = True) -> str:
        """Run a command and return its decoded stdout."""
        proc = await self._spawn(argv, cwd)
        stdout, stderr = await proc.communicate()
        if check and proc.returncode != 0:
            raise CommandExecutionError(
                argv,
                "non-zero exit",
                returncode=proc.returncode,
                stderr=stderr.decode(self.encoding, errors="replace"),
            )
        return stdout.decode(self.encoding, errors="replace")

    async def stream(
        self, argv: Sequence[str], cwd: PathLike, check: bool = False
    ) -> AsyncIterator[str]:
        """Yield stdout lines (without line endings) as the command produces them."""
        # stderr is merged so linters reporting there are not lost.
        proc = await self._spawn(argv, cwd, stderr=asyncio.subprocess.STDOUT)
        assert proc.stdout is not None
        finished = False
        try:
            async for raw in proc.stdout:
                yield raw.decode(self.encoding, errors="replace").rstrip("\r\n")
            finished = True
        finally:
            if not finished and proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
            returncode = await proc.wait()
        if check and returncode != 0:
            raise CommandExecutionError(argv, "non-zero exit", returncode=returncode)
