"""Analysis entry points: collect changes, diff them, run the checkers.

``CodeStylerService`` ties the git collaborator, the resolver, the diff
parser, the orchestrator and the relevance filter together for the two
operating modes: a local run against the checked-out branch and a CI run
for a merge request.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .changes.models import ChangeSet
from .changes.resolver import resolve_all
from .checkers.base import DiffChecker, MergeRequest, MergeRequestChecker
from .config import StylerConfig
from .diff.models import FileDiff
from .diff.parser import parse
from .execution import CommandExecutor
from .findings.models import FileFinding, Finding, LineFinding
from .findings.relevance import filter_relevant
from .logging_config import get_logger
from .orchestrator import diffable_paths, exclude_paths, run_checkers, run_merge_request_checkers
from .vcs import GitClient

logger = get_logger(__name__)

CI_REMOTE_PREFIX = "origin/"


class DiffSource(str, Enum):
    """Which comparisons feed the change set."""

    STAGED = "staged"
    BRANCH = "branch"
    COMBINED = "combined"


class CodeStylerService:
    """Checks changed code of a repository against a set of checkers."""

    def __init__(self, executor: Optional[CommandExecutor] = None):
        self.executor = executor or CommandExecutor()

    async def analyze_local(
        self,
        config: StylerConfig,
        project_path: Union[str, Path],
        checkers: Sequence[DiffChecker],
    ) -> List[Finding]:
        """Analyze the checked-out branch against ``config.target_branch``.

        Raises:
            SourceBranchNotFoundError: If the current branch cannot be determined
        """
        git = GitClient(self.executor, project_path)
        source_branch = await git.current_branch()
        logger.info("Analyzing %s against %s", source_branch, config.target_branch)
        findings = await self.fetch_findings(
            git,
            target_branch=config.target_branch,
            source_branch=source_branch,
            diff_source=DiffSource(config.diff_source),
            checkers=checkers,
            excludes=config.exclude_paths,
        )
        self.log_findings(findings)
        return findings

    async def analyze_merge_request(
        self,
        merge_request: MergeRequest,
        config: StylerConfig,
        project_path: Union[str, Path],
        checkers: Sequence[DiffChecker],
        merge_request_checkers: Sequence[MergeRequestChecker] = (),
    ) -> List[Finding]:
        """Analyze a merge request in CI: metadata checks first, then the diff."""
        merge_request_findings = await run_merge_request_checkers(
            merge_request, merge_request_checkers
        )
        git = GitClient(self.executor, project_path, remote_prefix=CI_REMOTE_PREFIX)
        logger.info(
            "Analyzing merge request %s -> %s",
            merge_request.source_branch,
            merge_request.target_branch,
        )
        findings = await self.fetch_findings(
            git,
            target_branch=merge_request.target_branch,
            source_branch=merge_request.source_branch,
            diff_source=DiffSource(config.diff_source),
            checkers=checkers,
            excludes=config.exclude_paths,
        )
        return merge_request_findings + findings

    async def fetch_findings(
        self,
        git: GitClient,
        target_branch: str,
        source_branch: str,
        diff_source: DiffSource,
        checkers: Sequence[DiffChecker],
        excludes: Sequence[str] = (),
    ) -> List[Finding]:
        changes = await self.collect_changes(git, target_branch, source_branch, diff_source)
        diffs = await self.collect_diffs(
            git, changes, target_branch, source_branch, diff_source, excludes
        )
        findings = await run_checkers(changes, diffs, checkers)
        return filter_relevant(findings, diffs)

    async def collect_changes(
        self,
        git: GitClient,
        target_branch: str,
        source_branch: str,
        diff_source: DiffSource,
    ) -> ChangeSet:
        outputs = []
        if diff_source in (DiffSource.STAGED, DiffSource.COMBINED):
            outputs.append(await git.staged_name_status())
        if diff_source in (DiffSource.BRANCH, DiffSource.COMBINED):
            outputs.append(await git.branch_name_status(target_branch, source_branch))
        changes = resolve_all(outputs)
        logger.debug("Resolved %d changed file(s)", len(changes))
        return changes

    async def collect_diffs(
        self,
        git: GitClient,
        changes: ChangeSet,
        target_branch: str,
        source_branch: str,
        diff_source: DiffSource = DiffSource.COMBINED,
        excludes: Sequence[str] = (),
    ) -> List[FileDiff]:
        diffs: List[FileDiff] = []
        for path in exclude_paths(diffable_paths(changes), excludes):
            if diff_source is DiffSource.STAGED:
                framed = await git.staged_file_diff(path)
            else:
                framed = await git.file_diff(target_branch, source_branch, path)
            diffs.extend(parse(framed))
        return diffs

    @staticmethod
    def log_findings(findings: Sequence[Finding]) -> None:
        if not findings:
            return
        entries = ["Found issues:"]
        for finding in findings:
            if isinstance(finding, (LineFinding, FileFinding)):
                entries.append(f"\t{finding.location}: message: {finding.text}")
        logger.info("\n".join(entries))
