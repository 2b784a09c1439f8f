"""Default checker registries built from configuration.

Registries are plain ordered lists; callers may extend or replace them.
"""

from pathlib import Path
from typing import List, Union

from ..config import StylerConfig
from ..execution import CommandExecutor
from .base import DiffChecker, MergeRequestChecker
from .branch_name import BranchNameChecker
from .documentation import DocumentationChecker
from .formatter import FormatterChecker
from .image import ImageChecker


def default_diff_checkers(
    config: StylerConfig, project_path: Union[str, Path], executor: CommandExecutor
) -> List[DiffChecker]:
    checkers: List[DiffChecker] = [ImageChecker(config.image_extensions)]
    if config.enable_documentation:
        checkers.append(DocumentationChecker(project_path, config.documentation_extensions))
    if config.formatter_enabled:
        checkers.append(
            FormatterChecker(
                config.formatter_command,
                project_path,
                executor,
                extensions=config.formatter_extensions,
                exclude=config.formatter_exclude,
                pattern=config.formatter_pattern,
            )
        )
    return checkers


def default_merge_request_checkers() -> List[MergeRequestChecker]:
    return [BranchNameChecker()]
