"""Command-line interface for Code Styler"""

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .checkers import MergeRequest, default_diff_checkers, default_merge_request_checkers
from .config import DIFF_SOURCES, StylerConfig, load_config
from .exceptions import CodeStylerError
from .execution import CommandExecutor
from .findings.models import Finding, Severity
from .findings.transport import FindingReceiver, send_findings
from .formatters import FORMATTERS
from .logging_config import setup_logging
from .service import CodeStylerService

app = typer.Typer(
    name="code-styler",
    help="Code Styler - style and documentation checks scoped to the lines you changed",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]Code Styler[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Check changed code against style and documentation rules.

    [bold cyan]Examples:[/bold cyan]

      code-styler check .

      code-styler check . --target develop --diff-source staged

      code-styler ci . --source-branch feature/login --target-branch main --format github

      code-styler receive --port 48123
    """


def _validate_output(fmt: str, verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)
    if fmt not in FORMATTERS:
        console.print(f"[red]Error:[/red] --format must be one of: {', '.join(sorted(FORMATTERS))}")
        raise typer.Exit(1)


def _fail(error: CodeStylerError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if error.hint:
        console.print(f"[dim]Hint: {escape(error.hint)}[/dim]")
    raise typer.Exit(1)


def _load(config_file: Optional[Path], **overrides) -> StylerConfig:
    try:
        return load_config(config_file=config_file, **overrides)
    except CodeStylerError as e:
        _fail(e)


def _report(findings: List[Finding], fmt: str) -> None:
    FORMATTERS[fmt]().render(findings)
    if any(f.severity is Severity.ERROR for f in findings):
        raise typer.Exit(1)


async def _deliver(findings: List[Finding], config: StylerConfig) -> None:
    await send_findings(
        findings,
        config.transport_host,
        config.transport_port,
        timeout_seconds=config.send_timeout_seconds,
    )


@app.command()
def check(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the git repository to check",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="Branch to compare the current branch against"
    ),
    diff_source: Optional[str] = typer.Option(
        None,
        "--diff-source",
        "-s",
        help=f"Which changes to check: {', '.join(DIFF_SOURCES)}",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Path prefix (with '/') or path component to skip"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    fmt: str = typer.Option("rich", "--format", "-f", help="Output format: rich, json, github"),
    send: bool = typer.Option(
        False, "--send", help="Also send the findings to a waiting 'code-styler receive'"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging"),
):
    """Check the checked-out branch of a local repository."""
    _validate_output(fmt, verbose, quiet)
    logger = setup_logging(verbose=verbose, quiet=quiet)

    settings = _load(
        config,
        target_branch=target,
        diff_source=diff_source,
        verbose=verbose,
        quiet=quiet,
    )
    if exclude:
        settings = replace(settings, exclude_paths=[*settings.exclude_paths, *exclude])
    logger.debug("Loaded settings: %s", settings)

    executor = CommandExecutor()
    service = CodeStylerService(executor)
    checkers = default_diff_checkers(settings, path, executor)

    async def _run() -> List[Finding]:
        findings = await service.analyze_local(settings, path, checkers)
        if send:
            await _deliver(findings, settings)
        return findings

    try:
        findings = asyncio.run(_run())
    except CodeStylerError as e:
        _fail(e)

    _report(findings, fmt)


@app.command()
def ci(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the git repository checkout",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    source_branch: str = typer.Option(..., "--source-branch", help="Merge request source branch"),
    target_branch: str = typer.Option(..., "--target-branch", help="Merge request target branch"),
    title: str = typer.Option("", "--title", help="Merge request title"),
    iid: Optional[int] = typer.Option(None, "--iid", help="Merge request number"),
    diff_source: Optional[str] = typer.Option(
        None,
        "--diff-source",
        "-s",
        help=f"Which changes to check: {', '.join(DIFF_SOURCES)} (default from config)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    fmt: str = typer.Option("github", "--format", "-f", help="Output format: rich, json, github"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging"),
):
    """Check a merge request in a CI pipeline."""
    _validate_output(fmt, verbose, quiet)
    setup_logging(verbose=verbose, quiet=quiet)

    settings = _load(
        config,
        target_branch=target_branch,
        diff_source=diff_source,
        verbose=verbose,
        quiet=quiet,
    )
    merge_request = MergeRequest(
        source_branch=source_branch, target_branch=target_branch, title=title, iid=iid
    )

    executor = CommandExecutor()
    service = CodeStylerService(executor)

    try:
        findings = asyncio.run(
            service.analyze_merge_request(
                merge_request,
                settings,
                path,
                default_diff_checkers(settings, path, executor),
                default_merge_request_checkers(),
            )
        )
    except CodeStylerError as e:
        _fail(e)

    _report(findings, fmt)


@app.command()
def receive(
    host: Optional[str] = typer.Option(None, "--host", help="Address to listen on"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on", min=1, max=65535),
    fmt: str = typer.Option("rich", "--format", "-f", help="Output format: rich, json, github"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
):
    """Wait for findings sent by 'code-styler check --send' and show them."""
    _validate_output(fmt, verbose, False)
    setup_logging(verbose=verbose)
    settings = _load(None, transport_host=host, transport_port=port)

    receiver = FindingReceiver(settings.transport_host, settings.transport_port)
    try:
        findings = asyncio.run(receiver.receive())
    except CodeStylerError as e:
        _fail(e)
    except KeyboardInterrupt:
        raise typer.Exit(130)

    FORMATTERS[fmt]().render(findings)


if __name__ == "__main__":
    app()
