"""Tests for git output framing and the git client."""

import asyncio
import subprocess

import pytest
from conftest import FakeExecutor

from code_styler.changes import AddedFile, ModifiedFile, RenamedFile, resolve
from code_styler.diff import parse
from code_styler.exceptions import CommandExecutionError, SourceBranchNotFoundError
from code_styler.execution import CommandExecutor
from code_styler.vcs import GitClient, frame_diff_output, frame_status_output


class TestFraming:
    def test_status_records(self):
        raw = "M\0src/app.py\0A\0docs/new file.md\0R087\0old.py\0new.py\0"
        assert frame_status_output(raw) == (
            "%src/app.py% #M#@delimiter@"
            "%docs/new file.md% #A#@delimiter@"
            "%old.py\tnew.py% #R087#@delimiter@"
        )

    def test_framed_status_resolves(self):
        raw = "M\0a.py\0R100\0b.py\0c.py\0"
        assert resolve(frame_status_output(raw)) == {
            ModifiedFile("a.py"),
            RenamedFile("b.py", "c.py", content_modified=False),
        }

    def test_truncated_status_output(self):
        assert frame_status_output("M\0a.py\0R090\0only.py") == "%a.py% #M#@delimiter@"

    def test_empty_status_output(self):
        assert frame_status_output("") == ""

    def test_diff_lines(self):
        raw = "diff --git a/f.txt b/f.txt\n@@ -1,2 +1,3 @@\n line1\n+line2\n line3\n"
        framed = frame_diff_output(raw)
        assert framed.count("@delimiter@") == 5
        assert parse(framed)[0].lines[2].new_line == 2


class TestGitClient:
    def test_current_branch(self):
        executor = FakeExecutor({"branch --show-current": "feature/login\n"})
        assert asyncio.run(GitClient(executor, "/repo").current_branch()) == "feature/login"

    def test_detached_head(self):
        executor = FakeExecutor({"branch --show-current": "\n"})
        with pytest.raises(SourceBranchNotFoundError):
            asyncio.run(GitClient(executor, "/repo").current_branch())

    def test_git_failure_on_current_branch(self):
        error = CommandExecutionError(["git", "branch"], "non-zero exit", returncode=128)
        executor = FakeExecutor({"branch --show-current": error})
        with pytest.raises(SourceBranchNotFoundError):
            asyncio.run(GitClient(executor, "/repo").current_branch())

    def test_branch_range_uses_remote_prefix(self):
        executor = FakeExecutor({"--name-status": "A\0a.py\0"})
        client = GitClient(executor, "/repo", remote_prefix="origin/")

        output = asyncio.run(client.branch_name_status("main", "feature"))

        assert output == "%a.py% #A#@delimiter@"
        assert "origin/main...origin/feature" in executor.calls[0]
        assert "-z" in executor.calls[0]

    def test_staged_name_status(self):
        executor = FakeExecutor({"--cached": "M\0a.py\0"})
        output = asyncio.run(GitClient(executor, "/repo").staged_name_status())
        assert resolve(output) == {ModifiedFile("a.py")}

    def test_file_diff_falls_back_to_staged(self):
        executor = FakeExecutor(
            {"main...feature": "", "--cached": "diff --git a/a.py b/a.py\n@@ -0,0 +1 @@\n+x\n"}
        )
        framed = asyncio.run(GitClient(executor, "/repo").file_diff("main", "feature", "a.py"))

        assert parse(framed)[0].new_path == "a.py"
        assert executor.calls[1][-3:] == ["--cached", "--", "a.py"]

    def test_file_diff_prefers_branch_diff(self):
        executor = FakeExecutor({"main...feature": "diff --git a/a.py b/a.py\n"})
        asyncio.run(GitClient(executor, "/repo").file_diff("main", "feature", "a.py"))
        assert len(executor.calls) == 1


def _git(cwd, *args):
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.mark.slow
class TestRealRepository:
    @pytest.fixture
    def repo(self, tmp_path):
        _git(tmp_path, "init", "-b", "master")
        _git(tmp_path, "config", "user.email", "dev@example.com")
        _git(tmp_path, "config", "user.name", "Dev")
        (tmp_path / "app.py").write_text("VALUE = 1\n", encoding="utf-8")
        _git(tmp_path, "add", ".")
        _git(tmp_path, "commit", "-m", "initial")
        _git(tmp_path, "checkout", "-b", "feature")
        (tmp_path / "app.py").write_text("VALUE = 1\nOTHER = 2\n", encoding="utf-8")
        (tmp_path / "my notes.md").write_text("notes\n", encoding="utf-8")
        _git(tmp_path, "add", ".")
        _git(tmp_path, "commit", "-m", "change")
        return tmp_path

    def test_branch_changes_and_diff(self, repo):
        client = GitClient(CommandExecutor(), repo)

        async def scenario():
            branch = await client.current_branch()
            status = await client.branch_name_status("master", branch)
            diff = await client.file_diff("master", branch, "app.py")
            return branch, status, diff

        branch, status, diff = asyncio.run(scenario())

        assert branch == "feature"
        assert resolve(status) == {ModifiedFile("app.py"), AddedFile("my notes.md")}
        lines = parse(diff)[0].lines
        assert [l.new_line for l in lines if l.content == "+OTHER = 2"] == [2]

    def test_missing_executable(self, tmp_path):
        with pytest.raises(CommandExecutionError):
            asyncio.run(CommandExecutor().run(["definitely-not-a-real-binary"], tmp_path))
