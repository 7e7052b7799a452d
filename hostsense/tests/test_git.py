"""Tests for the git status and log sensor."""

import shutil
import subprocess

import pytest

from hostsense.sensors.base import SensorError
from hostsense.sensors.git import (
    CommitInfo,
    GitChanges,
    GitSensor,
    bucket_changes,
    format_bucket,
    format_changes,
    parse_porcelain,
)
from hostsense.sensors.platform import CommandExecutor

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class TestPorcelain:
    """Tests for parsing ``git status --porcelain=v1 -z``."""

    def test_entries(self):
        output = " M src/app.py\0A  new.py\0?? notes.txt\0"
        assert parse_porcelain(output) == [
            (" M", "src/app.py"),
            ("A ", "new.py"),
            ("??", "notes.txt"),
        ]

    def test_rename_skips_source_path(self):
        output = "R  renamed.py\0original.py\0 M other.py\0"
        assert parse_porcelain(output) == [("R ", "renamed.py"), (" M", "other.py")]

    def test_paths_with_spaces(self):
        assert parse_porcelain("?? my file.txt\0") == [("??", "my file.txt")]


class TestBuckets:
    """Each path lands in exactly one bucket."""

    def test_first_match_wins(self):
        changes = bucket_changes([
            ("MM", "both.py"),
            (" M", "worktree.py"),
            ("A ", "added.py"),
            ("??", "new.txt"),
            (" D", "deleted.py"),
            ("!!", "ignored.log"),
        ])

        assert changes.staged == ["both.py", "added.py"]
        assert changes.modified == ["worktree.py", "deleted.py"]
        assert changes.untracked == ["new.txt"]

    def test_no_path_in_two_buckets(self):
        entries = [("MM", "a"), ("AM", "b"), (" M", "c"), ("??", "d"), ("RM", "e")]
        changes = bucket_changes(entries)
        all_paths = changes.staged + changes.modified + changes.untracked

        assert sorted(all_paths) == ["a", "b", "c", "d", "e"]
        assert len(all_paths) == len(set(all_paths))

    def test_only_worktree_edits_count_as_modified(self):
        changes = bucket_changes([
            (" M", "edited.py"),
            (" D", "removed.py"),
            (" T", "now_a_link"),
            (" A", "intent.py"),
            (" U", "conflict.py"),
        ])

        assert changes.modified == ["edited.py", "removed.py"]
        assert changes.staged == []
        assert changes.untracked == []

    def test_bucket_capped_at_five(self):
        lines = format_bucket("Modified", "M", [f"f{i}.py" for i in range(8)])

        assert lines[0] == "  Modified: 8 file(s)"
        assert len(lines) == 1 + 5 + 1
        assert lines[-1] == "    ... and 3 more"

    def test_clean_tree(self):
        assert format_changes(GitChanges()) == ["  Clean - nothing to commit"]


class TestCommitInfo:

    def test_short_id_and_date(self):
        commit = CommitInfo(sha="0123456789abcdef", summary="init", author="dev", timestamp=0)
        assert commit.short_id == "0123456"
        assert commit.date == "1970-01-01 00:00"


@needs_git
class TestGitSensor:
    """Tests against a throwaway repository."""

    @pytest.fixture
    def repo(self, tmp_path):
        def git(*args):
            subprocess.run(["git", "-C", str(tmp_path), *args], check=True, capture_output=True)

        git("init", "-q")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        git("config", "commit.gpgsign", "false")
        return tmp_path, git

    @pytest.mark.asyncio
    async def test_status_of_fresh_repo(self, repo):
        path, _ = repo
        (path / "draft.txt").write_text("x")

        text = (await GitSensor(CommandExecutor()).status(str(path))).to_text()

        assert text.startswith("Git Repository Status:")
        assert "Branch: (no commits yet)" in text
        assert "Untracked: 1 file(s)" in text

    @pytest.mark.asyncio
    async def test_status_and_log(self, repo):
        path, git = repo
        (path / "a.py").write_text("a = 1\n")
        git("add", "a.py")
        git("commit", "-q", "-m", "first commit")
        (path / "a.py").write_text("a = 2\n")
        (path / "b.py").write_text("b = 1\n")
        git("add", "b.py")

        sensor = GitSensor(CommandExecutor())
        status = (await sensor.status(str(path))).to_text()
        log = (await sensor.log(str(path), count=5)).to_text()

        assert "first commit" in status
        assert "Staged: 1 file(s)" in status
        assert "+ b.py" in status
        assert "M a.py" in status
        assert "Dev - first commit" in log

    @pytest.mark.asyncio
    async def test_log_without_commits(self, repo):
        path, _ = repo
        text = (await GitSensor(CommandExecutor()).log(str(path))).to_text()
        assert "No commits found." in text

    @pytest.mark.asyncio
    async def test_not_a_repository(self, tmp_path):
        with pytest.raises(SensorError, match="Not a git repository"):
            await GitSensor(CommandExecutor()).status(str(tmp_path))
