"""Git repository status and history sensor, backed by the ``git`` CLI."""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .base import BaseSensor, SensorError, SensorReport

BUCKET_LIMIT = 5
FIELD_SEP = "\x1f"


@dataclass
class GitChanges:
    """Changed paths, each in exactly one bucket."""

    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.modified or self.untracked)


@dataclass
class CommitInfo:
    sha: str
    summary: str
    author: str
    timestamp: int | None = None

    @property
    def short_id(self) -> str:
        return self.sha[:7]

    @property
    def date(self) -> str:
        if self.timestamp is None:
            return "unknown"
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def parse_porcelain(output: str) -> list[tuple[str, str]]:
    """Parse ``git status --porcelain=v1 -z`` into (XY, path) pairs."""
    entries = []
    tokens = output.split("\0")
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        xy, path = token[:2], token[3:]
        if xy[0] in "RC":
            # renames and copies carry the source path as the next token
            i += 1
        entries.append((xy, path))
    return entries


def bucket_changes(entries: list[tuple[str, str]]) -> GitChanges:
    """
    Classify each path into one bucket.

    Precedence: any index change is staged, otherwise a worktree modify or delete
    is modified, otherwise an untracked path is untracked. Ignored paths are
    dropped.
    """
    changes = GitChanges()
    for xy, path in entries:
        index, worktree = xy[0], xy[1]
        if xy == "??":
            changes.untracked.append(path)
        elif index not in " ?!":
            changes.staged.append(path)
        elif worktree in "MD":
            changes.modified.append(path)
    return changes


def format_bucket(label: str, marker: str, paths: list[str], limit: int = BUCKET_LIMIT) -> list[str]:
    if not paths:
        return []
    lines = [f"  {label}: {len(paths)} file(s)"]
    lines.extend(f"    {marker} {path}" for path in paths[:limit])
    if len(paths) > limit:
        lines.append(f"    ... and {len(paths) - limit} more")
    return lines


def format_changes(changes: GitChanges) -> list[str]:
    if changes.is_clean:
        return ["  Clean - nothing to commit"]
    return (
        format_bucket("Staged", "+", changes.staged)
        + format_bucket("Modified", "M", changes.modified)
        + format_bucket("Untracked", "?", changes.untracked)
    )


class GitSensor(BaseSensor):
    """Inspect a git repository with the git command line."""

    name = "git"
    description = "Git repository status and log"

    async def _git(self, root: str, *args: str, strip: bool = True):
        return await self.executor.run(["git", "-C", root, *args], strip=strip)

    async def discover(self, path: str | None = None) -> str:
        """Find the work tree containing ``path`` (default: current directory)."""
        start = os.path.expanduser(path) if path else os.getcwd()
        if not self.executor.available("git"):
            raise SensorError("git is not installed")
        result = await self._git(start, "rev-parse", "--show-toplevel")
        if not result.success:
            raise SensorError(f"Not a git repository: {result.output}")
        return result.stdout.strip()

    async def _commits(self, root: str, count: int) -> list[CommitInfo]:
        result = await self._git(
            root,
            "log",
            f"-n{count}",
            f"--format=%H{FIELD_SEP}%s{FIELD_SEP}%an{FIELD_SEP}%ct",
        )
        if not result.success:
            # unborn HEAD
            return []

        commits = []
        for line in result.stdout.splitlines():
            parts = line.split(FIELD_SEP)
            if len(parts) != 4:
                continue
            sha, summary, author, ts = parts
            commits.append(
                CommitInfo(
                    sha=sha,
                    summary=summary or "(no message)",
                    author=author or "unknown",
                    timestamp=int(ts) if ts.isdigit() else None,
                )
            )
        return commits

    async def status(self, path: str | None = None) -> SensorReport:
        root = await self.discover(path)
        report = SensorReport(title="Git Repository Status")
        report.add(f"Repository: {root}")

        commits = await self._commits(root, 1)
        if commits:
            branch = await self._git(root, "rev-parse", "--abbrev-ref", "HEAD")
            if branch.success:
                report.add(f"Branch: {branch.stdout.strip()}")
            last = commits[0]
            report.extend([
                "",
                "Last Commit:",
                f"  {last.short_id} - {last.summary}",
                f"  Author: {last.author}",
                f"  Date: {last.date}",
            ])
        else:
            report.add("Branch: (no commits yet)")

        status = await self._git(
            root, "status", "--porcelain=v1", "-z", "--untracked-files=all", strip=False
        )
        report.add()
        if not status.success:
            report.add(f"Could not get status: {status.output}")
            return report

        report.add("Working Tree:")
        report.extend(format_changes(bucket_changes(parse_porcelain(status.stdout))))
        return report

    async def log(self, path: str | None = None, count: int = 10) -> SensorReport:
        root = await self.discover(path)
        report = SensorReport(title="Recent Commits")
        commits = await self._commits(root, count)
        if not commits:
            report.add("No commits found.")
        for commit in commits:
            report.add(f"{commit.short_id} {commit.author} - {commit.summary}")
        return report
