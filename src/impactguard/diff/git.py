"""Git-backed diff source for the uncommitted change set."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from impactguard.diff.hunk_parser import split_lines
from impactguard.exceptions import DiffSourceError

logger = logging.getLogger("impactguard.git")

_GIT_TIMEOUT = 30


class GitDiffSource:
    """Staged and unstaged changes of a working tree, diffed against HEAD."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _run(self, *args: str) -> subprocess.CompletedProcess | None:
        try:
            return subprocess.run(
                ["git", "-c", "core.quotepath=off", *args],
                cwd=self.root,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=_GIT_TIMEOUT,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning("git %s failed: %s", " ".join(args), e)
            return None

    def ensure_repository(self) -> None:
        """Raise DiffSourceError unless root is inside a git work tree."""
        result = self._run("rev-parse", "--is-inside-work-tree")
        if result is None or result.returncode != 0 or result.stdout.strip() != "true":
            raise DiffSourceError(f"Not a git repository: {self.root}")

    def get_changed_paths(self) -> list[str]:
        """Repo-relative paths with unstaged or staged changes."""
        paths: set[str] = set()
        for args in (("diff", "--name-only"), ("diff", "--cached", "--name-only")):
            result = self._run(*args)
            if result is None:
                continue
            if result.returncode != 0:
                logger.warning("git %s: %s", " ".join(args), result.stderr.strip())
                continue
            paths.update(p.strip() for p in split_lines(result.stdout) if p.strip())
        return sorted(paths)

    def get_raw_diff(self, path: str) -> str:
        """Diff of `path` against HEAD, covering staged and unstaged edits."""
        result = self._run("diff", "HEAD", "--", path)
        if result is None:
            return ""
        if result.returncode != 0:
            logger.warning("git diff for %s failed: %s", path, result.stderr.strip())
            return ""
        return result.stdout
