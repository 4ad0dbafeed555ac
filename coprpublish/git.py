"""
Thin wrapper around the git command line.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from coprpublish.exceptions import PushError, VersionControlError

logger = logging.getLogger(__name__)


class GitRepository:
    """Runs git commands inside a working tree."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else Path.cwd()

    def _run_git(self, *args) -> subprocess.CompletedProcess:
        """Run git command in the working tree."""
        cmd = ["git", *args]

        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            return subprocess.run(cmd, cwd=self.path, capture_output=True, text=True)
        except FileNotFoundError:
            raise VersionControlError("git not found. Install git package.")

    def _check(self, result: subprocess.CompletedProcess, action: str) -> str:
        if result.returncode != 0:
            reason = result.stderr.strip() or result.stdout.strip()
            raise VersionControlError(f"git {action} failed: {reason}")
        return result.stdout

    def fetch(self, remote: str) -> None:
        logger.info(f"Fetching {remote}")
        self._check(self._run_git("fetch", remote), "fetch")

    def checkout(self, branch: str) -> None:
        self._check(self._run_git("checkout", branch), "checkout")

    def merge(self, ref: str, message: str) -> None:
        """Merge ref into the current branch, recording a shortlog."""
        logger.info(f"Merging {ref}")
        self._check(self._run_git("merge", ref, "-m", message, "--log"), "merge")

    def list_tags(self, pattern: Optional[str] = None) -> list[str]:
        """List tag names, optionally filtered by a glob pattern."""
        args = ["tag", "--list"]
        if pattern:
            args.append(pattern)

        output = self._check(self._run_git(*args), "tag --list")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def commit(self, message: str, *paths: str) -> None:
        """Commit the given paths with message."""
        self._check(self._run_git("commit", f"-m{message}", *paths), "commit")

    def push(self) -> None:
        result = self._run_git("push")
        if result.returncode != 0:
            raise PushError(f"Git push failed: {result.stderr.strip()}")

    def push_tags(self) -> None:
        result = self._run_git("push", "--tags")
        if result.returncode != 0:
            raise PushError(f"Git push --tags failed: {result.stderr.strip()}")
