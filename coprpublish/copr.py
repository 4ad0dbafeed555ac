"""
Copr client - submits source packages and reads build state.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import requests

from coprpublish.exceptions import CoprBuildError, CoprConnectionError

logger = logging.getLogger(__name__)

DEFAULT_COPR_URL = "https://copr.fedorainfracloud.org"


class BuildStatus(Enum):
    """Status of a Copr build."""

    PENDING = "pending"
    BUILDING = "building"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELED = "canceled"


# Copr build states, see the "state" field of /api_3/build/<id>
COPR_STATES = {
    "waiting": BuildStatus.PENDING,
    "pending": BuildStatus.PENDING,
    "importing": BuildStatus.PENDING,
    "starting": BuildStatus.BUILDING,
    "running": BuildStatus.BUILDING,
    "succeeded": BuildStatus.COMPLETE,
    "forked": BuildStatus.COMPLETE,
    "skipped": BuildStatus.COMPLETE,
    "failed": BuildStatus.FAILED,
    "canceled": BuildStatus.CANCELED,
}

TERMINAL_STATUSES = (BuildStatus.COMPLETE, BuildStatus.FAILED, BuildStatus.CANCELED)


@dataclass
class BuildTask:
    """A build submitted to Copr."""

    project: str
    srpm_path: str
    build_id: Optional[int] = None
    status: BuildStatus = BuildStatus.PENDING
    error_message: Optional[str] = None


class CoprClient:
    """Client for submitting builds to Copr."""

    def __init__(
        self,
        copr_url: str = DEFAULT_COPR_URL,
        config: Optional[str] = None,
        timeout: int = 30,
    ):
        self.copr_url = copr_url.rstrip("/")
        self.config = config
        self.timeout = timeout

    def _run_copr(self, *args) -> subprocess.CompletedProcess:
        """Run copr-cli command with configured options."""
        cmd = ["copr-cli"]

        if self.config:
            cmd.append(f"--config={self.config}")

        cmd.extend(args)

        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise CoprBuildError("copr-cli not found. Install copr-cli package.")

    def submit_build(self, project: str, srpm_path: str, nowait: bool = False) -> BuildTask:
        """
        Submit a source package build to a Copr project.

        Args:
            project: Copr project, "name" or "owner/name"
            srpm_path: Path to SRPM file
            nowait: Return as soon as the build is created

        Returns:
            BuildTask with result information

        Raises:
            CoprBuildError: If copr-cli exits non-zero
        """
        srpm_path = Path(srpm_path)
        if not srpm_path.exists():
            raise FileNotFoundError(f"SRPM not found: {srpm_path}")

        task = BuildTask(project=project, srpm_path=str(srpm_path))

        cmd_args = ["build"]
        if nowait:
            cmd_args.append("--nowait")
        cmd_args.extend([project, str(srpm_path)])

        logger.info(f"Submitting {srpm_path.name} to Copr project {project}")

        result = self._run_copr(*cmd_args)

        task.build_id = self._parse_build_id(result.stdout)

        if result.returncode != 0:
            task.status = BuildStatus.FAILED
            task.error_message = result.stderr
            raise CoprBuildError(f"Copr build failed: {result.stderr.strip()}")

        task.status = BuildStatus.BUILDING if nowait else BuildStatus.COMPLETE

        logger.info(f"Build submitted: build_id={task.build_id}")

        return task

    @staticmethod
    def _parse_build_id(output: str) -> Optional[int]:
        for line in output.split("\n"):
            if "Created builds:" in line:
                try:
                    return int(line.split(":")[-1].split()[0])
                except (ValueError, IndexError):
                    return None
        return None

    def build_url(self, build_id: int) -> str:
        return f"{self.copr_url}/coprs/build/{build_id}"

    def get_build_status(self, build_id: int) -> BuildStatus:
        """
        Read the current state of a build from the Copr frontend.

        Raises:
            CoprConnectionError: If the frontend cannot be queried
        """
        url = f"{self.copr_url}/api_3/build/{build_id}"

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            state = response.json().get("state", "")
        except (requests.RequestException, ValueError) as e:
            raise CoprConnectionError(f"Failed to query build {build_id}: {e}")

        return COPR_STATES.get(state, BuildStatus.PENDING)

    def wait_for_build(self, build_id: int, timeout: int = 7200, interval: int = 30) -> BuildStatus:
        """
        Poll a build until it reaches a terminal state.

        Args:
            build_id: Copr build id
            timeout: Maximum time to wait in seconds
            interval: Seconds between polls

        Returns:
            Last observed status; BUILDING or PENDING if the timeout ran out
        """
        deadline = time.monotonic() + timeout
        status = self.get_build_status(build_id)

        while status not in TERMINAL_STATUSES and time.monotonic() < deadline:
            logger.debug(f"Build {build_id} is {status.value}, waiting {interval}s")
            time.sleep(interval)
            status = self.get_build_status(build_id)

        logger.info(f"Build {build_id}: {status.value}")
        return status
