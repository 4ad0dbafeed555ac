"""
rpkg wrapper - builds source packages and tags releases.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from coprpublish.exceptions import SourcePackageBuildError, VersionControlError

logger = logging.getLogger(__name__)


class RpkgClient:
    """Runs rpkg inside a packaging checkout."""

    def __init__(self, path: Optional[str] = None, timeout: int = 3600):
        self.path = Path(path) if path else Path.cwd()
        self.timeout = timeout

    def _run_rpkg(self, *args) -> subprocess.CompletedProcess:
        """Run rpkg command in the checkout."""
        cmd = ["rpkg", *args]

        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            return subprocess.run(
                cmd, cwd=self.path, capture_output=True, text=True, timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise SourcePackageBuildError(f"Command timed out: {' '.join(args)}")
        except FileNotFoundError:
            raise SourcePackageBuildError("rpkg not found. Install rpkg package.")

    def build_local(self, outdir: str) -> None:
        """
        Build the package locally with rpkg.

        Args:
            outdir: Directory receiving the built packages

        Raises:
            SourcePackageBuildError: If rpkg exits non-zero
        """
        logger.info(f"Building source package into {outdir}")

        result = self._run_rpkg("local", f"--outdir={outdir}")

        if result.returncode != 0:
            raise SourcePackageBuildError(f"rpkg local failed: {result.stderr.strip()}")

    def tag(self, version: str, release: int) -> None:
        """Tag the current commit as <name>-<version>-<release>."""
        result = self._run_rpkg("tag", f"--version={version}", f"--release={release}")

        if result.returncode != 0:
            raise VersionControlError(f"rpkg tag failed: {result.stderr.strip()}")

    def find_srpm(self, outdir: str, package: str) -> str:
        """Return the path of the source RPM rpkg left in outdir."""
        srpms = sorted(Path(outdir).glob(f"{package}-*.src.rpm"))

        if not srpms:
            raise SourcePackageBuildError(f"No source package found in {outdir}")
        if len(srpms) > 1:
            logger.warning(f"Several source packages in {outdir}, using {srpms[-1].name}")

        return str(srpms[-1])
