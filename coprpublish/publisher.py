"""
Release publisher - bumps, builds, tags and submits a package to Copr.
"""

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from coprpublish.copr import BuildStatus, BuildTask, CoprClient
from coprpublish.descriptor import update_descriptor
from coprpublish.exceptions import ChangelogNotFoundError, CoprBuildError
from coprpublish.git import GitRepository
from coprpublish.resolver import ReleaseResolver, ResolvedRelease
from coprpublish.rpkg import RpkgClient

logger = logging.getLogger(__name__)


@dataclass
class PublishSettings:
    """Everything a publish run needs to know."""

    package: str = "system76-power"
    project: str = "system76"
    workdir: str = "."
    changelog: str = "debian/changelog"
    spec_file: Optional[str] = None
    remote: str = "upstream"
    branch: str = "master"
    outdir: str = ".rpkg-build"
    copr_url: str = "https://copr.fedorainfracloud.org"
    copr_config: Optional[str] = None
    nowait: bool = False
    poll: bool = False

    def __post_init__(self):
        if not self.spec_file:
            self.spec_file = f"{self.package}.spec.rpkg"

    def path(self, name: str) -> Path:
        """Resolve name relative to the working directory."""
        p = Path(name)
        return p if p.is_absolute() else Path(self.workdir) / p


@dataclass
class PublishResult:
    """Result of a publish run."""

    release: ResolvedRelease
    srpm_path: Optional[str] = None
    task: Optional[BuildTask] = None
    dry_run: bool = False
    total_time: float = 0.0

    @property
    def success(self) -> bool:
        if self.dry_run:
            return True
        return self.task is not None and self.task.status != BuildStatus.FAILED


class ReleasePublisher:
    """
    Publishes the latest changelog version of a package to Copr.

    Steps, each fatal on failure:
    1. Check the changelog exists
    2. Fetch the upstream remote and merge it into the branch
    3. Resolve version from the changelog and release from existing tags
    4. Write Version/Release into the spec template and commit it
    5. Build the source package with rpkg and tag the release
    6. Submit the SRPM to Copr
    7. Push commits and tags, then remove the build directory
    """

    def __init__(
        self,
        settings: PublishSettings,
        git: Optional[GitRepository] = None,
        rpkg: Optional[RpkgClient] = None,
        copr: Optional[CoprClient] = None,
    ):
        self.settings = settings
        self.git = git or GitRepository(settings.workdir)
        self.rpkg = rpkg or RpkgClient(settings.workdir)
        self.copr = copr or CoprClient(copr_url=settings.copr_url, config=settings.copr_config)
        self.resolver = ReleaseResolver(settings.package)

    @property
    def outdir(self) -> Path:
        return self.settings.path(self.settings.outdir).resolve()

    def check_changelog(self) -> Path:
        changelog = self.settings.path(self.settings.changelog)
        if not changelog.is_file():
            raise ChangelogNotFoundError(f"No {self.settings.changelog} found.")
        return changelog

    def sync_upstream(self) -> None:
        """Merge the upstream branch into the local one."""
        s = self.settings
        self.git.fetch(s.remote)
        self.git.checkout(s.branch)
        self.git.merge(f"{s.remote}/{s.branch}", "fetch upstream")

    def resolve(self) -> ResolvedRelease:
        """Resolve the release to publish from the changelog and git tags."""
        content = self.check_changelog().read_text(encoding="utf-8", errors="replace")
        tags = self.git.list_tags(f"{self.settings.package}-*")
        return self.resolver.resolve(content, tags)

    def bump(self, release: ResolvedRelease) -> None:
        """Stamp the spec template with the release and commit it."""
        spec_file = self.settings.path(self.settings.spec_file)
        if not update_descriptor(str(spec_file), release.version, release.release):
            logger.info(f"{self.settings.spec_file} unchanged, nothing to commit")
            return
        self.git.commit(f"bump Version to: {release.evr}", self.settings.spec_file)

    def build_srpm(self, release: ResolvedRelease) -> str:
        """Build the source package into the output directory and tag it."""
        self.clean()
        self.outdir.mkdir(parents=True)

        self.rpkg.build_local(str(self.outdir))
        self.rpkg.tag(release.version, release.release)

        return self.rpkg.find_srpm(str(self.outdir), self.settings.package)

    def submit(self, srpm_path: str) -> BuildTask:
        s = self.settings
        task = self.copr.submit_build(s.project, srpm_path, nowait=s.nowait or s.poll)

        if s.poll and task.build_id is None:
            logger.warning("Could not read the Copr build id, not polling for the result")
        elif s.poll:
            task.status = self.copr.wait_for_build(task.build_id)
            if task.status in (BuildStatus.FAILED, BuildStatus.CANCELED):
                raise CoprBuildError(
                    f"Copr build {task.build_id} {task.status.value}: "
                    f"{self.copr.build_url(task.build_id)}"
                )

        return task

    def push(self) -> None:
        self.git.push()
        self.git.push_tags()

    def clean(self) -> None:
        if self.outdir.is_dir():
            logger.debug(f"Removing {self.outdir}")
            shutil.rmtree(self.outdir)

    def publish(self, dry_run: bool = False) -> PublishResult:
        """
        Run the whole release sequence.

        Args:
            dry_run: Only resolve and report the release, change nothing

        Returns:
            PublishResult with the release and Copr build information
        """
        start_time = time.time()

        self.check_changelog()

        if dry_run:
            release = self.resolve()
            logger.info(f"Dry run: would publish {release.tag} to {self.settings.project}")
            return PublishResult(release=release, dry_run=True)

        self.sync_upstream()

        release = self.resolve()
        self.bump(release)

        srpm_path = self.build_srpm(release)
        task = self.submit(srpm_path)

        self.push()
        self.clean()

        result = PublishResult(
            release=release,
            srpm_path=srpm_path,
            task=task,
            total_time=time.time() - start_time,
        )

        logger.info(f"Published {release.tag} in {result.total_time:.1f}s")

        return result
