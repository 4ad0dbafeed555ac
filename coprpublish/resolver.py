"""
Release resolver - derives the next version/release pair to publish.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from coprpublish.changelog import ChangelogReader
from coprpublish.tags import next_release

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRelease:
    """Version and release counter chosen for the next build."""

    package: str
    version: str
    release: int

    @property
    def tag(self) -> str:
        return f"{self.package}-{self.version}-{self.release}"

    @property
    def evr(self) -> str:
        return f"{self.version}-{self.release}"


class ReleaseResolver:
    """
    Resolves (version, release) from changelog content and existing tags.

    Resolution is pure: the caller supplies the changelog text and the
    tag listing, nothing is read or written here.
    """

    def __init__(self, package: str):
        self.package = package
        self.reader = ChangelogReader(package)

    def resolve(self, changelog: str, tags: Iterable[str]) -> ResolvedRelease:
        """
        Resolve the next release.

        Args:
            changelog: Changelog text, newest entry first
            tags: Existing tag names

        Returns:
            ResolvedRelease for the latest changelog version

        Raises:
            ChangelogParseError: If the changelog has no entry for the package
            ReleaseTagError: If an existing tag for the version is malformed
        """
        version = self.reader.latest_entry(changelog).version
        release = next_release(tags, self.package, version)

        logger.info(f"Resolved {self.package} version {version}, release {release}")

        return ResolvedRelease(package=self.package, version=version, release=release)


def resolve_release(changelog: str, package: str, tags: Iterable[str]) -> ResolvedRelease:
    """Convenience wrapper around ReleaseResolver.resolve."""
    return ReleaseResolver(package).resolve(changelog, tags)
