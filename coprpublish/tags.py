"""
Release tags of the form <package>-<version>-<release>.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from coprpublish.exceptions import ReleaseTagError

logger = logging.getLogger(__name__)

RELEASE_PATTERN = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class ReleaseTag:
    """A parsed release tag."""

    package: str
    version: str
    release: int

    @property
    def name(self) -> str:
        return f"{self.package}-{self.version}-{self.release}"

    def __str__(self) -> str:
        return self.name


def tag_prefix(package: str, version: str) -> str:
    """Prefix shared by every tag of a package version."""
    return f"{package}-{version}-"


def parse_release_tags(tags: Iterable[str], package: str, version: str) -> list[ReleaseTag]:
    """
    Parse the tags belonging to one package version.

    Tags of other packages or versions are ignored.

    Args:
        tags: Tag names, in any order
        package: Package name
        version: Version string

    Returns:
        ReleaseTag records for the matching tags

    Raises:
        ReleaseTagError: If a matching tag's release is not a non-negative integer
    """
    prefix = tag_prefix(package, version)
    records = []

    for tag in tags:
        tag = tag.strip()
        if not tag.startswith(prefix):
            continue

        suffix = tag[len(prefix):]
        if not RELEASE_PATTERN.match(suffix):
            raise ReleaseTagError(f"Release should be a number: {tag}")

        records.append(ReleaseTag(package=package, version=version, release=int(suffix)))

    return records


def next_release(tags: Iterable[str], package: str, version: str) -> int:
    """
    Compute the next release counter for a package version.

    Returns 1 when the version has never been tagged, otherwise the
    highest existing release plus one.
    """
    records = parse_release_tags(tags, package, version)
    if not records:
        return 1

    latest = max(records, key=lambda r: r.release)
    logger.debug(f"Latest tag for {package}-{version}: {latest}")
    return latest.release + 1
