"""
Debian changelog reader for extracting the latest package version.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from coprpublish.exceptions import ChangelogNotFoundError, ChangelogParseError


@dataclass
class ChangelogEntry:
    """Header line of a single changelog entry."""

    package: str
    version: str
    distribution: Optional[str] = None
    urgency: Optional[str] = None


class ChangelogReader:
    """
    Finds the most recent version of a package in a Debian changelog.

    Entries are expected in reverse-chronological order, the way
    dch maintains debian/changelog. The first matching line is taken
    as the latest version; versions are never compared semantically.
    """

    VERSION_PATTERN = r"([0-9]+\.[0-9]+\.[0-9]+)"
    TRAILER_PATTERN = re.compile(r"^\s*([^;\s]+)?\s*;?\s*urgency=(\S+)")

    def __init__(self, package: str):
        self.package = package
        self._entry_re = re.compile(re.escape(package) + r" \(" + self.VERSION_PATTERN + r"\)")

    def read(self, changelog_path: str) -> ChangelogEntry:
        """
        Read a changelog file and return its latest entry.

        Args:
            changelog_path: Path to the changelog file

        Returns:
            ChangelogEntry for the first line naming the package

        Raises:
            ChangelogNotFoundError: If the changelog doesn't exist
            ChangelogParseError: If no line names the package
        """
        changelog_path = Path(changelog_path)
        if not changelog_path.is_file():
            raise ChangelogNotFoundError(f"No changelog found: {changelog_path}")

        content = changelog_path.read_text(encoding="utf-8", errors="replace")
        return self.latest_entry(content)

    def latest_entry(self, content: str) -> ChangelogEntry:
        """Return the first entry in changelog content that names the package."""
        for line in content.splitlines():
            match = self._entry_re.search(line)
            if not match:
                continue

            entry = ChangelogEntry(package=self.package, version=match.group(1))

            trailer = self.TRAILER_PATTERN.match(line[match.end():])
            if trailer:
                entry.distribution = trailer.group(1)
                entry.urgency = trailer.group(2)

            return entry

        raise ChangelogParseError(
            f"No entry of the form '{self.package} (X.Y.Z)' found in changelog"
        )


def latest_version(content: str, package: str) -> str:
    """
    Return the version of the first changelog entry for a package.

    Args:
        content: Changelog text
        package: Package name as written in the changelog

    Returns:
        Version string, e.g. "1.1.20"
    """
    return ChangelogReader(package).latest_entry(content).version
