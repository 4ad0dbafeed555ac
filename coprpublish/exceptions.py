"""
Custom exceptions for copr-publish.

Every exception carries the process exit code the CLI reports for it.
"""


class CoprPublishError(Exception):
    """Base exception for copr-publish."""

    exit_code = 1


class ChangelogNotFoundError(CoprPublishError):
    """Raised when the changelog file does not exist."""

    exit_code = 1


class ParseError(CoprPublishError):
    """Raised when an input file cannot be parsed."""

    exit_code = 3


class ChangelogParseError(ParseError):
    """Raised when no changelog entry names the package."""

    pass


class DescriptorParseError(ParseError):
    """Raised when the packaging descriptor lacks Version or Release."""

    pass


class ValidationError(CoprPublishError):
    """Raised when existing release data is malformed."""

    exit_code = 2


class ReleaseTagError(ValidationError):
    """Raised when a release tag has a non-numeric release counter."""

    pass


class SourcePackageBuildError(CoprPublishError):
    """Raised when rpkg fails to build the source package."""

    exit_code = 4


class CoprBuildError(CoprPublishError):
    """Raised when submitting a build to Copr fails."""

    exit_code = 5


class CoprConnectionError(CoprBuildError):
    """Raised when the Copr frontend cannot be reached."""

    pass


class PushError(CoprPublishError):
    """Raised when pushing commits or tags fails."""

    exit_code = 6


class VersionControlError(CoprPublishError):
    """Raised when a git or rpkg tag command fails."""

    exit_code = 7
