"""
copr-publish - bump, build, tag and submit rpkg packages to Copr.
"""

__version__ = "0.1.0"
__author__ = "copr-publish Team"

from coprpublish.changelog import ChangelogReader, latest_version
from coprpublish.copr import CoprClient
from coprpublish.descriptor import SpecDescriptor, update_descriptor
from coprpublish.publisher import ReleasePublisher
from coprpublish.resolver import ReleaseResolver, resolve_release
from coprpublish.tags import next_release

__all__ = [
    "ChangelogReader",
    "latest_version",
    "CoprClient",
    "SpecDescriptor",
    "update_descriptor",
    "ReleasePublisher",
    "ReleaseResolver",
    "resolve_release",
    "next_release",
]
