"""
Packaging descriptor (rpkg spec template) reader and writer.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from coprpublish.exceptions import DescriptorParseError

logger = logging.getLogger(__name__)


@dataclass
class DescriptorLine:
    """One line of a descriptor, split into key/value when it is a field."""

    raw: str
    key: Optional[str] = None
    separator: str = ""
    value: str = ""
    eol: str = ""

    def render(self) -> str:
        if self.key is None:
            return self.raw
        return f"{self.key}:{self.separator}{self.value}{self.eol}"


class SpecDescriptor:
    """
    In-memory, line-oriented view of a spec file.

    Only "Key: value" tag lines in a preamble (the top of the file or
    a %package block) are parsed. Everything else, including section
    bodies, comments and macro lines, is kept verbatim.
    """

    FIELD_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9]*):([ \t]*)(.*?)(\r?\n)?$", re.DOTALL)
    SECTION_PATTERN = re.compile(
        r"^%(package|description|prep|build|install|check|clean|files|changelog"
        r"|pre|post|preun|postun|pretrans|posttrans|triggerin|triggerun|triggerpostun"
        r"|verifyscript|generate_buildrequires|conf)\b"
    )
    DEFAULT_SEPARATOR = "    "

    def __init__(self, lines: list[DescriptorLine]):
        self.lines = lines

    @classmethod
    def parse(cls, content: str) -> "SpecDescriptor":
        lines = []
        in_preamble = True
        for raw in content.splitlines(keepends=True):
            section = cls.SECTION_PATTERN.match(raw)
            if section:
                in_preamble = section.group(1) == "package"
                lines.append(DescriptorLine(raw=raw))
                continue

            match = cls.FIELD_PATTERN.match(raw) if in_preamble else None
            if match:
                lines.append(
                    DescriptorLine(
                        raw=raw,
                        key=match.group(1),
                        separator=match.group(2),
                        value=match.group(3),
                        eol=match.group(4) or "",
                    )
                )
            else:
                lines.append(DescriptorLine(raw=raw))
        return cls(lines)

    @classmethod
    def load(cls, path: str) -> "SpecDescriptor":
        return cls.parse(Path(path).read_bytes().decode("utf-8"))

    def get(self, key: str) -> Optional[str]:
        """Return the value of the first field named key."""
        for line in self.lines:
            if line.key == key:
                return line.value
        return None

    def set(self, key: str, value: str) -> int:
        """
        Set every field named key to value.

        Returns:
            Number of lines changed
        """
        count = 0
        for line in self.lines:
            if line.key != key:
                continue
            line.value = value
            if not line.separator:
                line.separator = self.DEFAULT_SEPARATOR
            count += 1
        return count

    def render(self) -> str:
        return "".join(line.render() for line in self.lines)


def update_descriptor(path: str, version: str, release: int) -> bool:
    """
    Rewrite Version and Release of a spec file in place.

    All other lines are written back unchanged. The file is not touched
    when it already carries the requested values.

    Args:
        path: Path to the spec file
        version: New Version value
        release: New Release value

    Returns:
        True if the file content changed

    Raises:
        FileNotFoundError: If the spec file doesn't exist
        DescriptorParseError: If Version or Release is missing
        OSError: If the file cannot be written
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Spec file not found: {path}")

    content = path.read_bytes().decode("utf-8")
    descriptor = SpecDescriptor.parse(content)

    for key, value in (("Version", version), ("Release", str(release))):
        if not descriptor.set(key, value):
            raise DescriptorParseError(f"Could not find {key} in {path}")

    rendered = descriptor.render()
    if rendered == content:
        logger.info(f"{path.name} already at Version {version}, Release {release}")
        return False

    path.write_bytes(rendered.encode("utf-8"))
    logger.info(f"Updated {path.name}: Version {version}, Release {release}")

    return True
