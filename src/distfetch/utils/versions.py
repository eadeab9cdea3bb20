import re
from packaging.version import Version

from ..domain.errors import InvalidVersionError

# major[.minor[.patch]] followed by an optional qualifier such as -SNAPSHOT or -rc1
_VERSION_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[-_.+]?[A-Za-z].*)?$")

def parse_version(version: str) -> Version:
    """
    parse a release version into a comparable major.minor.patch version.

    missing minor/patch segments count as zero. qualifiers are ignored,
    so "1.16-SNAPSHOT" orders the same as "1.16.0".
    """
    match = _VERSION_PATTERN.match(version.strip())
    if not match:
        raise InvalidVersionError(f"Invalid semantic version: {version!r}")
    major, minor, patch = (int(part or 0) for part in match.groups())
    return Version(f"{major}.{minor}.{patch}")

def equals_or_newer(version: str, threshold: str) -> bool:
    return parse_version(version) >= parse_version(threshold)
