"""
Semantic version value object for gamelib.

Versions follow MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]. Ordering follows
semver precedence: build metadata never takes part in comparison or
equality, and a pre-release sorts before its final release.
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple, Union

from ..errors import InvalidVersion


_NUM = r"0|[1-9]\d*"
_PRE_IDENT = r"0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*"
_BUILD_IDENT = r"[0-9a-zA-Z-]+"

# Largest value an SQLite INTEGER column holds
MAX_COMPONENT = 2**63 - 1

_VERSION_RE = re.compile(
    rf"(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>(?:{_PRE_IDENT})(?:\.(?:{_PRE_IDENT}))*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*))?",
    re.ASCII,
)


def _pre_key(pre: Optional[str]) -> Tuple:
    """
    Sort key for the pre-release part.

    A missing pre-release ranks above any pre-release. Numeric identifiers
    rank below alphanumeric ones; tuple comparison makes a shorter list of
    otherwise equal identifiers rank first.
    """
    if pre is None:
        return (1, ())
    idents = []
    for ident in pre.split('.'):
        if ident.isdigit():
            idents.append((0, int(ident), ''))
        else:
            idents.append((1, 0, ident))
    return (0, tuple(idents))


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    Parsed semantic version.

    Examples:
        Version.parse("1.2.3")             -> Version(1, 2, 3)
        Version.parse("1.0.0-rc.1+b.42")   -> Version(1, 0, 0, pre="rc.1", build="b.42")

    Attributes:
        major, minor, patch: Non-negative integers
        pre: Pre-release label without the leading '-', or None
        build: Build label without the leading '+', or None
    """

    major: int
    minor: int
    patch: int
    pre: Optional[str] = None
    build: Optional[str] = None

    @classmethod
    def parse(cls, version_string: str) -> 'Version':
        """
        Parse a version string.

        Raises:
            InvalidVersion: If the string is not a valid semantic version
        """
        if not isinstance(version_string, str):
            raise InvalidVersion(f"Invalid version: {version_string!r}")

        m = _VERSION_RE.fullmatch(version_string)
        if m is None:
            raise InvalidVersion(f"Invalid version: {version_string!r}")

        major, minor, patch = (int(m.group(k)) for k in ('major', 'minor', 'patch'))
        if max(major, minor, patch) > MAX_COMPONENT:
            raise InvalidVersion(f"Version component out of range: {version_string!r}")

        return cls(
            major=major,
            minor=minor,
            patch=patch,
            pre=m.group('pre'),
            build=m.group('build'),
        )

    @classmethod
    def from_row(cls, row) -> 'Version':
        """Build a Version from a releases row (labels stored as '' when absent)."""
        return cls(
            major=row['version_major'],
            minor=row['version_minor'],
            patch=row['version_patch'],
            pre=row['version_pre'] or None,
            build=row['version_build'] or None,
        )

    @property
    def is_prerelease(self) -> bool:
        return self.pre is not None

    @property
    def core(self) -> Tuple[int, int, int]:
        """The (major, minor, patch) triple that release uniqueness is scoped to."""
        return (self.major, self.minor, self.patch)

    def sort_key(self) -> Tuple:
        return (self.major, self.minor, self.patch, _pre_key(self.pre))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: 'Version') -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre is not None:
            s += f"-{self.pre}"
        if self.build is not None:
            s += f"+{self.build}"
        return s

    def to_dict(self):
        return {
            'version': str(self),
            'major': self.major,
            'minor': self.minor,
            'patch': self.patch,
            'pre': self.pre,
            'build': self.build,
        }


def parse_version(value: Union[str, Version]) -> Version:
    """Accept either a Version or a version string."""
    if isinstance(value, Version):
        return value
    return Version.parse(value)
