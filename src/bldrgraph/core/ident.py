"""Package identifiers, version ordering, and package records.

A package is identified by ``origin/name/version/release``. The first two
parts form the *short name* that names a package lineage independent of
version; the graph keeps one "latest" identifier per short name.

Version ordering follows the loose conventions of Habitat package versions
rather than strict SemVer: a version is split into segments on ``.``,
``-``, ``+`` and ``_``; numeric segments compare numerically and rank above
alphabetic ones, so ``1.10`` > ``1.9``. When one version is a prefix of
another the longer one wins; pre-release suffixes get no special treatment
(``1.0.0-rc1`` > ``1.0.0``). Releases are build timestamps such as
``20170513215008`` and compare numerically when all-digit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bldrgraph.exceptions import IdentParseError


# ---------------------------------------------------------------------------
# Version comparison utilities
# ---------------------------------------------------------------------------

_SEGMENT_SPLIT_RE = re.compile(r"[.\-+_]")

Segment = tuple[int, int, str]


def _segment_key(segment: str) -> Segment:
    if segment.isdigit():
        return (1, int(segment), "")
    return (0, 0, segment)


def version_key(version: str | None) -> tuple[Segment, ...]:
    """Sort key for a version string; larger keys are newer versions.

    Args:
        version: Version string such as ``"1.2.11"`` or ``"2.0.0-rc1"``.
            ``None`` sorts below every real version.

    Returns:
        A tuple of comparable segment keys.
    """
    if not version:
        return ()
    return tuple(_segment_key(s) for s in _SEGMENT_SPLIT_RE.split(version) if s)


def release_key(release: str | None) -> tuple[int, int, str]:
    """Sort key for a release string (numeric timestamps compare as integers)."""
    if not release:
        return (0, 0, "")
    return _segment_key(release)


# ---------------------------------------------------------------------------
# PackageIdent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageIdent:
    """A structured package identifier.

    Two identifiers are equal iff all four parts match exactly.

    Attributes:
        origin: Publishing origin, e.g. ``"core"``.
        name: Package name, e.g. ``"openssl"``.
        version: Version string, or None for a short name.
        release: Release (build timestamp), or None when not fully qualified.
    """

    origin: str
    name: str
    version: str | None = None
    release: str | None = None

    @classmethod
    def parse(cls, text: str) -> PackageIdent:
        """Parse ``origin/name[/version[/release]]``.

        Raises:
            IdentParseError: If *text* does not have 2 to 4 non-empty parts.
        """
        parts = text.strip().split("/")
        if not 2 <= len(parts) <= 4 or not all(parts):
            raise IdentParseError(f"Invalid package identifier: {text!r}")
        return cls(*parts)

    @property
    def short_name(self) -> str:
        """Return the ``origin/name`` short name."""
        return f"{self.origin}/{self.name}"

    @property
    def fully_qualified(self) -> bool:
        """True if both version and release are present."""
        return self.version is not None and self.release is not None

    def sort_key(self) -> tuple:
        """Ordering key used to pick the latest identifier of a short name."""
        return (version_key(self.version), release_key(self.release))

    def __str__(self) -> str:
        return "/".join(
            p for p in (self.origin, self.name, self.version, self.release)
            if p is not None
        )


def is_fully_qualified(text: str) -> bool:
    """True if *text* has the four-part ``origin/name/version/release`` shape."""
    try:
        return PackageIdent.parse(text).fully_qualified
    except IdentParseError:
        return False


def short_name(text: str) -> str:
    """Return the ``origin/name`` short name of an identifier string.

    Raises:
        IdentParseError: If *text* is not a valid identifier.
    """
    return PackageIdent.parse(text).short_name


# ---------------------------------------------------------------------------
# Package: one row of the flat package list
# ---------------------------------------------------------------------------


@dataclass
class Package:
    """A published package and its declared dependencies.

    ``deps`` are runtime dependencies in manifest order; ``build_deps`` are
    only followed by the graph when the ``BUILDDEPS`` feature is enabled.
    """

    ident: PackageIdent
    deps: list[PackageIdent] = field(default_factory=list)
    build_deps: list[PackageIdent] = field(default_factory=list)

    def get_deps(self) -> list[PackageIdent]:
        """Return the runtime dependencies in declared order."""
        return list(self.deps)
