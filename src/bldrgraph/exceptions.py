"""bldr-graph exception hierarchy.

All public exceptions inherit from BldrGraphError, giving callers a single
base class to catch when they want to handle any bldr-graph failure
without swallowing unrelated errors.
"""


class BldrGraphError(Exception):
    """Base exception for all bldr-graph errors."""


class IdentParseError(BldrGraphError, ValueError):
    """Raised when a package identifier cannot be parsed.

    An identifier must have the shape ``origin/name`` or
    ``origin/name/version/release`` (``origin/name/version`` is accepted
    as a partial identifier). Empty parts are rejected.
    """


class PackageNotFoundError(BldrGraphError, LookupError):
    """Raised when the package store has no package with an exact identifier."""

    def __init__(self, ident: str) -> None:
        super().__init__(f"No matching package found for {ident}")
        self.ident = ident


class DataStoreError(BldrGraphError):
    """Raised when the package store cannot be loaded.

    Covers missing data files, malformed JSON, and package records with
    missing or unparseable identifiers.
    """


class ConfigError(BldrGraphError):
    """Raised when a configuration file is missing, unreadable or invalid."""
