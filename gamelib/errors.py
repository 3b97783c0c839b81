"""
Error taxonomy for gamelib.

Every failure the core reports is a GameLibError subclass with a stable
``kind``. Transports map each kind to its own externally observable
status; the CLI maps them to exit codes (see exit_codes.py).
"""

from typing import Optional


class GameLibError(Exception):
    """Base class for all core failures."""

    kind = "error"
    retryable = False

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message())

    def default_message(self) -> str:
        return self.kind

    def to_dict(self) -> dict:
        return {
            'error': str(self),
            'type': self.kind,
            'retryable': self.retryable,
        }


class InvalidVersion(GameLibError):
    """Version string does not follow MAJOR.MINOR.PATCH[-PRE][+BUILD]."""
    kind = "invalid_version"


class DuplicateVersion(GameLibError):
    """A release with the same major.minor.patch already exists."""
    kind = "duplicate_version"


class Forbidden(GameLibError):
    kind = "forbidden"

    def default_message(self) -> str:
        return "Forbidden"


class LastOwnerViolation(GameLibError):
    kind = "last_owner"

    def default_message(self) -> str:
        return "Cannot remove the last owner of a project"


class RevisionConflict(GameLibError):
    """Another writer took the revision number; the caller should retry."""
    kind = "revision_conflict"
    retryable = True


class InvalidArtifact(GameLibError):
    kind = "invalid_artifact"


class UnknownAuthor(GameLibError):
    kind = "unknown_author"


class NotFound(GameLibError):
    kind = "not_found"


class Unavailable(GameLibError):
    """Storage was busy or locked past the configured timeout."""
    kind = "unavailable"
    retryable = True


class InvalidName(GameLibError):
    kind = "invalid_name"


class NameTaken(GameLibError):
    kind = "name_taken"


class InvalidRevision(GameLibError):
    kind = "invalid_revision"


class InvalidQuery(GameLibError):
    """Listing parameters out of range or contradictory."""
    kind = "invalid_query"


ALL_ERRORS = (
    InvalidVersion,
    DuplicateVersion,
    Forbidden,
    LastOwnerViolation,
    RevisionConflict,
    InvalidArtifact,
    UnknownAuthor,
    NotFound,
    Unavailable,
    InvalidName,
    NameTaken,
    InvalidRevision,
    InvalidQuery,
)
