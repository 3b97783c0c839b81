"""
Standard exit codes for gamelib commands.

Following Unix/POSIX conventions for command-line tools. Every error kind
of the core has its own code, so scripts can tell failures apart without
parsing stderr.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
INVALID_VERSION = 64     # Version string does not parse
DUPLICATE_VERSION = 65   # major.minor.patch already published
FORBIDDEN = 66           # Acting user lacks the role
LAST_OWNER = 67          # Would remove the final owner
REVISION_CONFLICT = 68   # Revision number taken concurrently (retry)
INVALID_ARTIFACT = 69    # Empty url/filename/checksum or size <= 0
UNKNOWN_AUTHOR = 70      # Author username does not exist
NOT_FOUND = 71           # Unknown project/package/release/revision/user/image
UNAVAILABLE = 72         # Storage busy or locked (retry)
INVALID_NAME = 73        # Name violates naming rules
NAME_TAKEN = 74          # Name already used in its scope
INVALID_REVISION = 75    # Revision patch changes nothing
INVALID_QUERY = 76       # Bad listing limit, sort key or anchors
CONFIG_ERROR = 78        # Configuration file error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions, by class name
EXCEPTION_EXIT_CODES = {
    'InvalidVersion': INVALID_VERSION,
    'DuplicateVersion': DUPLICATE_VERSION,
    'Forbidden': FORBIDDEN,
    'LastOwnerViolation': LAST_OWNER,
    'RevisionConflict': REVISION_CONFLICT,
    'InvalidArtifact': INVALID_ARTIFACT,
    'UnknownAuthor': UNKNOWN_AUTHOR,
    'NotFound': NOT_FOUND,
    'Unavailable': UNAVAILABLE,
    'InvalidName': INVALID_NAME,
    'NameTaken': NAME_TAKEN,
    'InvalidRevision': INVALID_REVISION,
    'InvalidQuery': INVALID_QUERY,
    'ConfigError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Configuration error", CONFIG_ERROR)
