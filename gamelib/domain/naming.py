"""
Naming rules shared by usernames, project names and package names.
"""

from ..errors import InvalidName

MAX_NAME_LENGTH = 64


def validate_name(name: str, what: str = "name") -> str:
    """
    Check a user, project or package name.

    Rules: non-empty, at most MAX_NAME_LENGTH characters, no surrounding
    whitespace, no control characters, no '/'.

    Returns:
        The name, unchanged

    Raises:
        InvalidName: If any rule is violated
    """
    if not isinstance(name, str) or not name:
        raise InvalidName(f"{what} must be a non-empty string")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidName(f"{what} is longer than {MAX_NAME_LENGTH} characters: {name!r}")
    if name != name.strip():
        raise InvalidName(f"{what} has leading or trailing whitespace: {name!r}")
    if '/' in name:
        raise InvalidName(f"{what} may not contain '/': {name!r}")
    if any(ord(c) < 32 or ord(c) == 127 for c in name):
        raise InvalidName(f"{what} contains control characters: {name!r}")
    return name
