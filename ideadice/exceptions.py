"""Exception classes shared by the IdeaDice modules.

Exception Hierarchy:
    Exception (built-in)
    └── IdeaDiceError - Base for all application errors
        └── StorageError - State file could not be read or written

Nothing raised here is fatal to a writing session. Callers that persist
state catch ``StorageError``, log it and carry on with what is in memory.
"""


class IdeaDiceError(Exception):
    """Base exception for IdeaDice errors."""

    pass


class StorageError(IdeaDiceError):
    """
    Raised when the state file cannot be loaded or saved.

    Covers unreadable or malformed JSON, I/O failures (missing directory,
    permissions, full disk) and values that cannot be serialized.
    """

    pass
