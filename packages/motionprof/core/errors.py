"""Exception types for motionprof.

Rejected edits and stale node references are ordinary outcomes reported as
return values. Exceptions are reserved for I/O and malformed input.
"""


class MotionProfileError(Exception):
    """Base class for motionprof errors."""

    pass


class PersistenceError(MotionProfileError):
    """Raised when a document file cannot be read, parsed, or written."""

    pass
