"""
Exceptions raised by the multiset hash package.
"""


class MultisetHashError(Exception):
    """Base class for multiset hash errors."""


class ProtocolViolation(MultisetHashError, RuntimeError):
    """
    Raised when the hasher is driven out of order.

    Happens when `add`, `finalize`, `finalize_and_reset` or a merge is called
    while an element fed through `update` has not been committed with
    `end_update`, or when an instance is used after `finalize()` consumed it.
    The pending element is never committed on the caller's behalf.
    """


class InvalidEncoding(MultisetHashError, ValueError):
    """Raised when bytes are not a canonical ristretto255 encoding."""
