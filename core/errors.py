"""
core/errors.py -- Error kinds raised by the credential store and hasher.

Recoverable (expected branches the caller handles):
  InvalidInput, AlreadyExists, NotFound

Unrecoverable for the current call (damaged data or broken backend):
  CorruptStore, HashingFault

The two groups must never be conflated: a CorruptStore is not "not found",
and a HashingFault is not "wrong password". Filesystem errors are not wrapped;
OSError propagates unchanged.
"""


class CredfileError(Exception):
    """Base class for every error raised by credfile."""


class InvalidInput(CredfileError, ValueError):
    """A key or value exceeds 255 bytes, or a constructor argument is invalid."""


class AlreadyExists(CredfileError):
    """add() was called with a key already present in the store."""


class NotFound(CredfileError, LookupError):
    """The key is not present in the store."""


class CorruptStore(CredfileError):
    """On-disk bytes do not match the length-prefixed record layout."""


class HashingFault(CredfileError):
    """A stored hash cannot be parsed, or the hashing backend failed."""
