"""
auth/models.py -- Domain dataclass for a stored record.

Pattern: Data class (pure data container, no I/O). The codec owns the byte
layout; stores do the work.

Layer rule: no imports from sessions/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    """One key/value pair as stored in the credential file.

    key is the UTF-8 username. For CredentialStore, value is the
    self-describing password hash; for PlainStore it is the secret verbatim.
    Both fields are at most 255 bytes because each is prefixed by one
    length byte on disk.
    """

    key: bytes
    value: bytes

    @property
    def encoded_size(self) -> int:
        """Bytes this record occupies on disk: two length bytes plus payloads."""
        return 2 + len(self.key) + len(self.value)
