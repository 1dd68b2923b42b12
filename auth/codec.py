"""
auth/codec.py -- Length-prefixed record encoding for the store file.

Wire format (one record, repeated with no separator, header or checksum):

    u8 key_length | key bytes | u8 value_length | value bytes

The file has no integrity markers, so every length byte read from disk is
untrusted. decode() bounds-checks each prefix against the buffer and raises
CorruptStore instead of returning a short or shifted slice.

Layer rule: imports only core/.
"""

from __future__ import annotations

from collections.abc import Iterator

from auth.models import Record
from core.errors import CorruptStore, InvalidInput

MAX_FIELD_LENGTH = 255


def encode(key: bytes, value: bytes) -> bytes:
    """Return the on-disk bytes for one record.

    Raises InvalidInput if either field is longer than MAX_FIELD_LENGTH.
    """
    if len(key) > MAX_FIELD_LENGTH or len(value) > MAX_FIELD_LENGTH:
        raise InvalidInput(f"Key and value have to be at most {MAX_FIELD_LENGTH} bytes each.")
    return bytes([len(key)]) + key + bytes([len(value)]) + value


def _read_field(buffer: bytes | bytearray, offset: int) -> tuple[bytes, int]:
    if offset >= len(buffer):
        raise CorruptStore(f"Missing length byte at offset {offset} (buffer is {len(buffer)} bytes).")
    length = buffer[offset]
    start = offset + 1
    end = start + length
    if end > len(buffer):
        raise CorruptStore(
            f"Field at offset {offset} declares {length} bytes but only {len(buffer) - start} remain."
        )
    return bytes(buffer[start:end]), end


def decode(buffer: bytes | bytearray, offset: int = 0) -> tuple[bytes, bytes, int]:
    """Decode the record starting at offset.

    Returns (key, value, next_offset). Raises CorruptStore if a length prefix
    is missing or its payload would run past the end of buffer.
    """
    key, offset = _read_field(buffer, offset)
    value, offset = _read_field(buffer, offset)
    return key, value, offset


def iter_records(buffer: bytes | bytearray) -> Iterator[tuple[int, Record, int]]:
    """Walk every record in buffer, yielding (offset, record, next_offset).

    Stops when the offset reaches len(buffer). Corruption anywhere along the
    walk raises CorruptStore at the point it is reached.
    """
    offset = 0
    while offset < len(buffer):
        key, value, next_offset = decode(buffer, offset)
        yield offset, Record(key=key, value=value), next_offset
        offset = next_offset
