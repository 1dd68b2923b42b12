"""
auth/store.py -- Flat-file persistence for credentials.

Pattern: Repository over a single append-only file. RecordFile is the scan
engine (load, walk, append, splice); CredentialStore and PlainStore differ
only in what they put in the value field:

  CredentialStore   value = hash_password(secret); check() verifies
  PlainStore        value = secret verbatim; get() returns it

File handling:
  The file is opened "a+b" (read + append, created if absent). Every write
  lands at end-of-file no matter where the last read left the cursor, so
  reads always seek(0) first and nothing relies on the cursor after a write.

  The scratch buffer is a bytearray owned by the instance and refilled on
  every scan. Instances are single-threaded and assume exclusive ownership
  of the file: no locking, no detection of external writers.

remove():
  Default is truncate-then-rewrite. A crash between the truncate and the
  write loses every record. With atomic_rewrite=True the spliced bytes go to
  a temp file in the same directory which is fsynced and os.replace()d over
  the store instead.

Layer rule: imports only core/ and sibling auth/ modules.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from auth.codec import MAX_FIELD_LENGTH, encode, iter_records
from auth.models import Record
from auth.passwords import hash_password, verify_password
from core.config import Settings, get_settings
from core.errors import AlreadyExists, CorruptStore, HashingFault, InvalidInput, NotFound

logger = logging.getLogger("credfile.store")


def _encode_fields(*fields: str) -> list[bytes]:
    """UTF-8 encode each field.

    Raises InvalidInput if a field cannot be encoded or exceeds 255 bytes.
    """
    try:
        encoded = [field.encode("utf-8") for field in fields]
    except UnicodeEncodeError as exc:
        raise InvalidInput("Key and value have to be valid UTF-8 text.") from exc
    if any(len(field) > MAX_FIELD_LENGTH for field in encoded):
        raise InvalidInput(f"Key and value have to be at most {MAX_FIELD_LENGTH} bytes each.")
    return encoded


# ---------------------------------------------------------------------------
# Scan engine
# ---------------------------------------------------------------------------


class RecordFile:
    """Shared scan/append/splice engine over a length-prefixed record file.

    Not used directly; see CredentialStore and PlainStore.
    """

    def __init__(self, path: str | os.PathLike, atomic_rewrite: bool = False) -> None:
        self._path = Path(path)
        self._atomic_rewrite = atomic_rewrite
        self._file = open(self._path, "a+b")
        self._buf = bytearray()
        logger.debug("Opened store %s (atomic_rewrite=%s)", self._path, atomic_rewrite)

    @classmethod
    def open(cls, path: str | os.PathLike, atomic_rewrite: bool = False) -> "RecordFile":
        """Open the store at path, creating the file if it does not exist."""
        return cls(path, atomic_rewrite=atomic_rewrite)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RecordFile":
        """Open the store configured by CREDFILE_STORE_PATH / CREDFILE_ATOMIC_REWRITE."""
        settings = settings or get_settings()
        return cls(settings.store_path, atomic_rewrite=settings.atomic_rewrite)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def _load(self) -> None:
        self._file.seek(0)
        self._buf[:] = self._file.read()

    def _records(self):
        """Load the file and yield (offset, record) for each record in order."""
        self._load()
        try:
            for offset, record, _ in iter_records(self._buf):
                yield offset, record
        except CorruptStore:
            logger.warning("Corrupt record data in %s", self._path)
            raise

    def _find(self, key: bytes) -> tuple[int, Record] | None:
        for offset, record in self._records():
            if record.key == key:
                return offset, record
        return None

    def _ensure_absent(self, key: bytes) -> None:
        if self._find(key) is not None:
            raise AlreadyExists("Key already exists.")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _append(self, data: bytes) -> None:
        self._file.write(data)
        self._file.flush()

    def remove(self, key: str) -> None:
        """Erase the record for key and rewrite the file without it.

        Raises NotFound (file untouched) if key is not present.
        """
        (key_bytes,) = _encode_fields(key)
        found = self._find(key_bytes)
        if found is None:
            raise NotFound("Key to remove not found.")
        offset, record = found
        del self._buf[offset : offset + record.encoded_size]
        if self._atomic_rewrite:
            self._replace_file()
        else:
            self._rewrite_in_place()
        logger.debug("Removed key %r from %s", key, self._path)

    def _rewrite_in_place(self) -> None:
        self._file.truncate(0)
        self._append(self._buf)

    def _replace_file(self) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(self._buf)
                tmp.flush()
                os.fsync(tmp.fileno())
            shutil.copymode(self._path, tmp_name)
            os.replace(tmp_name, self._path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        self._file.close()
        self._file = open(self._path, "a+b")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def keys(self) -> list[str]:
        """Return every key in file order."""
        keys = []
        for _, record in self._records():
            try:
                keys.append(record.key.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise CorruptStore(f"Key is not valid UTF-8 in {self._path}.") from exc
        return keys

    def __len__(self) -> int:
        return sum(1 for _ in self._records())

    def __contains__(self, key: str) -> bool:
        try:
            (key_bytes,) = _encode_fields(key)
        except InvalidInput:
            return False
        return self._find(key_bytes) is not None

    def close(self) -> None:
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Hashed values
# ---------------------------------------------------------------------------


class CredentialStore(RecordFile):
    """File-backed mapping from username to password hash.

    Usage:
        with CredentialStore.open("users.suc") as store:
            store.add("alice", "correct horse")
            store.check("alice", "correct horse")   # True
            store.check("alice", "wrong")           # False
            store.remove("alice")
    """

    def add(self, key: str, secret: str) -> None:
        """Hash secret and append it under key.

        Raises InvalidInput if either exceeds 255 bytes and AlreadyExists if
        key is present. Nothing is written on either failure.
        """
        key_bytes, _ = _encode_fields(key, secret)
        self._ensure_absent(key_bytes)
        hashed = hash_password(secret).encode("ascii")
        self._append(encode(key_bytes, hashed))
        logger.debug("Added key %r to %s", key, self._path)

    def check(self, key: str, secret: str) -> bool:
        """Return True if secret matches the stored hash for key.

        Raises NotFound if key is absent. A stored hash that cannot be parsed
        raises HashingFault; only a real mismatch returns False.
        """
        key_bytes, _ = _encode_fields(key, secret)
        stored = self._get(key_bytes)
        if stored is None:
            raise NotFound("Key is not registered.")
        return verify_password(secret, stored)

    def _get(self, key: bytes) -> str | None:
        found = self._find(key)
        if found is None:
            return None
        try:
            return found[1].value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise HashingFault("Stored password hash is not ASCII.") from exc


# ---------------------------------------------------------------------------
# Raw values
# ---------------------------------------------------------------------------


class PlainStore(RecordFile):
    """Same file format as CredentialStore, but values are stored verbatim.

    For secrets the caller must read back (API tokens for outbound calls and
    the like). Never use it for user passwords.
    """

    def add(self, key: str, secret: str) -> None:
        """Append secret under key. Same errors as CredentialStore.add()."""
        key_bytes, secret_bytes = _encode_fields(key, secret)
        self._ensure_absent(key_bytes)
        self._append(encode(key_bytes, secret_bytes))
        logger.debug("Added key %r to %s", key, self._path)

    def get(self, key: str) -> str | None:
        """Return the stored secret for key, or None if key is absent."""
        (key_bytes,) = _encode_fields(key)
        found = self._find(key_bytes)
        if found is None:
            return None
        try:
            return found[1].value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptStore(f"Stored value is not valid UTF-8 in {self._path}.") from exc
