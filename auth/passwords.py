"""
auth/passwords.py -- Password hashing and verification.

Security design decisions:
  Backend: bcrypt, used directly (no passlib wrapper). Bcrypt's cost factor
       makes brute-force expensive for low-entropy secrets. The cost comes from
       core.config.get_settings().bcrypt_rounds unless passed explicitly.

  Pre-hash: bcrypt only accepts 72 bytes of input and bcrypt 5.x raises on
       anything longer. Secrets here may be up to 255 bytes, so the secret is
       reduced to base64(sha256(secret)) first: 44 ASCII bytes, no NULs, and
       every byte of the original secret stays significant.

  Format: "bcrypt-sha256" + the standard 60-char bcrypt modular-crypt string,
       e.g. bcrypt-sha256$2b$12$<22 salt chars><31 digest chars>. The tag
       names the pre-hash so a future scheme can be told apart. Salt and cost
       live inside the bcrypt part, so the string is self-describing.

  Faults: verify_password() returns False ONLY for a digest mismatch. An
       unknown tag, a malformed bcrypt string, or a backend ValueError raises
       HashingFault. A broken stored hash must never read as "wrong password".

Layer rule: imports only core/.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import re

import bcrypt

from core.config import get_settings
from core.errors import HashingFault

logger = logging.getLogger("credfile.passwords")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

HASH_SCHEME = "bcrypt-sha256"

_BCRYPT_RE = re.compile(r"\$2[aby]\$(0[4-9]|[12][0-9]|3[01])\$[./A-Za-z0-9]{53}")


def _prehash(secret: str) -> bytes:
    return base64.b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


def hash_password(secret: str, rounds: int | None = None) -> str:
    """Return a salted, self-describing hash of secret.

    A fresh random salt is generated on every call, so hashing the same
    secret twice yields two different strings that both verify.
    """
    cost = rounds if rounds is not None else _settings.bcrypt_rounds
    try:
        hashed = bcrypt.hashpw(_prehash(secret), bcrypt.gensalt(rounds=cost))
    except ValueError as exc:
        logger.warning("bcrypt refused to hash with cost %d", cost)
        raise HashingFault(f"bcrypt backend error: {exc}") from exc
    return f"{HASH_SCHEME}{hashed.decode('ascii')}"


def _split(hashed: str) -> bytes:
    """Strip the scheme tag and return the bcrypt part, validated."""
    scheme, sep, rest = hashed.partition("$")
    if scheme != HASH_SCHEME or not sep:
        raise HashingFault(f"Unrecognised hash scheme {scheme!r}.")
    inner = "$" + rest
    if not _BCRYPT_RE.fullmatch(inner):
        raise HashingFault("Malformed bcrypt hash string.")
    return inner.encode("ascii")


def verify_password(secret: str, hashed: str) -> bool:
    """Return True if secret matches hashed, False on a digest mismatch.

    Raises HashingFault if hashed cannot be parsed or bcrypt reports an error.
    """
    try:
        inner = _split(hashed)
        return bcrypt.checkpw(_prehash(secret), inner)
    except HashingFault:
        logger.warning("Stored password hash could not be parsed")
        raise
    except ValueError as exc:
        logger.warning("bcrypt backend error during verification")
        raise HashingFault(f"bcrypt backend error: {exc}") from exc
