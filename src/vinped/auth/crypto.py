from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from functools import lru_cache

SCHEME = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 210_000


def _b64e(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64d(s: str) -> bytes:
    pad = "=" * ((4 - (len(s) % 4)) % 4)
    return base64.urlsafe_b64decode((s + pad).encode("utf-8"))


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS) -> str:
    """
    PBKDF2-SHA256 password hash:
      pbkdf2_sha256$<iterations>$<salt_b64>$<hash_b64>

    A fresh salt is drawn on every call, so hashing the same password twice
    never yields the same artifact. `iterations` is the work factor.
    """
    if not password:
        raise ValueError("password must be non-empty")
    if iterations < 1:
        raise ValueError("iterations must be positive")
    salt = secrets.token_bytes(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, iterations, dklen=32
    )
    return f"{SCHEME}${iterations}${_b64e(salt)}${_b64e(dk)}"


def verify_password(password: str, encoded: str) -> bool:
    # Malformed artifacts are indistinguishable from a wrong password.
    try:
        scheme, iters_s, salt_b64, hash_b64 = encoded.split("$", 3)
        if scheme != SCHEME:
            return False
        iters = int(iters_s)
        if iters < 1:
            return False
        salt = _b64d(salt_b64)
        expected = _b64d(hash_b64)
        if not salt or not expected:
            return False
        dk = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, iters, dklen=len(expected)
        )
        return hmac.compare_digest(dk, expected)
    except (AttributeError, TypeError, ValueError):
        return False


@lru_cache
def dummy_password_hash(iterations: int = DEFAULT_ITERATIONS) -> str:
    # Verified against when the email is unknown, so login costs the same
    # whether or not the account exists.
    return hash_password(secrets.token_urlsafe(16), iterations=iterations)


def hash_session_token(token: str) -> str:
    # Sessions are keyed by a digest of the bearer token, never the token itself.
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
