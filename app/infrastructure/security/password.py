"""Password hashing for user accounts (bcrypt over a SHA-256 pre-hash).

Bcrypt only reads the first 72 bytes of its input; hashing the password with
SHA-256 first gives bcrypt a fixed 44-byte input so long passphrases keep
all their entropy. Bcrypt is CPU-bound, so request handlers use the async
wrappers, which run it in a worker thread.
"""

import asyncio
import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def get_password_hash(password: str) -> str:
    """Return the bcrypt hash (with embedded salt) stored in usuarios.password."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Return True if plain_password matches hashed_password; malformed hashes never match."""
    if not hashed_password:
        return False
    try:
        return bool(bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str) -> str:
    """get_password_hash off the event loop."""
    return await asyncio.to_thread(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    """verify_password off the event loop."""
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)
