"""
Password hashing helpers.

Hashes are salted scrypt in werkzeug's ``scrypt:N:r:p$salt$hash`` format;
verification is constant-time. Both calls are CPU bound, so the async
wrappers push them onto a worker thread to keep the event loop responsive.
"""

import asyncio

from werkzeug.security import check_password_hash, generate_password_hash

HASH_METHOD = "scrypt"
SALT_LENGTH = 16


def hash_password(plain_password: str) -> str:
    return generate_password_hash(
        plain_password, method=HASH_METHOD, salt_length=SALT_LENGTH
    )


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, plain_password)


async def hash_password_async(plain_password: str) -> str:
    return await asyncio.to_thread(hash_password, plain_password)


async def verify_password_async(plain_password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, password_hash)
