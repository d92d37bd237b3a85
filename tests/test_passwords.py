import pytest

from app.utils.passwords import (
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)

pytestmark = pytest.mark.unit


def test_hash_format_and_verification():
    hashed = hash_password("correct horse")
    assert hashed.startswith("scrypt:")
    assert "correct horse" not in hashed
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_salt_is_random():
    assert hash_password("same") != hash_password("same")


def test_empty_hash_never_verifies():
    assert verify_password("anything", "") is False


@pytest.mark.asyncio
async def test_async_wrappers():
    hashed = await hash_password_async("s3cret")
    assert await verify_password_async("s3cret", hashed)
    assert not await verify_password_async("other", hashed)
