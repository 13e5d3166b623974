import hashlib
from uuid import uuid4

import pytest

from src.user.auth.refresh_credential import RefreshCredential
from src.user.auth.security import (
    derive_verification_input,
    hash_refresh_credential,
    verify_refresh_credential,
)


def test_verification_input_is_sha512_of_canonical_bytes() -> None:
    credential = RefreshCredential(id=uuid4(), origin="10.0.0.1")

    digest = derive_verification_input(credential)

    assert len(digest) == 64
    assert digest == hashlib.sha512(f"{credential.id}|10.0.0.1".encode()).digest()


@pytest.mark.asyncio
async def test_hash_verifies_its_own_credential() -> None:
    credential = RefreshCredential.generate("10.0.0.1")

    stored = await hash_refresh_credential(credential)

    assert await verify_refresh_credential(credential, stored) is True


@pytest.mark.asyncio
async def test_hash_is_salted() -> None:
    credential = RefreshCredential.generate("10.0.0.1")

    assert await hash_refresh_credential(credential) != await hash_refresh_credential(
        credential
    )


@pytest.mark.asyncio
async def test_other_id_does_not_verify() -> None:
    credential = RefreshCredential.generate("10.0.0.1")
    stored = await hash_refresh_credential(credential)

    other = RefreshCredential(id=uuid4(), origin=credential.origin)

    assert await verify_refresh_credential(other, stored) is False


@pytest.mark.asyncio
async def test_other_origin_does_not_verify() -> None:
    credential = RefreshCredential.generate("10.0.0.1")
    stored = await hash_refresh_credential(credential)

    tampered = RefreshCredential(id=credential.id, origin="10.0.0.2")

    assert await verify_refresh_credential(tampered, stored) is False
