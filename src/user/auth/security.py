"""
One-way binding between a refresh credential and its stored proof.

The credential bytes are first reduced to a fixed-size SHA-512 digest, then the
digest is hashed with the adaptive Argon2 context. Only the Argon2 output is
ever persisted.
"""

import hashlib

from src.core.utils.security import hash_secret, verify_secret
from src.user.auth.refresh_credential import RefreshCredential


def derive_verification_input(credential: RefreshCredential) -> bytes:
    """Fixed-length (64 byte) digest of the credential's id and origin."""
    return hashlib.sha512(credential.to_bytes()).digest()


async def hash_refresh_credential(credential: RefreshCredential) -> str:
    return await hash_secret(derive_verification_input(credential).hex())


async def verify_refresh_credential(
    credential: RefreshCredential, stored_hash: str
) -> bool:
    """
    True only if both the id and the origin match what was hashed at issuance.
    """
    return await verify_secret(
        derive_verification_input(credential).hex(), stored_hash
    )
