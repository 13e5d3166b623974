import asyncio

from passlib.context import CryptContext
from pydantic import EmailStr

from loggers import get_logger

logger = get_logger(__name__)

secret_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=65536,  # 64 MB
    argon2__time_cost=3,
    argon2__parallelism=2,
)


async def hash_secret(secret: str | bytes) -> str:
    """
    Hash a secret with Argon2 in a worker thread.

    The salt is generated per call and embedded in the returned string, so
    hashing the same secret twice yields different outputs.
    """
    return await asyncio.to_thread(secret_context.hash, secret)


async def verify_secret(secret: str | bytes, hashed_secret: str) -> bool:
    """
    Check a secret against a stored Argon2 hash in a worker thread.

    A stored value that is not a recognised hash counts as a mismatch.
    """
    try:
        return await asyncio.to_thread(secret_context.verify, secret, hashed_secret)
    except ValueError:
        logger.warning("Stored hash has an unrecognised format")
        return False


def mask_email(email: str | EmailStr) -> str:
    """
    Mask an email address for logs: ``ab***@cd***``.
    """
    try:
        local, domain = str(email).split("@", 1)
        masked_local = (local[:2] + "***") if local else "*****"
        masked_domain = (domain[:2] + "***") if domain else "*****"
        return f"{masked_local}@{masked_domain}"
    except ValueError:
        return "***"
