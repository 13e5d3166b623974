from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import cast
from uuid import UUID

import jwt

from src.core.utils.datetime_utils import get_utc_now
from src.main.config import config
from src.user.auth.exceptions import InvalidTokenException
from src.user.auth.jwt_payload_schema import AccessTokenPayload

REQUIRED_CLAIMS = ["sub", "refr", "exp"]


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    subject: str
    refresh_id: UUID


class AccessTokenSigner:
    """
    Mints and validates access tokens with one symmetric key and one
    algorithm. There is no negotiation: a token whose header names any other
    algorithm is rejected before the signature is even looked at.
    """

    def __init__(
        self, signing_key: bytes, algorithm: str, expire_minutes: int
    ) -> None:
        self._signing_key = signing_key
        self._algorithm = algorithm
        self._lifetime = timedelta(minutes=expire_minutes)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def sign(self, subject: str, refresh_id: UUID) -> str:
        """
        Create an access token paired with the given refresh credential id.

        Args:
            subject: User ID placed in the 'sub' claim
            refresh_id: ID of the refresh credential issued alongside

        Returns:
            str: Encoded JWT
        """
        now = get_utc_now()
        payload: AccessTokenPayload = {
            "sub": subject,
            "refr": str(refresh_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._lifetime).timestamp()),
        }
        return jwt.encode(dict(payload), self._signing_key, algorithm=self._algorithm)

    def verify(self, token: str) -> AccessTokenClaims:
        """
        Validate signature, algorithm, expiry and required claims.

        Raises:
            InvalidTokenException: on any failure
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError:
            raise InvalidTokenException("malformed access token")

        if header.get("alg") != self._algorithm:
            raise InvalidTokenException(
                "unexpected access token algorithm", alg=header.get("alg")
            )

        try:
            decoded = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenException("access token expired")
        except jwt.PyJWTError as exc:
            raise InvalidTokenException(
                "access token rejected", error=type(exc).__name__
            )

        payload = cast(AccessTokenPayload, decoded)
        subject = payload["sub"]
        refresh_id = payload["refr"]
        if not isinstance(subject, str) or not isinstance(refresh_id, str):
            raise InvalidTokenException("access token claims have wrong types")

        try:
            return AccessTokenClaims(subject=subject, refresh_id=UUID(refresh_id))
        except ValueError:
            raise InvalidTokenException("paired refresh id is not a UUID")


@lru_cache
def get_access_token_signer() -> AccessTokenSigner:
    """Process-wide signer built once from configuration."""
    return AccessTokenSigner(
        signing_key=config.jwt.signing_key,
        algorithm=config.jwt.ALGORITHM,
        expire_minutes=config.jwt.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
