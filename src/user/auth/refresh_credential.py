"""
Refresh credential and its transport encoding.

A refresh credential is the pair (id, origin). On the wire it travels as
standard base64 of ``"<uuid>|<origin>"``; the same bytes are what the verifier
hashes, so the encoding is also the credential's canonical form.
"""

import base64
import binascii
from dataclasses import dataclass
from uuid import UUID, uuid4

SEPARATOR = "|"


class RefreshCredentialDecodeError(ValueError):
    """The transport string is not a valid encoded refresh credential."""


@dataclass(frozen=True, slots=True)
class RefreshCredential:
    id: UUID
    origin: str

    def __post_init__(self) -> None:
        if SEPARATOR in self.origin:
            raise ValueError(
                f"Refresh credential origin must not contain {SEPARATOR!r}"
            )

    @classmethod
    def generate(cls, origin: str) -> "RefreshCredential":
        return cls(id=uuid4(), origin=origin)

    def to_text(self) -> str:
        return f"{self.id}{SEPARATOR}{self.origin}"

    def to_bytes(self) -> bytes:
        return self.to_text().encode("utf-8")


def encode_refresh_credential(credential: RefreshCredential) -> str:
    return base64.b64encode(credential.to_bytes()).decode("ascii")


def decode_refresh_credential(text: str) -> RefreshCredential:
    """
    Reverse encode_refresh_credential.

    Raises:
        RefreshCredentialDecodeError: malformed base64, non UTF-8 payload,
            separator count other than one, or an id that is not a UUID.
    """
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RefreshCredentialDecodeError("Malformed base64 payload") from exc

    try:
        decoded = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RefreshCredentialDecodeError("Payload is not valid UTF-8") from exc

    parts = decoded.split(SEPARATOR)
    if len(parts) != 2:
        raise RefreshCredentialDecodeError("Expected exactly one separator")

    id_part, origin = parts
    try:
        credential_id = UUID(id_part)
    except ValueError as exc:
        raise RefreshCredentialDecodeError("Identifier is not a valid UUID") from exc

    return RefreshCredential(id=credential_id, origin=origin)
