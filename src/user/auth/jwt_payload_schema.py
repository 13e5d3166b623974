from typing import TypedDict


class AccessTokenPayload(TypedDict):
    """Claims carried by an access token"""

    sub: str  # User ID
    refr: str  # ID of the paired refresh credential
    exp: int  # Expiration timestamp
    iat: int  # Issued-at timestamp
