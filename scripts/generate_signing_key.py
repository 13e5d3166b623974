"""
Print a fresh random key for JWT_SIGNING_KEY.

Usage: python -m scripts.generate_signing_key [--bytes N]
"""

import argparse
import base64
import secrets

DEFAULT_KEY_BYTES = 64


def generate_signing_key(length: int = DEFAULT_KEY_BYTES) -> str:
    if length < 32:
        raise ValueError("Signing keys shorter than 32 bytes are not accepted")
    return base64.b64encode(secrets.token_bytes(length)).decode("ascii")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--bytes", type=int, default=DEFAULT_KEY_BYTES)
    args = parser.parse_args()
    print(generate_signing_key(args.bytes))
