"""
Access token issuing.

Tokens are opaque random hex strings minted once per account at creation
time. They never expire and are never rotated.
"""
import secrets

ACCESS_TOKEN_BYTES = 128


def generate_access_token() -> str:
    """Return 256 hex characters drawn from the OS CSPRNG."""
    return secrets.token_hex(ACCESS_TOKEN_BYTES)
