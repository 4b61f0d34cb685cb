"""API token hashing helpers.

Tokens are issued outside the gateway; only their SHA-256 digest is ever
stored. The gateway hashes the presented secret and looks the digest up.
"""

import hashlib
import secrets


def hash_api_token(raw_token: str) -> str:
    """One-way SHA-256 hash for API token storage.

    We use SHA-256 (not Argon2) because we need to look up tokens
    by their hash on every request — it must be deterministic and fast.
    The raw token has 256 bits of entropy, so brute-force is infeasible.
    """
    return hashlib.sha256(raw_token.encode()).hexdigest()


def generate_api_token() -> str:
    """Generate a 256-bit API token as 64 hex characters."""
    return secrets.token_hex(32)
