"""Token hashing helpers."""

import hashlib

from gateway.core.security import generate_api_token, hash_api_token


def test_hash_is_deterministic():
    secret = generate_api_token()
    assert hash_api_token(secret) == hash_api_token(secret)


def test_hash_is_sha256_hex():
    assert hash_api_token("abc") == hashlib.sha256(b"abc").hexdigest()
    assert len(hash_api_token("abc")) == 64


def test_hash_differs_per_secret():
    assert hash_api_token("secret-a") != hash_api_token("secret-b")


def test_generated_tokens_are_unique_hex():
    tokens = {generate_api_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == 64
        int(token, 16)
