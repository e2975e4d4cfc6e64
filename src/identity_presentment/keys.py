"""
Key and nonce helpers for the verifier side.
"""

from __future__ import annotations

import os

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .errors import ConfigurationError

DEFAULT_NONCE_LENGTH = 64
MIN_NONCE_LENGTH = 16


def public_key_bytes(key: ec.EllipticCurvePublicKey | ec.EllipticCurvePrivateKey) -> bytes:
    """
    Encode an EC public key as an uncompressed SEC1 point.

    This is the encoding hashed into pkRHash and the transcript.
    """
    if isinstance(key, ec.EllipticCurvePrivateKey):
        key = key.public_key()
    return key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def generate_nonce(length: int = DEFAULT_NONCE_LENGTH) -> bytes:
    """
    Generate a per-session nonce

    Args:
        length: Number of random bytes

    Returns:
        Random bytes from the OS CSPRNG
    """
    if length < MIN_NONCE_LENGTH:
        raise ValueError(f"Nonce length must be at least {MIN_NONCE_LENGTH} bytes")
    return os.urandom(length)


def load_private_key_pem(data: bytes, password: bytes | None = None) -> ec.EllipticCurvePrivateKey:
    """Load an EC private key from PEM (SEC1 or PKCS#8)"""
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Failed to load private key: {e}") from e
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise ConfigurationError("Private key is not an EC key")
    return key


def load_public_key_pem(data: bytes) -> ec.EllipticCurvePublicKey:
    """Load an EC public key from a PEM SubjectPublicKeyInfo block"""
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Failed to load public key: {e}") from e
    if not isinstance(key, ec.EllipticCurvePublicKey):
        raise ConfigurationError("Public key is not an EC key")
    return key
