"""
Digest utility shared by transcript construction and binding verification.
"""

from __future__ import annotations

import hashlib
import hmac
from enum import Enum
from typing import Any, Callable

from .errors import UnsupportedDigestAlgorithmError


class DigestAlgorithm(Enum):
    """Hash algorithms accepted for binding commitments"""

    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"

    @classmethod
    def from_identifier(cls, algorithm: str | DigestAlgorithm) -> DigestAlgorithm:
        """
        Resolve an algorithm identifier such as "SHA-256" or "sha256".

        Raises:
            UnsupportedDigestAlgorithmError: If the identifier is not supported
        """
        if isinstance(algorithm, DigestAlgorithm):
            return algorithm
        normalized = str(algorithm).upper().replace("-", "").replace("_", "")
        for member in cls:
            if member.value.replace("-", "") == normalized:
                return member
        raise UnsupportedDigestAlgorithmError(str(algorithm))

    @property
    def digest_size(self) -> int:
        return _HASH_FUNCTIONS[self]().digest_size


_HASH_FUNCTIONS: dict[DigestAlgorithm, Callable[..., Any]] = {
    DigestAlgorithm.SHA256: hashlib.sha256,
    DigestAlgorithm.SHA384: hashlib.sha384,
    DigestAlgorithm.SHA512: hashlib.sha512,
}

DEFAULT_DIGEST_ALGORITHM = DigestAlgorithm.SHA256


def digest(data: bytes, algorithm: str | DigestAlgorithm = DEFAULT_DIGEST_ALGORITHM) -> bytes:
    """
    Compute the digest of a byte string.

    Args:
        data: Bytes to hash
        algorithm: Algorithm identifier (e.g. "SHA-256")

    Returns:
        Digest bytes

    Raises:
        UnsupportedDigestAlgorithmError: If the algorithm is not supported
    """
    hash_func = _HASH_FUNCTIONS[DigestAlgorithm.from_identifier(algorithm)]
    return hash_func(data).digest()


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """Constant-time comparison of byte strings"""
    return hmac.compare_digest(a, b)
