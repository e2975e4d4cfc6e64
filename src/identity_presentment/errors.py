"""
Error taxonomy for identity presentment verification.

Every failure raised by this package derives from PresentmentError and
carries a stable error code so callers can map it to a rejection without
parsing messages.
"""

from __future__ import annotations

PUBLIC_REJECTION_MESSAGE = "presentment rejected"


class PresentmentError(Exception):
    """Base exception for all presentment-related errors."""

    default_error_code = "PRESENTMENT_ERROR"

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize presentment error."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code

    @property
    def public_message(self) -> str:
        """Message safe to show to the presenting party.

        Does not reveal which check failed.
        """
        return PUBLIC_REJECTION_MESSAGE


class DecodeError(PresentmentError):
    """Raised when the envelope or decrypted plaintext is not valid CBOR of the expected shape."""

    default_error_code = "DECODE_ERROR"


class BindingError(PresentmentError):
    """Raised when infoHash or pkRHash does not match the locally derived value."""

    default_error_code = "BINDING_ERROR"

    def __init__(self, message: str, field: str, error_code: str | None = None) -> None:
        super().__init__(message, error_code)
        self.field = field


class DecryptError(PresentmentError):
    """Raised when the HPKE primitive rejects the ciphertext."""

    default_error_code = "DECRYPT_ERROR"


class ConstructionError(PresentmentError):
    """Raised when the session transcript cannot be encoded."""

    default_error_code = "CONSTRUCTION_ERROR"


class ConfigurationError(PresentmentError):
    """Raised for configuration-related errors."""

    default_error_code = "CONFIGURATION_ERROR"


class UnsupportedDigestAlgorithmError(ConfigurationError):
    """Raised when an unsupported hash algorithm is requested."""

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"Unsupported hash algorithm: {algorithm}")
        self.algorithm = algorithm
