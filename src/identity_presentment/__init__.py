"""
Apple Wallet Identity Presentment Verification

This package verifies and decrypts identity presentments sent by a
device in the Apple Wallet identity-verification flow, which builds on
the ISO/IEC 18013-5 mobile document handover model.

Components:
- digest: Hash utility for binding commitments
- transcript: Session transcript construction (AppleHandover)
- envelope: HPKE envelope wire types
- hpke: HPKE decrypt capability and device-side sealing
- claims: DeviceResponse claims types
- verifier: Envelope verification and decryption
- config: Verifier settings
- logging_config: Logging setup

References:
- Apple Developer Documentation - Verifying Wallet identity requests
- ISO/IEC 18013-5:2021 - Mobile driving licence (mDL) application
- RFC 9180 - Hybrid Public Key Encryption
"""

from .claims import DeviceResponse, Document, PresentmentClaims
from .config import PresentmentSettings, get_settings
from .digest import DigestAlgorithm, constant_time_compare, digest
from .envelope import HPKEEnvelope, HPKEParams
from .errors import (
    BindingError,
    ConfigurationError,
    ConstructionError,
    DecodeError,
    DecryptError,
    PresentmentError,
    UnsupportedDigestAlgorithmError,
)
from .hpke import Decryptor, HPKEDecryptor, HPKEEncryptor
from .keys import generate_nonce, load_private_key_pem, load_public_key_pem, public_key_bytes
from .logging_config import setup_logging
from .transcript import APPLE_HANDOVER_V1, AppleHandover, SessionTranscript, build_transcript
from .verifier import PresentmentResult, PresentmentVerifier, parse_envelope

__version__ = "1.0.0"
__all__ = [
    # Claims
    "DeviceResponse",
    "Document",
    "PresentmentClaims",
    # Configuration
    "PresentmentSettings",
    "get_settings",
    # Digest
    "DigestAlgorithm",
    "constant_time_compare",
    "digest",
    # Envelope
    "HPKEEnvelope",
    "HPKEParams",
    # Errors
    "BindingError",
    "ConfigurationError",
    "ConstructionError",
    "DecodeError",
    "DecryptError",
    "PresentmentError",
    "UnsupportedDigestAlgorithmError",
    # HPKE
    "Decryptor",
    "HPKEDecryptor",
    "HPKEEncryptor",
    # Keys
    "generate_nonce",
    "load_private_key_pem",
    "load_public_key_pem",
    "public_key_bytes",
    # Logging
    "setup_logging",
    # Transcript
    "APPLE_HANDOVER_V1",
    "AppleHandover",
    "SessionTranscript",
    "build_transcript",
    # Verification
    "PresentmentResult",
    "PresentmentVerifier",
    "parse_envelope",
]
