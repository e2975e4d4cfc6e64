"""
Identity presentment verification.

parse_envelope() runs the full admission and decryption sequence:

1. decode the CBOR envelope
2. rebuild the session transcript from local values and the session nonce
3. check infoHash against the transcript digest
4. check pkRHash against the verifier key digest
5. open the ciphertext with the injected decryptor
6. decode the {"identity": ...} plaintext

Both hash checks run before any decryption attempt. No state is kept
between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives.asymmetric import ec

from .claims import DeviceResponse, PresentmentClaims
from .config import PresentmentSettings
from .digest import DEFAULT_DIGEST_ALGORITHM, DigestAlgorithm, constant_time_compare, digest
from .envelope import HPKEEnvelope
from .errors import BindingError, DecodeError, DecryptError
from .hpke import Decryptor, HPKEDecryptor
from .keys import generate_nonce, public_key_bytes
from .transcript import build_transcript

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresentmentResult:
    """Verified claims together with the transcript they were bound to"""

    claims: DeviceResponse
    session_transcript: bytes

    def __iter__(self):
        # Allows `claims, transcript = parse_envelope(...)`
        yield self.claims
        yield self.session_transcript


def parse_envelope(
    envelope_bytes: bytes,
    merchant_id: str,
    team_id: str,
    verifier_private_key: Any,
    verifier_public_key: bytes,
    nonce: bytes,
    decryptor: Decryptor | None = None,
    digest_algorithm: str | DigestAlgorithm = DEFAULT_DIGEST_ALGORITHM,
) -> PresentmentResult:
    """
    Verify and decrypt an identity presentment envelope.

    Args:
        envelope_bytes: CBOR envelope received from the device
        merchant_id: Merchant identifier
        team_id: Team identifier
        verifier_private_key: Private key handed to the decryptor
        verifier_public_key: Encoding of the verifier's public key (uncompressed point)
        nonce: Nonce generated for this session
        decryptor: HPKE capability, defaults to HPKEDecryptor
        digest_algorithm: Algorithm for infoHash and pkRHash

    Returns:
        PresentmentResult with the device response and session transcript

    Raises:
        DecodeError: Malformed envelope or plaintext
        BindingError: infoHash or pkRHash mismatch
        DecryptError: Ciphertext rejected by the decryptor
        ConstructionError: Transcript could not be built
    """
    algorithm = DigestAlgorithm.from_identifier(digest_algorithm)
    envelope = HPKEEnvelope.from_cbor(envelope_bytes)

    requester_key_digest = digest(verifier_public_key, algorithm)
    transcript = build_transcript(merchant_id, team_id, nonce, requester_key_digest)
    transcript_digest = digest(transcript, algorithm)
    logger.debug(f"Session transcript digest: {transcript_digest.hex()}")

    if not constant_time_compare(transcript_digest, envelope.params.info_hash):
        logger.warning(
            "Presentment binding failed: infoHash mismatch", extra={"error_code": "BINDING_ERROR"}
        )
        raise BindingError("infoHash mismatch", field="infoHash")

    if not constant_time_compare(requester_key_digest, envelope.params.pk_r_hash):
        logger.warning(
            "Presentment binding failed: recipient key mismatch",
            extra={"error_code": "BINDING_ERROR"},
        )
        raise BindingError("recipient key mismatch", field="pkRHash")

    decryptor = decryptor or HPKEDecryptor()
    try:
        plaintext = decryptor.decrypt(
            envelope.data, envelope.params.pk_em, transcript, verifier_private_key
        )
    except DecryptError:
        logger.warning("Presentment decryption failed", extra={"error_code": "DECRYPT_ERROR"})
        raise
    except Exception as e:
        logger.warning("Presentment decryption failed", extra={"error_code": "DECRYPT_ERROR"})
        raise DecryptError("ciphertext could not be opened") from e

    try:
        claims = PresentmentClaims.from_cbor(plaintext)
    except DecodeError:
        logger.warning(
            "Presentment plaintext could not be decoded", extra={"error_code": "DECODE_ERROR"}
        )
        raise

    logger.info(
        f"Presentment accepted: version={claims.identity.version}, "
        f"documents={len(claims.identity.documents)}"
    )
    return PresentmentResult(claims=claims.identity, session_transcript=transcript)


class PresentmentVerifier:
    """
    Verifier bound to configured identifiers and a key pair.

    Holds no per-session state; callers keep the nonce from new_nonce()
    and pass it back to parse().
    """

    def __init__(
        self,
        settings: PresentmentSettings,
        private_key: ec.EllipticCurvePrivateKey,
        decryptor: Decryptor | None = None,
    ):
        self.settings = settings
        self.private_key = private_key
        self.public_key_bytes = public_key_bytes(private_key)
        self.decryptor = decryptor or HPKEDecryptor()

    def new_nonce(self) -> bytes:
        """Generate the nonce to send to the device for a new session"""
        return generate_nonce(self.settings.nonce_length)

    def parse(self, envelope_bytes: bytes, nonce: bytes) -> PresentmentResult:
        """Verify and decrypt an envelope for the session identified by nonce"""
        return parse_envelope(
            envelope_bytes,
            merchant_id=self.settings.merchant_id,
            team_id=self.settings.team_id,
            verifier_private_key=self.private_key,
            verifier_public_key=self.public_key_bytes,
            nonce=nonce,
            decryptor=self.decryptor,
            digest_algorithm=self.settings.digest_algorithm,
        )
