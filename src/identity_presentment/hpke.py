"""
HPKE primitives used by identity presentment.

The verifier depends only on the Decryptor protocol so that it can be
exercised with a stub. HPKEDecryptor is the concrete implementation for
the Apple cipher suite: DHKEM(P-256, HKDF-SHA256), HKDF-SHA256,
AES-128-GCM in base mode, with the session transcript as HPKE info.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import cbor2
from cryptography.hazmat.primitives.asymmetric import ec
from pyhpke import AEADId, CipherSuite, KDFId, KEMId, KEMKey

from .digest import DEFAULT_DIGEST_ALGORITHM, DigestAlgorithm, digest
from .envelope import HPKEEnvelope, HPKEParams
from .errors import ConstructionError, DecryptError
from .keys import public_key_bytes
from .transcript import build_transcript

logger = logging.getLogger(__name__)

ENVELOPE_ALGORITHM = "HPKE"
HPKE_MODE_BASE = 0


def default_cipher_suite() -> CipherSuite:
    return CipherSuite.new(KEMId.DHKEM_P256_HKDF_SHA256, KDFId.HKDF_SHA256, AEADId.AES128_GCM)


@runtime_checkable
class Decryptor(Protocol):
    """Capability that opens an HPKE ciphertext"""

    def decrypt(
        self,
        ciphertext: bytes,
        sender_ephemeral_key: bytes,
        session_transcript: bytes,
        recipient_private_key: Any,
    ) -> bytes:
        """Return the plaintext or raise DecryptError"""
        ...


class HPKEDecryptor:
    """Opens HPKE base-mode ciphertexts with pyhpke"""

    def __init__(self, suite: CipherSuite | None = None):
        self.suite = suite or default_cipher_suite()

    def decrypt(
        self,
        ciphertext: bytes,
        sender_ephemeral_key: bytes,
        session_transcript: bytes,
        recipient_private_key: ec.EllipticCurvePrivateKey,
    ) -> bytes:
        """
        Decrypt an HPKE ciphertext

        Args:
            ciphertext: AEAD ciphertext including tag
            sender_ephemeral_key: Encapsulated key (pkEm)
            session_transcript: CBOR session transcript, bound as HPKE info
            recipient_private_key: Verifier's EC private key

        Returns:
            Decrypted plaintext

        Raises:
            DecryptError: If decapsulation or AEAD open fails
        """
        try:
            skr = KEMKey.from_pyca_cryptography_key(recipient_private_key)
            recipient = self.suite.create_recipient_context(
                sender_ephemeral_key, skr, info=session_transcript
            )
            return recipient.open(ciphertext)
        except Exception as e:
            # KEM and AEAD failures are reported identically
            raise DecryptError("ciphertext could not be opened") from e


class HPKEEncryptor:
    """
    Device-side sealing of an identity presentment.

    Produces an envelope that HPKEDecryptor and the verifier accept for the
    same merchant, team, nonce and recipient key.
    """

    def __init__(
        self,
        suite: CipherSuite | None = None,
        digest_algorithm: str | DigestAlgorithm = DEFAULT_DIGEST_ALGORITHM,
    ):
        self.suite = suite or default_cipher_suite()
        self.digest_algorithm = DigestAlgorithm.from_identifier(digest_algorithm)

    def seal_envelope(
        self,
        identity: Any,
        merchant_id: str,
        team_id: str,
        nonce: bytes,
        recipient_public_key: ec.EllipticCurvePublicKey,
    ) -> bytes:
        """
        Encrypt identity claims into CBOR envelope bytes

        Args:
            identity: Device response, as a dict or an object with to_dict()
            merchant_id: Merchant identifier
            team_id: Team identifier
            nonce: Nonce received from the verifier
            recipient_public_key: Verifier's EC public key

        Returns:
            CBOR-encoded HPKEEnvelope
        """
        if hasattr(identity, "to_dict"):
            identity = identity.to_dict()

        pk_r = public_key_bytes(recipient_public_key)
        pk_r_hash = digest(pk_r, self.digest_algorithm)
        transcript = build_transcript(merchant_id, team_id, nonce, pk_r_hash)

        try:
            plaintext = cbor2.dumps({"identity": identity})
        except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
            raise ConstructionError(f"error encoding identity: {e}") from e

        try:
            pkr = KEMKey.from_pyca_cryptography_key(recipient_public_key)
            enc, sender = self.suite.create_sender_context(pkr, info=transcript)
            ciphertext = sender.seal(plaintext)
        except Exception as e:
            raise ConstructionError(f"error sealing identity: {e}") from e

        envelope = HPKEEnvelope(
            algorithm=ENVELOPE_ALGORITHM,
            params=HPKEParams(
                mode=HPKE_MODE_BASE,
                pk_em=enc,
                pk_r_hash=pk_r_hash,
                info_hash=digest(transcript, self.digest_algorithm),
            ),
            data=ciphertext,
        )
        logger.debug(f"Sealed identity envelope ({len(ciphertext)} bytes ciphertext)")
        return envelope.to_cbor()
