"""
Session Transcript Construction

The session transcript binds a presentment to one verifier session. It
follows the ISO 18013-5 SessionTranscript shape

    [DeviceEngagementBytes, EReaderKeyBytes, Handover]

where the handover slot selects the flow. Only the Apple identity
presentment handover is defined here; the engagement slots are null in
that flow. The CBOR encoding of the transcript is both hashed into the
envelope's infoHash and fed to HPKE, so it must be byte-exact.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import cbor2

from .errors import ConstructionError

logger = logging.getLogger(__name__)

APPLE_HANDOVER_V1 = "AppleIdentityPresentment_1.0"


class SessionTranscript(ABC):
    """
    Base class for session transcripts.

    Subclasses provide the handover structure; engagement slots default to
    null for flows without device or reader engagement.
    """

    device_engagement: Any = None
    e_reader_key: Any = None

    @abstractmethod
    def handover_structure(self) -> list[Any]:
        """Return the handover array for this transcript variant"""

    def to_structure(self) -> list[Any]:
        return [self.device_engagement, self.e_reader_key, self.handover_structure()]

    def to_cbor(self) -> bytes:
        """
        Serialize to canonical CBOR

        Raises:
            ConstructionError: If the structure cannot be encoded
        """
        try:
            return cbor2.dumps(self.to_structure(), canonical=True)
        except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
            raise ConstructionError(f"error encoding transcript: {e}") from e


@dataclass(frozen=True)
class AppleHandover(SessionTranscript):
    """
    Apple identity presentment handover.

    Handover array: [version tag, nonce, merchant id, team id, requester key digest]
    """

    nonce: bytes
    merchant_id: str
    team_id: str
    requester_key_digest: bytes
    version: str = APPLE_HANDOVER_V1

    def __post_init__(self):
        if not self.nonce:
            raise ConstructionError("nonce must not be empty")
        if not self.requester_key_digest:
            raise ConstructionError("requester key digest must not be empty")
        if not self.merchant_id or not self.team_id:
            raise ConstructionError("merchant and team identifiers must not be empty")

    def handover_structure(self) -> list[Any]:
        return [
            self.version,
            bytes(self.nonce),
            self.merchant_id,
            self.team_id,
            bytes(self.requester_key_digest),
        ]


def build_transcript(
    merchant_id: str, team_id: str, nonce: bytes, requester_key_digest: bytes
) -> bytes:
    """
    Build the CBOR session transcript for an Apple identity presentment.

    Args:
        merchant_id: Merchant identifier agreed with the device
        team_id: Team (relying party) identifier
        nonce: Per-session nonce sent to the device
        requester_key_digest: Digest of the verifier's public key encoding

    Returns:
        Canonical CBOR encoding of the transcript

    Raises:
        ConstructionError: If an input is empty or encoding fails
    """
    transcript = AppleHandover(
        nonce=nonce,
        merchant_id=merchant_id,
        team_id=team_id,
        requester_key_digest=requester_key_digest,
    ).to_cbor()
    logger.debug(f"Built session transcript ({len(transcript)} bytes)")
    return transcript
