"""
HPKE envelope wire types.

The device sends a CBOR map:

    {
      "algorithm": tstr,
      "params": {"mode": uint, "pkEm": bstr, "pkRHash": bstr, "infoHash": bstr},
      "data": bstr
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import cbor2

from .errors import DecodeError


@dataclass(frozen=True)
class HPKEParams:
    """Binding parameters carried alongside the ciphertext"""

    mode: int
    pk_em: bytes
    pk_r_hash: bytes
    info_hash: bytes

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "pkEm": self.pk_em,
            "pkRHash": self.pk_r_hash,
            "infoHash": self.info_hash,
        }

    @classmethod
    def from_dict(cls, data: Any) -> HPKEParams:
        if not isinstance(data, dict):
            raise DecodeError("envelope params must be a map")
        mode = data.get("mode")
        if not isinstance(mode, int) or isinstance(mode, bool) or mode < 0:
            raise DecodeError("envelope params.mode must be an unsigned integer")
        return cls(
            mode=mode,
            pk_em=_require_bytes(data, "pkEm"),
            pk_r_hash=_require_bytes(data, "pkRHash"),
            info_hash=_require_bytes(data, "infoHash"),
        )


@dataclass(frozen=True)
class HPKEEnvelope:
    """Encrypted identity presentment as received from the device"""

    algorithm: str
    params: HPKEParams
    data: bytes

    def to_cbor(self) -> bytes:
        """Serialize to CBOR format"""
        return cbor2.dumps(
            {"algorithm": self.algorithm, "params": self.params.to_dict(), "data": self.data},
            canonical=True,
        )

    @classmethod
    def from_cbor(cls, data: bytes) -> HPKEEnvelope:
        """
        Deserialize from CBOR format

        Raises:
            DecodeError: If the bytes are not a well-formed envelope
        """
        try:
            decoded = cbor2.loads(data)
        except (cbor2.CBORDecodeError, TypeError, ValueError, EOFError) as e:
            raise DecodeError(f"Error unmarshal envelope CBOR: {e}") from e

        if not isinstance(decoded, dict):
            raise DecodeError("envelope must be a CBOR map")
        algorithm = decoded.get("algorithm")
        if not isinstance(algorithm, str):
            raise DecodeError("envelope algorithm must be a text string")

        return cls(
            algorithm=algorithm,
            params=HPKEParams.from_dict(decoded.get("params")),
            data=_require_bytes(decoded, "data"),
        )


def _require_bytes(container: dict[str, Any], key: str) -> bytes:
    value = container.get(key)
    if not isinstance(value, (bytes, bytearray)):
        raise DecodeError(f"envelope field {key!r} must be a byte string")
    return bytes(value)
