"""
Device response claims recovered from a decrypted presentment.

The decrypted plaintext is a CBOR map with a single "identity" entry
holding an ISO 18013-5 DeviceResponse. These types keep the response
fields as decoded and offer a flattened view of issuer-signed elements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import cbor2

from .errors import DecodeError

ENCODED_CBOR_TAG = 24


@dataclass
class Document:
    """
    Document within a DeviceResponse according to ISO 18013-5 Section 8.3.2.1.2.2
    """

    doc_type: str
    issuer_signed: dict[str, Any] = field(default_factory=dict)
    device_signed: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Document:
        if not isinstance(data, dict) or not isinstance(data.get("docType"), str):
            raise DecodeError("document must be a map with a docType")
        issuer_signed = _typed_field(data, "issuerSigned", dict, "document")
        name_spaces = _typed_field(issuer_signed, "nameSpaces", dict, "issuerSigned")
        for namespace, items in name_spaces.items():
            if not isinstance(items, list):
                raise DecodeError(f"issuerSigned.nameSpaces[{namespace!r}] must be an array")
        return cls(
            doc_type=data["docType"],
            issuer_signed=issuer_signed,
            device_signed=_typed_field(data, "deviceSigned", dict, "document"),
            errors=_typed_field(data, "errors", dict, "document"),
        )

    def to_dict(self) -> dict[str, Any]:
        document = {
            "docType": self.doc_type,
            "issuerSigned": self.issuer_signed,
            "deviceSigned": self.device_signed,
        }
        if self.errors:
            document["errors"] = self.errors
        return document

    @property
    def namespaces(self) -> list[str]:
        return list(self.issuer_signed.get("nameSpaces", {}).keys())

    def elements(self, namespace: str) -> dict[str, Any]:
        """
        Flatten issuer-signed items of a namespace

        Items may arrive wrapped in tag 24 (encoded CBOR) or as plain maps.

        Returns:
            Mapping of elementIdentifier to elementValue
        """
        items = self.issuer_signed.get("nameSpaces", {}).get(namespace, [])
        elements = {}
        for item in items:
            if isinstance(item, cbor2.CBORTag) and item.tag == ENCODED_CBOR_TAG:
                try:
                    item = cbor2.loads(item.value)
                except (cbor2.CBORDecodeError, TypeError, ValueError) as e:
                    raise DecodeError(f"invalid issuer signed item: {e}") from e
            if not isinstance(item, dict) or "elementIdentifier" not in item:
                raise DecodeError("issuer signed item must be a map with an elementIdentifier")
            elements[item["elementIdentifier"]] = item.get("elementValue")
        return elements


@dataclass
class DeviceResponse:
    """
    DeviceResponse structure according to ISO 18013-5 Section 8.3.2.1.2.2
    """

    version: str
    documents: list[Document] = field(default_factory=list)
    document_errors: list[dict[str, Any]] = field(default_factory=list)
    status: int = 0  # 0 = OK

    @classmethod
    def from_dict(cls, data: Any) -> DeviceResponse:
        if not isinstance(data, dict):
            raise DecodeError("identity must be a map")
        version = data.get("version")
        if not isinstance(version, str):
            raise DecodeError("identity.version must be a text string")
        documents = _typed_field(data, "documents", list, "identity")
        status = data.get("status", 0)
        if not isinstance(status, int) or isinstance(status, bool):
            raise DecodeError("identity.status must be an integer")
        return cls(
            version=version,
            documents=[Document.from_dict(document) for document in documents],
            document_errors=_typed_field(data, "documentErrors", list, "identity"),
            status=status,
        )

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {
            "version": self.version,
            "documents": [document.to_dict() for document in self.documents],
            "status": self.status,
        }
        if self.document_errors:
            response["documentErrors"] = self.document_errors
        return response

    def document(self, doc_type: str) -> Document | None:
        """Return the first document of the given type, if any"""
        for document in self.documents:
            if document.doc_type == doc_type:
                return document
        return None


@dataclass
class PresentmentClaims:
    """Decrypted plaintext wrapper: {"identity": DeviceResponse}"""

    identity: DeviceResponse

    @classmethod
    def from_cbor(cls, data: bytes) -> PresentmentClaims:
        """
        Deserialize from CBOR format

        Raises:
            DecodeError: If the plaintext is not a well-formed wrapper
        """
        try:
            decoded = cbor2.loads(data)
        except (cbor2.CBORDecodeError, TypeError, ValueError, EOFError) as e:
            raise DecodeError(f"Error unmarshal identity CBOR: {e}") from e
        if not isinstance(decoded, dict) or "identity" not in decoded:
            raise DecodeError("decrypted payload has no identity field")
        return cls(identity=DeviceResponse.from_dict(decoded["identity"]))


_TYPE_NAMES = {dict: "a map", list: "an array"}


def _typed_field(container: dict[str, Any], key: str, kind: type, owner: str) -> Any:
    """Return container[key] (or an empty kind when absent), rejecting other types"""
    if key not in container:
        return kind()
    value = container[key]
    if not isinstance(value, kind):
        raise DecodeError(f"{owner}.{key} must be {_TYPE_NAMES[kind]}")
    return value
