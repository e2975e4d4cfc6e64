"""
Test configuration for the identity presentment test suite.
"""

import cbor2
import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from identity_presentment import PresentmentSettings


# Test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# Collection settings
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class PresentmentVectors:
    """Fixed test vectors from the Wallet identity test merchant."""

    MERCHANT_ID = "PassKit_Identity_Test_Merchant_ID"
    TEAM_ID = "PassKit_Identity_Test_Team_ID"

    NONCE = bytes.fromhex(
        "964c3e56a06061fa213fce2ba73217a6d359c2e65d44ec6b5b94f9c57eeeb3c0"
        "45906344c7032e2609eb60533c35a98a75d0d2444ef9057c55cbb2d05d672a25"
    )

    # SHA-256 of the test merchant's encryption public key
    REQUESTER_KEY_DIGEST = bytes.fromhex(
        "b2c00f06b2df645691174f1331ade35141f17e19b3021d07560b4a71fc61818c"
    )

    SESSION_TRANSCRIPT = bytes.fromhex(
        "83f6f685781c4170706c654964656e7469747950726573656e746d656e745f312e30"
        "5840964c3e56a06061fa213fce2ba73217a6d359c2e65d44ec6b5b94f9c57eeeb3c0"
        "45906344c7032e2609eb60533c35a98a75d0d2444ef9057c55cbb2d05d672a25"
        "7821506173734b69745f4964656e746974795f546573745f4d65726368616e745f4944"
        "781d506173734b69745f4964656e746974795f546573745f5465616d5f4944"
        "5820b2c00f06b2df645691174f1331ade35141f17e19b3021d07560b4a71fc61818c"
    )

    INFO_HASH = bytes.fromhex("59a47fc9fa2402cfefa5e889183d4222cb15bb10807e53d90b4eef5eb9ff1d96")


def _issuer_signed_item(digest_id, identifier, value):
    return cbor2.CBORTag(
        24,
        cbor2.dumps(
            {
                "digestID": digest_id,
                "random": bytes([digest_id]) * 16,
                "elementIdentifier": identifier,
                "elementValue": value,
            }
        ),
    )


SAMPLE_IDENTITY = {
    "version": "1.0",
    "documents": [
        {
            "docType": "org.iso.18013.5.1.mDL",
            "issuerSigned": {
                "nameSpaces": {
                    "org.iso.18013.5.1": [
                        _issuer_signed_item(0, "family_name", "Appleseed"),
                        _issuer_signed_item(1, "given_name", "Johnny"),
                        _issuer_signed_item(2, "age_over_21", True),
                        _issuer_signed_item(3, "portrait", b"\xff\xd8\xff\xe0"),
                    ]
                },
                "issuerAuth": [b"\xa1\x01\x26", {}, b"mso", b"signature"],
            },
            "deviceSigned": {
                "nameSpaces": cbor2.CBORTag(24, cbor2.dumps({})),
                "deviceAuth": {"deviceSignature": [b"\xa1\x01\x26", {}, None, b"sig"]},
            },
        }
    ],
    "status": 0,
}


@pytest.fixture(scope="session")
def vectors():
    return PresentmentVectors


@pytest.fixture(scope="session")
def sample_identity():
    return SAMPLE_IDENTITY


@pytest.fixture(scope="session")
def verifier_key():
    """P-256 key pair standing in for the merchant encryption key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def other_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def settings(vectors):
    return PresentmentSettings(merchant_id=vectors.MERCHANT_ID, team_id=vectors.TEAM_ID)
