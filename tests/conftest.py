from __future__ import annotations

from typing import Any

import pytest
from bip_utils import Bip32Slip10Secp256k1
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

SEED = bytes(range(32))
DID = "did:example:123"
DID_URL = "did:example:123#key-1"


def master_node() -> Bip32Slip10Secp256k1:
    return Bip32Slip10Secp256k1.FromSeed(SEED)


def ec_key_for(node: Bip32Slip10Secp256k1) -> ec.EllipticCurvePrivateKey:
    d = node.PrivateKey().Raw().ToBytes()
    return ec.derive_private_key(int.from_bytes(d, "big"), ec.SECP256K1())


def pem_for(node: Bip32Slip10Secp256k1) -> bytes:
    return ec_key_for(node).private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def did_document(xpub: str, key_id: str = DID_URL) -> dict[str, Any]:
    return {
        "id": DID,
        "publicKey": [
            {
                "id": key_id,
                "type": "EcdsaSecp256k1VerificationKey2019",
                "controller": DID,
                "publicExtendedKeyBase58": xpub,
            }
        ],
    }


@pytest.fixture
def master() -> Bip32Slip10Secp256k1:
    return master_node()


@pytest.fixture
def xpub(master: Bip32Slip10Secp256k1) -> str:
    return master.PublicKey().ToExtended()


@pytest.fixture
def xprv(master: Bip32Slip10Secp256k1) -> str:
    return master.PrivateKey().ToExtended()


@pytest.fixture
def pem_key(master: Bip32Slip10Secp256k1) -> bytes:
    return pem_for(master)


@pytest.fixture
def documents(xpub: str) -> dict[str, dict[str, Any]]:
    return {DID: did_document(xpub)}
