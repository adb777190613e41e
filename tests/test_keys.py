from __future__ import annotations

import pytest
from bip_utils import Bip32Slip10Secp256k1
from conftest import ec_key_for, pem_for
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from idm_signatures.exceptions import InvalidPrivateKey, KeyDerivationError
from idm_signatures.keys import (
    decompose_private_key,
    derive_key,
    is_extended_private_key,
    parse_key_path,
    private_key_from_node,
    public_key_from_node,
)

HARDENED = 0x80000000


def _raw_point(key: ec.EllipticCurvePublicKey) -> bytes:
    return key.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint)


# --- key path parsing ---


@pytest.mark.parametrize(
    "path,expected",
    [
        ("m", []),
        ("M", []),
        ("m/0", [0]),
        ("m/0/1", [0, 1]),
        ("m/44'/0'/7", [44 + HARDENED, HARDENED, 7]),
        ("m/2147483647", [2147483647]),
    ],
)
def test_parse_key_path(path: str, expected: list[int]) -> None:
    assert parse_key_path(path) == expected


@pytest.mark.parametrize(
    "path",
    [
        "",
        "0/1",
        "x/1",
        "m/",
        "m//1",
        "m/a",
        "m/-1",
        "m/2147483648",
        "m/1''",
        "m/0\n",
        "m/\u0661",
        "m/12345678901",
        "m/" + "9" * 5000,
    ],
)
def test_parse_key_path_invalid(path: str) -> None:
    with pytest.raises(KeyDerivationError):
        parse_key_path(path)


# --- derivation ---


def test_derive_from_xpub_matches_private_derivation(master: Bip32Slip10Secp256k1, xpub: str) -> None:
    child = derive_key(xpub, "m/0/1")
    expected = master.DerivePath("m/0/1").PublicKey().RawCompressed().ToBytes()
    assert child.PublicKey().RawCompressed().ToBytes() == expected
    assert _raw_point(public_key_from_node(child)) == expected


def test_derive_root_path_is_identity(master: Bip32Slip10Secp256k1, xpub: str) -> None:
    node = derive_key(xpub, "m")
    assert node.PublicKey().RawCompressed().ToBytes() == master.PublicKey().RawCompressed().ToBytes()


def test_derive_is_relative_to_non_master_key(master: Bip32Slip10Secp256k1) -> None:
    account_xpub = master.DerivePath("m/0").PublicKey().ToExtended()
    child = derive_key(account_xpub, "m/1")
    expected = master.DerivePath("m/0/1").PublicKey().RawCompressed().ToBytes()
    assert child.PublicKey().RawCompressed().ToBytes() == expected


def test_derive_hardened_from_xpub_fails(xpub: str) -> None:
    with pytest.raises(KeyDerivationError) as exc:
        derive_key(xpub, "m/0'")
    assert exc.value.context["index"] == HARDENED


def test_derive_private_side(master: Bip32Slip10Secp256k1, xprv: str) -> None:
    node = derive_key(xprv, "m/3'/4")
    key = private_key_from_node(node)
    expected = ec_key_for(master.DerivePath("m/3'/4"))
    assert key.private_numbers().private_value == expected.private_numbers().private_value


def test_private_key_from_public_node_fails(xpub: str) -> None:
    with pytest.raises(KeyDerivationError):
        private_key_from_node(derive_key(xpub, "m"))


@pytest.mark.parametrize("bad", ["not-a-key", "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet9"])
def test_derive_invalid_extended_key(bad: str) -> None:
    with pytest.raises(KeyDerivationError):
        derive_key(bad, "m")


# --- private key import ---


def test_decompose_pkcs8_pem(master: Bip32Slip10Secp256k1) -> None:
    decomposed = decompose_private_key(pem_for(master))
    assert decomposed.key_algorithm == {"id": "ec-public-key", "namedCurve": "secp256k1"}
    assert decomposed.key_data["d"] == master.PrivateKey().Raw().ToBytes()


@pytest.mark.parametrize(
    "encoding,fmt",
    [
        (serialization.Encoding.PEM, serialization.PrivateFormat.TraditionalOpenSSL),
        (serialization.Encoding.DER, serialization.PrivateFormat.TraditionalOpenSSL),
        (serialization.Encoding.DER, serialization.PrivateFormat.PKCS8),
    ],
)
def test_decompose_other_formats(
    master: Bip32Slip10Secp256k1, encoding: serialization.Encoding, fmt: serialization.PrivateFormat
) -> None:
    raw = ec_key_for(master).private_bytes(encoding, fmt, serialization.NoEncryption())
    decomposed = decompose_private_key(raw)
    assert decomposed.key_algorithm["namedCurve"] == "secp256k1"
    assert len(decomposed.key_data["d"]) == 32


def test_decompose_pem_string_and_key_object(master: Bip32Slip10Secp256k1) -> None:
    pem = pem_for(master)
    assert decompose_private_key(pem.decode("ascii")) == decompose_private_key(pem)
    assert decompose_private_key(ec_key_for(master)) == decompose_private_key(pem)


def test_decompose_other_curve() -> None:
    key = ec.generate_private_key(ec.SECP256R1())
    decomposed = decompose_private_key(key)
    assert decomposed.key_algorithm == {"id": "ec-public-key", "namedCurve": "secp256r1"}


def test_decompose_non_ec_key() -> None:
    pem = ed25519.Ed25519PrivateKey.generate().private_bytes(
        serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()
    )
    decomposed = decompose_private_key(pem)
    assert decomposed.key_algorithm == {"id": "ed25519"}
    assert decomposed.key_data == {}


def test_decompose_garbage() -> None:
    with pytest.raises(InvalidPrivateKey):
        decompose_private_key(b"definitely not a key")


def test_is_extended_private_key(xprv: str, xpub: str) -> None:
    assert is_extended_private_key(xprv)
    assert not is_extended_private_key(xpub)
    assert not is_extended_private_key(b"xprv")
    assert not is_extended_private_key("tprv8ZgxMBicQKsPeDgjzdC36fs6bMjGApWDNLR9erAXMs5skhMv36j9MV5ecvfavji5khqjW")
