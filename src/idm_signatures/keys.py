"""Private key import and BIP32 child key derivation over secp256k1."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Union

from bip_utils import Base58ChecksumError, Bip32KeyError, Bip32KeyIndex, Bip32Slip10Secp256k1
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa, x448, x25519

from .constants import EC_PUBLIC_KEY_ID, EXTENDED_PRIVATE_KEY_PREFIXES, HARDENED_OFFSET
from .exceptions import InvalidPrivateKey, KeyDerivationError

log = logging.getLogger(__name__)

PrivateKeyMaterial = Union[str, bytes, bytearray, ec.EllipticCurvePrivateKey]

_CURVE = ec.SECP256K1()
_PATH_SEGMENT_RE = re.compile(r"([0-9]{1,10})(')?")


# --- private key import ---


@dataclass(frozen=True)
class DecomposedKey:
    key_algorithm: dict[str, Any]
    key_data: dict[str, Any] = field(default_factory=dict)


def _key_algorithm_for(key: Any) -> dict[str, Any]:
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return {"id": EC_PUBLIC_KEY_ID, "namedCurve": key.curve.name}
    if isinstance(key, rsa.RSAPrivateKey):
        return {"id": "rsa-encryption", "modulusLength": key.key_size}
    if isinstance(key, dsa.DSAPrivateKey):
        return {"id": "dsa"}
    for cls, name in (
        (ed25519.Ed25519PrivateKey, "ed25519"),
        (ed448.Ed448PrivateKey, "ed448"),
        (x25519.X25519PrivateKey, "x25519"),
        (x448.X448PrivateKey, "x448"),
    ):
        if isinstance(key, cls):
            return {"id": name}
    return {"id": type(key).__name__.lower()}


def _load_private_key(material: str | bytes | bytearray) -> Any:
    raw = material.encode("utf-8") if isinstance(material, str) else bytes(material)
    try:
        if raw.lstrip().startswith(b"-----BEGIN"):
            return serialization.load_pem_private_key(raw, password=None)
        return serialization.load_der_private_key(raw, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidPrivateKey(f"Unable to decode private key: {e}") from e


def decompose_private_key(material: PrivateKeyMaterial) -> DecomposedKey:
    """Split PEM/DER (SEC1 or PKCS#8) key material into its algorithm descriptor and key data.

    EC keys expose the raw 32 byte scalar as ``key_data["d"]``.
    """
    key = material if isinstance(material, ec.EllipticCurvePrivateKey) else _load_private_key(material)
    key_algorithm = _key_algorithm_for(key)
    if isinstance(key, ec.EllipticCurvePrivateKey):
        size = (key.curve.key_size + 7) // 8
        d = key.private_numbers().private_value.to_bytes(size, "big")
        return DecomposedKey(key_algorithm=key_algorithm, key_data={"d": d})
    return DecomposedKey(key_algorithm=key_algorithm)


def is_extended_private_key(material: Any) -> bool:
    return isinstance(material, str) and material.strip().startswith(EXTENDED_PRIVATE_KEY_PREFIXES)


def private_key_from_scalar(d: bytes) -> ec.EllipticCurvePrivateKey:
    return ec.derive_private_key(int.from_bytes(d, "big"), _CURVE)


# --- BIP32 derivation ---


def parse_key_path(path: str) -> list[int]:
    """Parse ``m/0/1'`` style paths into child indexes (hardened ones offset by 2**31)."""
    if not isinstance(path, str):
        raise KeyDerivationError("Expecting key path to be a string", path=path)
    segments = path.split("/")
    if segments[0] not in ("m", "M"):
        raise KeyDerivationError('Path must start with "m" or "M"', path=path)
    indexes: list[int] = []
    for segment in segments[1:]:
        m = _PATH_SEGMENT_RE.fullmatch(segment)
        if not m:
            raise KeyDerivationError(f"Invalid path segment {segment!r}", path=path)
        index = int(m.group(1))
        if index >= HARDENED_OFFSET:
            raise KeyDerivationError(f"Invalid index {index}", path=path)
        indexes.append(Bip32KeyIndex.HardenIndex(index) if m.group(2) else index)
    return indexes


def load_extended_key(extended_key: str) -> Bip32Slip10Secp256k1:
    try:
        return Bip32Slip10Secp256k1.FromExtendedKey(extended_key.strip())
    except (ValueError, TypeError, Bip32KeyError, Base58ChecksumError) as e:
        raise KeyDerivationError(f"Invalid extended key: {e}") from e


def derive_key(extended_key: str | Bip32Slip10Secp256k1, path: str) -> Bip32Slip10Secp256k1:
    """Derive the child node at ``path`` relative to ``extended_key`` (xpub or xprv)."""
    node = load_extended_key(extended_key) if isinstance(extended_key, str) else extended_key
    for index in parse_key_path(path):
        try:
            node = node.ChildKey(index)
        except (ValueError, Bip32KeyError) as e:
            raise KeyDerivationError(
                f"Could not derive child key {index} of path {path}: {e}", path=path, index=index
            ) from e
    log.debug("derived key at %s (depth %d)", path, node.Depth().ToInt())
    return node


def public_key_from_node(node: Bip32Slip10Secp256k1) -> ec.EllipticCurvePublicKey:
    raw = node.PublicKey().RawCompressed().ToBytes()
    return ec.EllipticCurvePublicKey.from_encoded_point(_CURVE, raw)


def private_key_from_node(node: Bip32Slip10Secp256k1) -> ec.EllipticCurvePrivateKey:
    if node.IsPublicOnly():
        raise KeyDerivationError("Extended key has no private part")
    return private_key_from_scalar(node.PrivateKey().Raw().ToBytes())
