from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .constants import EC_PUBLIC_KEY_ID, SECP256K1_CURVE
from .did_url import ParsedDidUrl, parse_did_url
from .exceptions import InvalidDidUrl, InvalidPrivateKey
from .models import parse_signature


def validate_signature_shape(signature: Any) -> None:
    parse_signature(signature)


def validate_did_url(did_url: Any) -> ParsedDidUrl:
    """Parse ``did_url`` and require a fragment naming the public key entry."""
    if not isinstance(did_url, str):
        raise InvalidDidUrl("Expecting didUrl to be a string", did_url=did_url)
    try:
        parsed = parse_did_url(did_url)
    except ValueError as e:
        raise InvalidDidUrl(str(e), did_url=did_url) from e
    if not parsed.fragment:
        raise InvalidDidUrl(
            "Expecting didUrl to contain the public key via the fragment", did_url=did_url
        )
    return parsed


def validate_key_algorithm(key_algorithm: Mapping[str, Any]) -> None:
    if key_algorithm.get("id") != EC_PUBLIC_KEY_ID:
        raise InvalidPrivateKey(
            "Expecting private key to be an EC key", key_algorithm=dict(key_algorithm)
        )
    if key_algorithm.get("namedCurve") != SECP256K1_CURVE:
        raise InvalidPrivateKey(
            "Expecting EC private key curve to be secp256k1", key_algorithm=dict(key_algorithm)
        )
