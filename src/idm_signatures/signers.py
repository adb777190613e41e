from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

from .constants import DEFAULT_KEY_PATH, SECP256K1_ORDER
from .encoder import encode_data
from .exceptions import InvalidPrivateKey, KeyDerivationError
from .hasher import SHA256, hash_data
from .keys import (
    PrivateKeyMaterial,
    decompose_private_key,
    derive_key,
    is_extended_private_key,
    parse_key_path,
    private_key_from_node,
    private_key_from_scalar,
)
from .models import IdmSignature
from .utils import b64_encode, now_ms
from .validators import validate_did_url, validate_key_algorithm

log = logging.getLogger(__name__)


def sign_digest(private_key: ec.EllipticCurvePrivateKey, digest: bytes) -> bytes:
    """ECDSA-sign a SHA-256 digest and return a low-S DER signature."""
    der = private_key.sign(digest, ec.ECDSA(Prehashed(hashes.SHA256())))
    r, s = decode_dss_signature(der)
    if s > SECP256K1_ORDER // 2:
        s = SECP256K1_ORDER - s
        der = encode_dss_signature(r, s)
    return der


def _load_signing_key(private_key: PrivateKeyMaterial, key_path: str) -> ec.EllipticCurvePrivateKey:
    if is_extended_private_key(private_key):
        try:
            return private_key_from_node(derive_key(private_key, key_path))
        except KeyDerivationError as e:
            raise InvalidPrivateKey(e.message, key_path=key_path) from e

    decomposed = decompose_private_key(private_key)
    validate_key_algorithm(decomposed.key_algorithm)
    return private_key_from_scalar(decomposed.key_data["d"])


class IdmSigner:
    """Produces :class:`IdmSignature` envelopes for arbitrary data on behalf of ``did_url``.

    With PEM/DER key material ``key_path`` only labels the envelope: the key is
    expected to already be the child at that path. With an extended private key
    (``xprv...``) the child at ``key_path`` is derived here.
    """

    def __init__(
        self,
        did_url: str,
        private_key: PrivateKeyMaterial,
        key_path: str = DEFAULT_KEY_PATH,
        *,
        now: Callable[[], int] | None = None,
    ) -> None:
        validate_did_url(did_url)
        try:
            parse_key_path(key_path)
        except KeyDerivationError as e:
            raise InvalidPrivateKey(e.message, key_path=key_path) from e
        self.did_url = did_url
        self.key_path = key_path
        self._now = now or now_ms
        self._private_key = _load_signing_key(private_key, key_path)

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._private_key.public_key()

    async def sign(self, data: Any) -> IdmSignature:
        encoded = encode_data(data)
        digest = await hash_data(encoded, SHA256)
        der = sign_digest(self._private_key, digest)
        signature = IdmSignature.model_validate(
            {
                "didUrl": self.did_url,
                "keyPath": self.key_path,
                "value": b64_encode(der),
                "createdAt": self._now(),
            }
        )
        log.debug("signed %d bytes as %s (%s)", len(encoded), self.did_url, self.key_path)
        return signature

    __call__ = sign

    def __repr__(self) -> str:
        return f"IdmSigner(did_url={self.did_url!r}, key_path={self.key_path!r})"


def create_signer(
    did_url: str,
    private_key: PrivateKeyMaterial,
    key_path: str = DEFAULT_KEY_PATH,
    **kwargs: Any,
) -> IdmSigner:
    """Validate ``did_url`` and ``private_key`` up front and return a ready signer.

    Raises :class:`InvalidDidUrl` or :class:`InvalidPrivateKey`.
    """
    return IdmSigner(did_url, private_key, key_path, **kwargs)
