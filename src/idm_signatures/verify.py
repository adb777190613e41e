from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature

from .constants import SECP256K1_ORDER
from .encoder import encode_data
from .exceptions import IdmSignaturesError, InvalidSignatureError
from .hasher import SHA256, hash_data
from .keys import derive_key, public_key_from_node
from .models import IdmSignature, parse_signature
from .utils import b64_decode
from .validators import validate_did_url

log = logging.getLogger(__name__)

DidDocument = Mapping[str, Any]
DidResolver = Callable[[str], Union[DidDocument, Awaitable[DidDocument]]]


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    error: IdmSignaturesError | None = None

    def __bool__(self) -> bool:
        return self.valid


def _find_public_key(did_document: DidDocument, did_url: str) -> dict[str, Any] | None:
    keys_obj = did_document.get("publicKey") if isinstance(did_document, Mapping) else None
    if not isinstance(keys_obj, list):
        return None
    for k in keys_obj:
        if isinstance(k, Mapping) and k.get("id") == did_url:
            return dict(k)
    return None


def verify_digest(public_key: ec.EllipticCurvePublicKey, digest: bytes, signature_b64: str) -> bool:
    """Check a base64 DER signature over a SHA-256 digest; high-S signatures never match."""
    try:
        der = b64_decode(signature_b64)
        _, s = decode_dss_signature(der)
        if s > SECP256K1_ORDER // 2:
            return False
        public_key.verify(der, digest, ec.ECDSA(Prehashed(hashes.SHA256())))
        return True
    except (InvalidSignature, ValueError):
        return False


async def _resolve(resolve_did: DidResolver, did: str) -> DidDocument:
    result = resolve_did(did)
    if inspect.isawaitable(result):
        result = await result
    return result


class IdmVerifier:
    """Checks :class:`IdmSignature` envelopes against DID Documents fetched through ``resolve_did``."""

    def __init__(self, resolve_did: DidResolver) -> None:
        self.resolve_did = resolve_did

    async def verify(self, data: Any, signature: IdmSignature | Mapping[str, Any]) -> VerificationResult:
        """Return a verdict; only failures raised by ``resolve_did`` propagate."""
        try:
            await self.verify_or_raise(data, signature)
        except InvalidSignatureError as e:
            log.debug("signature rejected: %s", e.message)
            return VerificationResult(valid=False, error=e)
        return VerificationResult(valid=True)

    __call__ = verify

    async def verify_or_raise(self, data: Any, signature: IdmSignature | Mapping[str, Any]) -> None:
        """Verify or raise :class:`InvalidSignatureError` (resolver failures propagate as-is)."""
        try:
            envelope = parse_signature(signature)
            parsed = validate_did_url(envelope.did_url)
        except IdmSignaturesError as e:
            raise InvalidSignatureError(e.message, **e.context) from e

        did_url = envelope.did_url
        did_document = await _resolve(self.resolve_did, parsed.did)

        public_key_entry = _find_public_key(did_document, did_url)
        if not public_key_entry:
            raise InvalidSignatureError(
                f'The publicKey "{did_url}" was not found within the DID Document',
                did=parsed.did,
                did_document=did_document,
            )
        extended_key = public_key_entry.get("publicExtendedKeyBase58")
        if not extended_key or not isinstance(extended_key, str):
            raise InvalidSignatureError(
                f'The publicKey "{did_url}" was found in the DID Document but is missing '
                "required material (publicExtendedKeyBase58)",
                did_public_key=public_key_entry,
            )

        try:
            public_key = public_key_from_node(derive_key(extended_key, envelope.key_path))
            digest = await hash_data(encode_data(data), SHA256)
        except IdmSignaturesError as e:
            raise InvalidSignatureError(e.message, **e.context) from e

        if not verify_digest(public_key, digest, envelope.value):
            raise InvalidSignatureError("Signature mismatch", did_url=did_url, key_path=envelope.key_path)
        log.debug("signature by %s (%s) is valid", did_url, envelope.key_path)


def create_verifier(resolve_did: DidResolver) -> IdmVerifier:
    return IdmVerifier(resolve_did)


def static_resolver(documents: Mapping[str, DidDocument]) -> DidResolver:
    """Build a resolver over a fixed ``{did: document}`` mapping; unknown DIDs raise ``LookupError``."""
    docs = dict(documents)

    async def resolve(did: str) -> DidDocument:
        try:
            return docs[did]
        except KeyError:
            raise LookupError(f"DID not found: {did}") from None

    return resolve
