from __future__ import annotations

import asyncio
import hashlib

from .exceptions import HashError

SHA1 = "SHA-1"
SHA256 = "SHA-256"
SHA384 = "SHA-384"
SHA512 = "SHA-512"

_HASHLIB_NAMES = {
    SHA1: "sha1",
    SHA256: "sha256",
    SHA384: "sha384",
    SHA512: "sha512",
}


def _digest(data: bytes, name: str) -> bytes:
    return hashlib.new(name, data).digest()


async def hash_data(data: bytes, algorithm: str) -> bytes:
    """Digest ``data`` with ``algorithm`` (one of the ``SHA*`` constants) off the event loop."""
    name = _HASHLIB_NAMES.get(algorithm)
    if name is None:
        raise HashError(f"Unsupported hash algorithm: {algorithm}", algorithm=algorithm)
    try:
        return await asyncio.to_thread(_digest, data, name)
    except (TypeError, ValueError) as e:
        raise HashError(f"Unable to hash data: {e}", algorithm=algorithm) from e
