import logging

from .constants import DEFAULT_KEY_PATH
from .did_url import ParsedDidUrl, parse_did_url
from .encoder import encode_data
from .exceptions import (
    EncodingError,
    ErrorCode,
    HashError,
    IdmSignaturesError,
    InvalidDidUrl,
    InvalidPrivateKey,
    InvalidSignatureError,
    InvalidSignatureShapeError,
    KeyDerivationError,
    reason_code_for_exception,
)
from .hasher import SHA1, SHA256, SHA384, SHA512, hash_data
from .keys import DecomposedKey, decompose_private_key, derive_key, parse_key_path
from .models import IdmSignature, parse_signature
from .signers import IdmSigner, create_signer
from .validators import validate_did_url, validate_key_algorithm, validate_signature_shape
from .verify import IdmVerifier, VerificationResult, create_verifier, static_resolver

__all__ = [
    "create_signer",
    "create_verifier",
    "static_resolver",
    "IdmSigner",
    "IdmVerifier",
    "IdmSignature",
    "VerificationResult",
    "parse_signature",
    "parse_did_url",
    "ParsedDidUrl",
    "validate_did_url",
    "validate_key_algorithm",
    "validate_signature_shape",
    "encode_data",
    "hash_data",
    "SHA1",
    "SHA256",
    "SHA384",
    "SHA512",
    "DecomposedKey",
    "decompose_private_key",
    "derive_key",
    "parse_key_path",
    "DEFAULT_KEY_PATH",
    # exceptions
    "IdmSignaturesError",
    "ErrorCode",
    "InvalidSignatureError",
    "InvalidSignatureShapeError",
    "InvalidPrivateKey",
    "InvalidDidUrl",
    "EncodingError",
    "HashError",
    "KeyDerivationError",
    "reason_code_for_exception",
    "__version__",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:  # prefer single source of truth from installed metadata
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("idm-signatures")
except Exception:  # pragma: no cover
    __version__ = "0.0.0"
