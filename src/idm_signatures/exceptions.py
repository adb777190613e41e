from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorCode(str, Enum):
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_SIGNATURE_SHAPE = "INVALID_SIGNATURE_SHAPE"
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    INVALID_DID_URL = "INVALID_DID_URL"
    ENCODING_ERROR = "ENCODING_ERROR"
    HASH_ERROR = "HASH_ERROR"
    KEY_DERIVATION_ERROR = "KEY_DERIVATION_ERROR"


class IdmSignaturesError(Exception):
    """Base error. ``code`` discriminates the variant, ``context`` holds offending values."""

    code: ClassVar[ErrorCode]

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "context": self.context}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code.value})"


class InvalidSignatureError(IdmSignaturesError):
    code = ErrorCode.INVALID_SIGNATURE


class InvalidSignatureShapeError(IdmSignaturesError):
    code = ErrorCode.INVALID_SIGNATURE_SHAPE


class InvalidPrivateKey(IdmSignaturesError):
    code = ErrorCode.INVALID_PRIVATE_KEY


class InvalidDidUrl(IdmSignaturesError):
    code = ErrorCode.INVALID_DID_URL


class EncodingError(IdmSignaturesError):
    code = ErrorCode.ENCODING_ERROR


class HashError(IdmSignaturesError):
    code = ErrorCode.HASH_ERROR


class KeyDerivationError(IdmSignaturesError):
    code = ErrorCode.KEY_DERIVATION_ERROR


def reason_code_for_exception(exc: BaseException) -> str:
    """Map an exception to a short reason string (``"error"`` for foreign exceptions)."""
    if isinstance(exc, IdmSignaturesError):
        return exc.code.value
    return "error"
