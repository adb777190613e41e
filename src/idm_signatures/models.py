from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from .exceptions import InvalidSignatureShapeError

_EXPECTED = {
    "createdAt": "a number",
    "value": "a string",
    "didUrl": "a string",
    "keyPath": "a string",
}


class IdmSignature(BaseModel):
    """Signature envelope: who signed (``didUrl``), with which child key, when, and the DER value."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Field order is the order shape violations are reported in
    created_at: Union[StrictInt, StrictFloat] = Field(alias="createdAt")
    value: StrictStr
    did_url: StrictStr = Field(alias="didUrl")
    key_path: StrictStr = Field(alias="keyPath")

    def to_dict(self) -> dict[str, Any]:
        return {
            "didUrl": self.did_url,
            "keyPath": self.key_path,
            "value": self.value,
            "createdAt": self.created_at,
        }


def parse_signature(signature: Any) -> IdmSignature:
    """Validate an envelope at the boundary and return it as :class:`IdmSignature`.

    Raises :class:`InvalidSignatureShapeError` naming the first offending field.
    """
    if isinstance(signature, IdmSignature):
        return signature
    if not isinstance(signature, Mapping):
        raise InvalidSignatureShapeError(
            "Expecting signature to be an object", field=None, value=signature, signature=signature
        )
    try:
        return IdmSignature.model_validate(dict(signature))
    except ValidationError as e:
        err = e.errors()[0]
        loc = err["loc"][0] if err["loc"] else None
        field = loc if loc in _EXPECTED else None
        if field is None:
            raise InvalidSignatureShapeError(
                f"Invalid signature: {err['msg']}", field=loc, value=None, signature=signature
            ) from e
        raise InvalidSignatureShapeError(
            f"Expecting {field} to be {_EXPECTED[field]}",
            field=field,
            value=signature.get(field),
            signature=signature,
        ) from e
