from __future__ import annotations

import array
import mmap
from collections.abc import Mapping, Sequence
from typing import Any, Union

import cbor2

from .exceptions import EncodingError

BytesLike = Union[bytes, bytearray, memoryview, array.array, mmap.mmap]
CborScalar = Union[str, int, float, bool, None, bytes]
CborType = Union[CborScalar, Mapping[Any, "CborType"], Sequence["CborType"]]  # recursive alias


def encode_data(data: BytesLike | CborType) -> bytes:
    """Return the bytes that get hashed for ``data``.

    Anything exposing the buffer protocol (bytes, typed arrays, mmaps) is
    copied verbatim; any other value is encoded as canonical CBOR, so equal
    structures give equal bytes regardless of mapping insertion order.
    """
    try:
        view = memoryview(data)
    except TypeError:
        pass
    else:
        with view:
            return view.tobytes()
    try:
        return cbor2.dumps(data, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise EncodingError(f"Unable to encode data: {e}", data_type=type(data).__name__) from e
