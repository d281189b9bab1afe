from typing import (
    NewType,
    SupportsBytes,
    Tuple,
    Union,
)

from eth_typing import (
    HexStr,
)

# Accepted inputs for a single transaction field
FieldInput = Union[bytes, bytearray, HexStr, str, int, SupportsBytes, None]

VRS = NewType("VRS", Tuple[int, int, int])
