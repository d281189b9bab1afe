"""
Canonicalization of individual transaction fields.

Every field of an AOA transaction is stored as a raw byte string.  The
descriptor table below states, for each field in wire order, how long the byte
string may be and whether leading zero bytes are stripped (integers) or the
value must be exactly ``length`` bytes long (addresses).
"""
from typing import (
    Any,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

from eth_typing import (
    HexStr,
)
from eth_utils import (
    decode_hex,
    get_extended_debug_logger,
    int_to_big_endian,
    is_0x_prefixed,
    is_hex,
    to_bytes,
)
import rlp
from rlp.exceptions import (
    RLPException,
)
from rlp.sedes import (
    CountableList,
    binary,
)

from aoa.constants import (
    DEFAULT_V,
)
from aoa.exceptions import (
    DisallowedZero,
    FieldTooLong,
    InvalidField,
    MalformedEncoding,
)
from aoa.typing import (
    FieldInput,
)

logger = get_extended_debug_logger("aoa.rlp.fields")


class FieldDescriptor(NamedTuple):
    name: str
    # ``None`` means unbounded
    length: Optional[int] = None
    allow_less: bool = False
    allow_zero: bool = False
    default: bytes = b""


TRANSACTION_FIELDS: Tuple[FieldDescriptor, ...] = (
    FieldDescriptor("nonce", length=32, allow_less=True),
    FieldDescriptor("gas_price", length=32, allow_less=True),
    FieldDescriptor("gas_limit", length=32, allow_less=True),
    FieldDescriptor("to", length=20, allow_zero=True),
    FieldDescriptor("value", length=32, allow_less=True),
    FieldDescriptor("data", allow_zero=True),
    FieldDescriptor("action", length=2, allow_less=True),
    FieldDescriptor("vote", allow_zero=True),
    FieldDescriptor("nickname", allow_zero=True),
    FieldDescriptor("asset", length=20, allow_zero=True),
    FieldDescriptor("asset_info", allow_zero=True),
    FieldDescriptor("sub_address", allow_zero=True),
    FieldDescriptor("abi", allow_zero=True),
    FieldDescriptor("v", allow_zero=True, default=DEFAULT_V),
    FieldDescriptor("r", length=32, allow_less=True, allow_zero=True),
    FieldDescriptor("s", length=32, allow_less=True, allow_zero=True),
)

FIELD_NAMES = tuple(descriptor.name for descriptor in TRANSACTION_FIELDS)
FIELD_INDEX = {name: index for index, name in enumerate(FIELD_NAMES)}

# Alternative names accepted when building a transaction from a mapping
FIELD_ALIASES = {
    "gasPrice": "gas_price",
    "gasLimit": "gas_limit",
    "gas": "gas_limit",
    "input": "data",
    "assetInfo": "asset_info",
    "subAddress": "sub_address",
}

# Number of leading fields hashed for the legacy signing pre-image
LEGACY_PREIMAGE_LENGTH = FIELD_INDEX["data"] + 1

ACTION_INDEX = FIELD_INDEX["action"]
V_INDEX = FIELD_INDEX["v"]
R_INDEX = FIELD_INDEX["r"]
S_INDEX = FIELD_INDEX["s"]

RAW_FIELDS_SEDES = CountableList(binary)


def to_field_bytes(value: Any) -> bytes:
    """
    Convert any supported field input to bytes.

    Integers become their minimal big-endian representation, where zero is the
    empty byte string.  ``0x`` prefixed strings are decoded as hex, other
    strings are encoded as utf-8 text.  Objects exposing ``__bytes__`` are
    converted with ``bytes()``.
    """
    if value is None:
        return b""
    elif isinstance(value, bool):
        raise InvalidField("value", f"Booleans are not valid field values: {value!r}")
    elif isinstance(value, int):
        if value < 0:
            raise InvalidField("value", f"Negative integers cannot be encoded: {value}")
        elif value == 0:
            return b""
        return int_to_big_endian(value)
    elif isinstance(value, (bytes, bytearray)):
        return bytes(value)
    elif isinstance(value, str):
        if is_0x_prefixed(value) and is_hex(value):
            # odd length hex is left padded, "0x1" is one byte
            digits = value[2:]
            if len(digits) % 2:
                digits = "0" + digits
            return decode_hex(digits)
        return value.encode("utf8")
    elif hasattr(value, "__bytes__"):
        return bytes(value)
    else:
        raise InvalidField(
            "value", f"Cannot convert {type(value).__name__} to a field value"
        )


def canonicalize(value: FieldInput, descriptor: FieldDescriptor) -> bytes:
    """
    Turn ``value`` into the unique byte representation for ``descriptor``.

    Raises :class:`~aoa.exceptions.FieldTooLong` when the value exceeds the
    descriptor length and :class:`~aoa.exceptions.DisallowedZero` when a fixed
    length field without ``allow_zero`` is given an empty value.
    """
    if value is None:
        return descriptor.default

    try:
        raw = to_field_bytes(value)
    except InvalidField as err:
        raise InvalidField(descriptor.name, err.args[1]) from err

    if raw == b"\x00" and not descriptor.allow_zero:
        raw = b""

    if descriptor.length is not None:
        if descriptor.allow_less:
            raw = raw.lstrip(b"\x00")
            if len(raw) > descriptor.length:
                raise FieldTooLong(
                    descriptor.name,
                    f"{descriptor.name} must be at most {descriptor.length} bytes, "
                    f"got {len(raw)}",
                )
        elif len(raw) == 0:
            if not descriptor.allow_zero:
                raise DisallowedZero(
                    descriptor.name,
                    f"{descriptor.name} must be exactly {descriptor.length} bytes, "
                    "got an empty value",
                )
        elif len(raw) > descriptor.length:
            raise FieldTooLong(
                descriptor.name,
                f"{descriptor.name} must be exactly {descriptor.length} bytes, "
                f"got {len(raw)}",
            )
        elif len(raw) != descriptor.length:
            raise InvalidField(
                descriptor.name,
                f"{descriptor.name} must be exactly {descriptor.length} bytes, "
                f"got {len(raw)}",
            )

    if not raw and not descriptor.allow_zero:
        return descriptor.default

    logger.debug2("canonicalized %s to 0x%s", descriptor.name, raw.hex())
    return raw


def decode_raw_fields(encoded: Union[bytes, HexStr]) -> List[bytes]:
    """
    Parse a serialized transaction into its 16 raw fields.  ``encoded`` may
    also be given as a ``0x`` prefixed hex string.

    Raises :class:`~aoa.exceptions.MalformedEncoding` if ``encoded`` is not an
    RLP list of exactly 16 byte strings.
    """
    if isinstance(encoded, str):
        try:
            encoded = to_bytes(hexstr=encoded)
        except ValueError as err:
            raise MalformedEncoding(f"Transaction is not valid hex: {err}") from err

    try:
        raw_fields = rlp.decode(encoded, sedes=RAW_FIELDS_SEDES)
    except RLPException as err:
        logger.debug("Could not decode transaction: %s", err)
        raise MalformedEncoding(f"Transaction is not valid RLP: {err}") from err

    if len(raw_fields) != len(TRANSACTION_FIELDS):
        raise MalformedEncoding(
            f"Expected {len(TRANSACTION_FIELDS)} transaction fields, "
            f"got {len(raw_fields)}"
        )
    return list(raw_fields)
