"""
Decoding of serialized AOA transactions without building an
:class:`~aoa.rlp.transactions.AOATransaction`.

The result is a flat, display oriented view: integers for the numeric fields,
``0x`` hex for the payloads and ``AOA`` text for the addresses.
"""
from typing import (
    Any,
    Dict,
    NamedTuple,
    Optional,
    Union,
)

from eth_typing import (
    HexStr,
)
from eth_utils import (
    big_endian_to_int,
    encode_hex,
    get_extended_debug_logger,
)

from aoa._utils.address import (
    hex_to_aoa,
)
from aoa._utils.transactions import (
    extract_transaction_sender,
)
from aoa.constants import (
    AOA_ADDRESS_PREFIX,
    CREATE_CONTRACT_ADDRESS,
    EMPTY_ADDRESS_TEXT,
    PROTOCOL_CHAIN_ID,
)
from aoa.rlp.fields import (
    FIELD_INDEX,
    decode_raw_fields,
)

logger = get_extended_debug_logger("aoa.decoding")

NULL_SUB_ADDRESS = "\u0000"


class DecodedTransaction(NamedTuple):
    sender: str
    nonce: int
    gas_price: int
    gas_limit: int
    # ``None`` for contract creation
    to: Optional[str]
    value: int
    data: str
    action: str
    vote: str
    nickname: str
    asset: str
    asset_info: str
    sub_address: str
    abi: str
    v: int
    r: str
    s: str

    def is_contract_creation(self) -> bool:
        return self.to is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Return the fields as a dict keyed like the JSON view of a transaction:
        ``sender`` becomes ``from`` and ``to`` is left out for contract creation.
        """
        decoded = self._asdict()
        decoded["from"] = decoded.pop("sender")
        if decoded["to"] is None:
            del decoded["to"]
        return decoded


def extract_sub_address(raw_sub_address: bytes) -> str:
    """
    Return the ``AOA`` address embedded in the sub-address payload.

    Everything before the ``AOA`` prefix is dropped.  A payload holding a
    single NUL character is the empty address.
    """
    text = raw_sub_address.decode("latin-1")
    prefix_index = text.find(AOA_ADDRESS_PREFIX)
    if prefix_index > 0:
        text = text[prefix_index:]

    if text == NULL_SUB_ADDRESS:
        return EMPTY_ADDRESS_TEXT
    return text


def _address_text(raw_address: bytes) -> str:
    if raw_address == CREATE_CONTRACT_ADDRESS:
        return EMPTY_ADDRESS_TEXT
    return hex_to_aoa(encode_hex(raw_address))


def decode_transaction(
    encoded: Union[bytes, HexStr], chain_id: int = PROTOCOL_CHAIN_ID
) -> DecodedTransaction:
    """
    Decode ``encoded`` and recover its sender, assuming the signature is bound
    to ``chain_id``.

    Raises :class:`~aoa.exceptions.MalformedEncoding` if the payload is not an
    RLP list of 16 byte strings, and :class:`~aoa.exceptions.InvalidSignature`
    if the sender cannot be recovered.
    """
    raw_fields = decode_raw_fields(encoded)
    sender = extract_transaction_sender(raw_fields, chain_id)
    logger.debug2("Decoded transaction from %s", encode_hex(sender))

    def raw(name: str) -> bytes:
        return raw_fields[FIELD_INDEX[name]]

    raw_to = raw("to")
    if raw_to == CREATE_CONTRACT_ADDRESS:
        to = None
    else:
        to = _address_text(raw_to)

    return DecodedTransaction(
        sender=hex_to_aoa(encode_hex(sender)),
        nonce=big_endian_to_int(raw("nonce")),
        gas_price=big_endian_to_int(raw("gas_price")),
        gas_limit=big_endian_to_int(raw("gas_limit")),
        to=to,
        value=big_endian_to_int(raw("value")),
        data=encode_hex(raw("data")),
        action=encode_hex(raw("action")),
        vote=encode_hex(raw("vote")),
        nickname=encode_hex(raw("nickname")),
        asset=_address_text(raw("asset")),
        asset_info=encode_hex(raw("asset_info")),
        sub_address=extract_sub_address(raw("sub_address")),
        abi=encode_hex(raw("abi")),
        v=big_endian_to_int(raw("v")),
        r=encode_hex(raw("r")),
        s=encode_hex(raw("s")),
    )
