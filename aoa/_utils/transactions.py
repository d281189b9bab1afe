import enum
from typing import (
    List,
    Sequence,
    Union,
)

from eth_hash.auto import (
    keccak,
)
from eth_keys import (
    datatypes,
    keys,
)
from eth_keys.exceptions import (
    BadSignature,
)
from eth_typing import (
    Address,
    Hash32,
)
from eth_utils import (
    ValidationError,
    big_endian_to_int,
    get_extended_debug_logger,
    int_to_big_endian,
)
import rlp

from aoa.constants import (
    CHAIN_ID_V_OFFSET,
    EIP155_CHAIN_ID_OFFSET,
    SECPK1_N_DIV_2,
    V_OFFSET,
)
from aoa.exceptions import (
    InvalidSignature,
)
from aoa.rlp.fields import (
    ACTION_INDEX,
    LEGACY_PREIMAGE_LENGTH,
    R_INDEX,
    S_INDEX,
    V_INDEX,
)
from aoa.typing import (
    VRS,
)

logger = get_extended_debug_logger("aoa._utils.transactions")


class SigningMode(enum.Enum):
    # hash the chain bound pre-image that verification rebuilds
    CANONICAL = "canonical"
    # assign ``v = chain_id`` and hash all raw fields as they are
    LEGACY = "legacy"


def derive_chain_id(v: int) -> int:
    if v < EIP155_CHAIN_ID_OFFSET:
        return 0
    return (v - EIP155_CHAIN_ID_OFFSET) // 2


def get_v_offset(chain_id: int) -> int:
    if chain_id > 0:
        return V_OFFSET + chain_id * 2 + CHAIN_ID_V_OFFSET
    else:
        return V_OFFSET


def build_signing_preimage(fields: Sequence[bytes], chain_id: int) -> List[bytes]:
    """
    Return the list of fields that is hashed when signing or recovering.

    With a chain id the pre-image holds all 16 fields with ``action`` blanked,
    ``v`` replaced by the chain id and empty ``r`` and ``s``.  Without one only
    the first six fields are hashed.  ``fields`` itself is never modified.
    """
    if chain_id > 0:
        preimage = list(fields)
        preimage[ACTION_INDEX] = b""
        preimage[V_INDEX] = int_to_big_endian(chain_id)
        preimage[R_INDEX] = b""
        preimage[S_INDEX] = b""
        return preimage
    else:
        return list(fields[:LEGACY_PREIMAGE_LENGTH])


def hash_fields(fields: Sequence[bytes]) -> Hash32:
    return Hash32(keccak(rlp.encode(list(fields))))


def create_transaction_signature(
    message_hash: Hash32,
    private_key: Union[datatypes.PrivateKey, bytes],
    chain_id: int = 0,
) -> VRS:
    if not isinstance(private_key, datatypes.PrivateKey):
        private_key = keys.PrivateKey(private_key)

    signature = private_key.sign_msg_hash(message_hash)
    y_parity, r, s = signature.vrs
    return VRS((y_parity + get_v_offset(chain_id), r, s))


def recover_public_key(
    fields: Sequence[bytes], chain_id: int
) -> datatypes.PublicKey:
    """
    Recover the public key that signed ``fields``, assuming ``chain_id`` was
    bound into the signature.

    Raises :class:`~aoa.exceptions.InvalidSignature` if there is no signature,
    if ``s`` is above ``secp256k1n / 2`` or if the recovery fails.
    """
    v = big_endian_to_int(fields[V_INDEX])
    r = big_endian_to_int(fields[R_INDEX])
    s = big_endian_to_int(fields[S_INDEX])

    if r == 0 or s == 0:
        raise InvalidSignature("Transaction is not signed")
    elif s > SECPK1_N_DIV_2:
        logger.debug("Rejecting signature with high s value: %d", s)
        raise InvalidSignature("Signature s value is above secp256k1n / 2")

    y_parity = v - get_v_offset(chain_id)
    if y_parity not in (0, 1):
        logger.debug("v=%d does not match chain id %d", v, chain_id)
        raise InvalidSignature(f"Invalid v value {v} for chain id {chain_id}")

    message_hash = hash_fields(build_signing_preimage(fields, chain_id))
    try:
        signature = keys.Signature(vrs=(y_parity, r, s))
        return signature.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, ValidationError) as err:
        logger.debug("Public key recovery failed: %s", err)
        raise InvalidSignature(f"Bad Signature: {err}") from err


def is_signature_valid(fields: Sequence[bytes], chain_id: int) -> bool:
    try:
        recover_public_key(fields, chain_id)
    except InvalidSignature:
        return False
    else:
        return True


def extract_transaction_sender(fields: Sequence[bytes], chain_id: int) -> Address:
    public_key = recover_public_key(fields, chain_id)
    return Address(public_key.to_canonical_address())
