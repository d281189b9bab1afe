from eth_typing import (
    Address,
)

#
# Curve
#
SECPK1_N = 115792089237316195423570985008687907852837564279074904382605163141518161494337  # noqa: E501
SECPK1_N_DIV_2 = SECPK1_N // 2


#
# Addresses
#
CREATE_CONTRACT_ADDRESS = Address(b"")

HEX_ADDRESS_PREFIX = "0x"
AOA_ADDRESS_PREFIX = "AOA"
EMPTY_ADDRESS_TEXT = HEX_ADDRESS_PREFIX


#
# Signature
#
V_OFFSET = 27
EIP155_CHAIN_ID_OFFSET = 35
# v = y_parity + V_OFFSET + CHAIN_ID_V_OFFSET + 2 * chain_id
CHAIN_ID_V_OFFSET = EIP155_CHAIN_ID_OFFSET - V_OFFSET
DEFAULT_V = b"\x1b"

# Chain id assumed by signature verification and wire decoding
PROTOCOL_CHAIN_ID = 1


#
# Fees (Homestead values)
#
GAS_TX = 21000
GAS_TXCREATE = 32000
GAS_TXDATAZERO = 4
GAS_TXDATANONZERO = 68
