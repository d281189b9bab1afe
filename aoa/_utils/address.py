import re

from eth_typing import (
    HexStr,
)

from aoa.constants import (
    AOA_ADDRESS_PREFIX,
    HEX_ADDRESS_PREFIX,
)

ADDRESS_TEXT_PATTERN = re.compile(r"(aoa|0x)[0-9a-f]{40}[0-9a-z]{0,32}")


def hex_to_aoa(address: str) -> str:
    """
    Replace a leading ``0x`` with the chain facing ``AOA`` prefix.
    """
    if address.startswith(HEX_ADDRESS_PREFIX):
        return AOA_ADDRESS_PREFIX + address[len(HEX_ADDRESS_PREFIX):]
    return address


def aoa_to_hex(address: str) -> HexStr:
    """
    Replace a leading ``AOA`` with ``0x``.
    """
    if address.startswith(AOA_ADDRESS_PREFIX):
        return HexStr(HEX_ADDRESS_PREFIX + address[len(AOA_ADDRESS_PREFIX):])
    return HexStr(address)


def is_valid_address(address: str) -> bool:
    return ADDRESS_TEXT_PATTERN.fullmatch(address.lower()) is not None


def hex_to_text(hex_string: str) -> str:
    """
    Interpret every pair of hex characters as one character code.
    """
    if hex_string.startswith(HEX_ADDRESS_PREFIX):
        hex_string = hex_string[len(HEX_ADDRESS_PREFIX):]
    return "".join(
        chr(int(hex_string[index:index + 2], 16))
        for index in range(0, len(hex_string) - 1, 2)
    )
