import pytest

from aoa._utils.address import (
    aoa_to_hex,
    hex_to_aoa,
    hex_to_text,
    is_valid_address,
)

HEX_ADDRESS = "0x" + "0123456789abcdef0123" * 2
AOA_ADDRESS = "AOA" + "0123456789abcdef0123" * 2


def test_hex_to_aoa():
    assert hex_to_aoa(HEX_ADDRESS) == AOA_ADDRESS
    assert hex_to_aoa(AOA_ADDRESS) == AOA_ADDRESS
    assert hex_to_aoa("0x") == "AOA"


def test_aoa_to_hex():
    assert aoa_to_hex(AOA_ADDRESS) == HEX_ADDRESS
    assert aoa_to_hex(HEX_ADDRESS) == HEX_ADDRESS


@pytest.mark.parametrize(
    "address, expected",
    (
        (HEX_ADDRESS, True),
        (AOA_ADDRESS, True),
        (AOA_ADDRESS.lower(), True),
        (HEX_ADDRESS.upper(), True),
        (AOA_ADDRESS + "z" * 32, True),
        (AOA_ADDRESS + "z" * 33, False),
        (AOA_ADDRESS + "-", False),
        (AOA_ADDRESS[:-1], False),
        ("EM" + HEX_ADDRESS[2:], False),
        ("", False),
        (AOA_ADDRESS + "\n", False),
        (HEX_ADDRESS + "\n", False),
    ),
)
def test_is_valid_address(address, expected):
    assert is_valid_address(address) is expected


@pytest.mark.parametrize(
    "hex_string, expected",
    (
        ("0x414f41", "AOA"),
        ("414f41", "AOA"),
        ("0x00", "\x00"),
        ("0x", ""),
    ),
)
def test_hex_to_text(hex_string, expected):
    assert hex_to_text(hex_string) == expected
