from eth_keys import (
    keys,
)
from eth_utils import (
    decode_hex,
    setup_DEBUG2_logging,
)
import pytest

from aoa import (
    AOATransaction,
)

#
#  Setup DEBUG2 level logging.
#
setup_DEBUG2_logging()


TEST_DATA = decode_hex(
    "0x7f7465737432000000000000000000000000000000000000000000000000000000600057"
)


@pytest.fixture
def private_key():
    return keys.PrivateKey(
        decode_hex("0x45a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8")
    )


@pytest.fixture
def sender(private_key):
    return private_key.public_key.to_canonical_address()


@pytest.fixture
def other_private_key():
    return keys.PrivateKey(b"\x01" * 32)


@pytest.fixture
def transaction_fields():
    return {
        "nonce": "0x00",
        "gasPrice": "0x09184e72a000",
        "gasLimit": "0x2710",
        "to": "0x0000000000000000000000000000000000000000",
        "value": "0x00",
        "data": TEST_DATA,
    }


@pytest.fixture
def unsigned_transaction(transaction_fields):
    return AOATransaction(transaction_fields)


@pytest.fixture
def signed_transaction(unsigned_transaction, private_key):
    unsigned_transaction.sign(private_key, chain_id=1)
    return unsigned_transaction
