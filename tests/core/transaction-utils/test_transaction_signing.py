from eth_keys import (
    keys,
)
from eth_utils import (
    big_endian_to_int,
    encode_hex,
)
import pytest

from aoa import (
    AOATransaction,
    SigningMode,
    decode_transaction,
)
from aoa._utils.address import (
    hex_to_aoa,
)
from aoa._utils.transactions import (
    build_signing_preimage,
    create_transaction_signature,
    extract_transaction_sender,
    hash_fields,
    is_signature_valid,
    recover_public_key,
)
from aoa.constants import (
    PROTOCOL_CHAIN_ID,
    SECPK1_N,
    SECPK1_N_DIV_2,
)
from aoa.exceptions import (
    InsufficientGas,
    InvalidSignature,
)


def test_sign_and_verify(signed_transaction, sender):
    assert signed_transaction.v in (37, 38)
    assert signed_transaction.s <= SECPK1_N_DIV_2
    assert signed_transaction.verify_signature()
    assert signed_transaction.get_sender() == sender


def test_default_chain_id_round_trip(unsigned_transaction, private_key, sender):
    unsigned_transaction.sign(private_key)

    assert unsigned_transaction.get_chain_id() == PROTOCOL_CHAIN_ID
    assert unsigned_transaction.verify_signature()
    assert unsigned_transaction.get_sender() == sender
    assert unsigned_transaction.validate(True) == (
        "gas limit is too low. Need at least 21656"
    )
    assert decode_transaction(unsigned_transaction.encode()).sender == (
        hex_to_aoa(encode_hex(sender))
    )


@pytest.mark.parametrize("mode", SigningMode)
def test_sign_in_both_modes(unsigned_transaction, private_key, sender, mode):
    unsigned_transaction.sign(private_key, chain_id=1, mode=mode)
    assert unsigned_transaction.get_sender() == sender


def test_create_transaction_signature(private_key):
    message_hash = hash_fields([b"\x01", b"\x02"])
    v, r, s = create_transaction_signature(message_hash, private_key, 3)

    assert v in (41, 42)
    signature = keys.Signature(vrs=(v - 41, r, s))
    recovered = signature.recover_public_key_from_msg_hash(message_hash)
    assert recovered == private_key.public_key


@pytest.mark.parametrize("chain_id", (0, 1, 3, 1337))
def test_sign_and_verify_with_chain_id(
    unsigned_transaction, private_key, sender, chain_id
):
    unsigned_transaction.sign(private_key, chain_id=chain_id)

    assert unsigned_transaction.verify_signature(chain_id)
    assert unsigned_transaction.get_sender(chain_id) == sender

    reloaded = AOATransaction.decode(unsigned_transaction.encode())
    assert reloaded.get_chain_id() == chain_id
    assert unsigned_transaction.get_chain_id() == chain_id
    assert unsigned_transaction.copy().get_chain_id() == chain_id
    assert unsigned_transaction.verify_signature(None)
    assert reloaded.verify_signature(None)
    assert reloaded.get_sender(None) == sender


@pytest.mark.parametrize("chain_id", (0, 3))
def test_verification_assumes_protocol_chain_id(
    unsigned_transaction, private_key, chain_id
):
    unsigned_transaction.sign(private_key, chain_id=chain_id)

    assert not unsigned_transaction.verify_signature()
    with pytest.raises(InvalidSignature):
        unsigned_transaction.get_sender()


def test_unsigned_transaction_has_no_sender(unsigned_transaction):
    assert not unsigned_transaction.verify_signature()
    with pytest.raises(InvalidSignature):
        unsigned_transaction.get_sender()


def test_private_key_bytes_are_accepted(unsigned_transaction, private_key, sender):
    unsigned_transaction.sign(private_key.to_bytes(), chain_id=1)
    assert unsigned_transaction.get_sender() == sender


def test_high_s_signature_is_rejected(signed_transaction, sender):
    y_parity = signed_transaction.v - 37
    high_s = SECPK1_N - signed_transaction.s
    malleated = signed_transaction.copy(v=37 + (1 - y_parity), s=high_s)

    # the malleated signature still recovers the sender
    message_hash = hash_fields(build_signing_preimage(malleated.raw, 1))
    signature = keys.Signature(vrs=(1 - y_parity, malleated.r, high_s))
    recovered = signature.recover_public_key_from_msg_hash(message_hash)
    assert recovered.to_canonical_address() == sender

    assert not malleated.verify_signature()
    with pytest.raises(InvalidSignature, match="above"):
        malleated.get_sender()


def test_s_bound(signed_transaction, sender):
    fields = list(signed_transaction.raw)
    fields[-1] = (SECPK1_N_DIV_2 + 1).to_bytes(32, "big")
    with pytest.raises(InvalidSignature, match="above"):
        recover_public_key(fields, 1)

    # the largest accepted s recovers some other key
    fields[-1] = SECPK1_N_DIV_2.to_bytes(32, "big")
    recovered = recover_public_key(fields, 1)
    assert recovered.to_canonical_address() != sender


def test_tampered_transaction_has_different_sender(signed_transaction, sender):
    tampered = signed_transaction.copy(value=1)
    assert tampered.get_sender() != sender


def test_invalid_v_is_rejected(signed_transaction):
    tampered = signed_transaction.copy(v=39)
    assert not tampered.verify_signature()


def test_sender_is_memoized_until_resigned(
    signed_transaction, sender, other_private_key
):
    public_key = signed_transaction.get_sender_public_key()
    assert signed_transaction.get_sender_public_key() is public_key

    signed_transaction.sign(other_private_key, chain_id=1)
    assert signed_transaction.get_sender() == (
        other_private_key.public_key.to_canonical_address()
    )
    assert signed_transaction.get_sender() != sender


def test_signature_functions_on_raw_fields(signed_transaction, sender):
    assert is_signature_valid(signed_transaction.raw, 1)
    assert not is_signature_valid(signed_transaction.raw, 2)
    assert extract_transaction_sender(signed_transaction.raw, 1) == sender


def test_signing_does_not_depend_on_previous_signature(
    unsigned_transaction, private_key
):
    first = unsigned_transaction.copy()
    first.sign(private_key, chain_id=1)
    second = first.copy()
    second.sign(private_key, chain_id=1)
    assert first.raw == second.raw


def test_legacy_mode_matches_canonical_mode_on_fresh_transactions(
    unsigned_transaction, private_key, sender
):
    canonical = unsigned_transaction.copy()
    canonical.sign(private_key, chain_id=1)
    legacy = unsigned_transaction.copy()
    legacy.sign(private_key, chain_id=1, mode=SigningMode.LEGACY)

    assert legacy.raw == canonical.raw
    assert legacy.get_sender() == sender


def test_legacy_mode_hashes_action(unsigned_transaction, private_key, sender):
    transaction = unsigned_transaction.copy(action=1)
    transaction.sign(private_key, chain_id=1, mode=SigningMode.LEGACY)

    assert transaction.get_sender() != sender

    canonical = unsigned_transaction.copy(action=1)
    canonical.sign(private_key, chain_id=1)
    assert canonical.get_sender() == sender


def test_legacy_mode_with_other_chain_id(unsigned_transaction, private_key, sender):
    unsigned_transaction.sign(private_key, chain_id=3, mode=SigningMode.LEGACY)

    assert unsigned_transaction.v in (41, 42)
    assert not unsigned_transaction.verify_signature()
    assert unsigned_transaction.get_sender(3) == sender


def test_end_to_end(signed_transaction, sender):
    assert signed_transaction.verify_signature()
    assert signed_transaction.get_sender() == sender

    base_fee = signed_transaction.get_base_fee()
    assert base_fee == 21000 + 656
    assert signed_transaction.validate() is (signed_transaction.gas_limit >= base_fee)
    assert signed_transaction.validate() is False
    assert signed_transaction.validate(True) == (
        f"gas limit is too low. Need at least {base_fee}"
    )

    with pytest.raises(InsufficientGas) as excinfo:
        signed_transaction.check_gas()
    assert excinfo.value.required_gas == base_fee


def test_end_to_end_with_enough_gas(transaction_fields, private_key):
    transaction = AOATransaction(dict(transaction_fields, gasLimit="0x7530"))
    transaction.sign(private_key, chain_id=1)

    assert transaction.validate() is True
    assert transaction.validate(True) == ""


def test_validate_reports_every_reason(unsigned_transaction):
    assert unsigned_transaction.validate() is False
    assert unsigned_transaction.validate(True) == (
        "Invalid Signature gas limit is too low. Need at least 21656"
    )


def test_signature_values_are_in_range(signed_transaction):
    assert 0 < signed_transaction.r < SECPK1_N
    assert 0 < signed_transaction.s <= SECPK1_N_DIV_2
    raw_s = signed_transaction.get_raw_field("s")
    assert big_endian_to_int(raw_s) == signed_transaction.s
