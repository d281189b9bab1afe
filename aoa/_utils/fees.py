from typing import (
    NamedTuple,
)

from eth_utils import (
    big_endian_to_int,
)

from aoa._utils.env import (
    env_int,
)
from aoa.constants import (
    GAS_TX,
    GAS_TXCREATE,
    GAS_TXDATANONZERO,
    GAS_TXDATAZERO,
)


class FeeSchedule(NamedTuple):
    gas_tx: int
    gas_txcreate: int
    gas_txdatazero: int
    gas_txdatanonzero: int


DEFAULT_FEE_SCHEDULE = FeeSchedule(
    gas_tx=GAS_TX,
    gas_txcreate=GAS_TXCREATE,
    gas_txdatazero=GAS_TXDATAZERO,
    gas_txdatanonzero=GAS_TXDATANONZERO,
)


def load_fee_schedule(base: FeeSchedule = DEFAULT_FEE_SCHEDULE) -> FeeSchedule:
    """
    Build a :class:`FeeSchedule` from ``base``, overriding any constant set in
    the environment:

    - ``AOA_TX_GAS``
    - ``AOA_TX_CREATION_GAS``
    - ``AOA_TX_DATA_ZERO_GAS``
    - ``AOA_TX_DATA_NON_ZERO_GAS``
    """
    return FeeSchedule(
        gas_tx=env_int("AOA_TX_GAS", default=base.gas_tx),
        gas_txcreate=env_int("AOA_TX_CREATION_GAS", default=base.gas_txcreate),
        gas_txdatazero=env_int("AOA_TX_DATA_ZERO_GAS", default=base.gas_txdatazero),
        gas_txdatanonzero=env_int(
            "AOA_TX_DATA_NON_ZERO_GAS", default=base.gas_txdatanonzero
        ),
    )


def calculate_data_fee(fee_schedule: FeeSchedule, data: bytes) -> int:
    num_zero_bytes = data.count(b"\x00")
    num_non_zero_bytes = len(data) - num_zero_bytes
    return (
        num_zero_bytes * fee_schedule.gas_txdatazero
        + num_non_zero_bytes * fee_schedule.gas_txdatanonzero
    )


def calculate_base_fee(
    fee_schedule: FeeSchedule, data: bytes, is_contract_creation: bool
) -> int:
    """
    The minimum gas a transaction must provide: data fee, plus the flat
    transaction cost, plus the creation surcharge for contract creations.
    """
    if is_contract_creation:
        create_cost = fee_schedule.gas_txcreate
    else:
        create_cost = 0
    return calculate_data_fee(fee_schedule, data) + fee_schedule.gas_tx + create_cost


def calculate_upfront_cost(gas_limit: bytes, gas_price: bytes, value: bytes) -> int:
    return (
        big_endian_to_int(gas_limit) * big_endian_to_int(gas_price)
        + big_endian_to_int(value)
    )
