from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from eth_keys import (
    datatypes,
)
from eth_typing import (
    Address,
    Hash32,
    HexStr,
)
from eth_utils import (
    big_endian_to_int,
    encode_hex,
    get_extended_debug_logger,
    is_0x_prefixed,
    to_int,
)
import rlp

from aoa._utils.address import (
    aoa_to_hex,
)
from aoa._utils.fees import (
    DEFAULT_FEE_SCHEDULE,
    FeeSchedule,
    calculate_base_fee,
    calculate_data_fee,
    calculate_upfront_cost,
)
from aoa._utils.transactions import (
    SigningMode,
    build_signing_preimage,
    create_transaction_signature,
    derive_chain_id,
    hash_fields,
    recover_public_key,
)
from aoa.abc import (
    TransactionRecordAPI,
)
from aoa.constants import (
    AOA_ADDRESS_PREFIX,
    CREATE_CONTRACT_ADDRESS,
    PROTOCOL_CHAIN_ID,
)
from aoa.exceptions import (
    InsufficientGas,
    InvalidSignature,
)
from aoa.rlp.fields import (
    FIELD_ALIASES,
    FIELD_INDEX,
    FIELD_NAMES,
    TRANSACTION_FIELDS,
    canonicalize,
    decode_raw_fields,
)
from aoa.typing import (
    FieldInput,
)

ADDRESS_FIELDS = ("to", "asset")
CHAIN_ID_KEYS = ("chain_id", "chainId")


def _raw_field(name: str, doc: str) -> property:
    index = FIELD_INDEX[name]

    def getter(self: "AOATransaction") -> bytes:
        return self._raw[index]

    return property(getter, doc=doc)


def _int_field(name: str, doc: str) -> property:
    index = FIELD_INDEX[name]

    def getter(self: "AOATransaction") -> int:
        return big_endian_to_int(self._raw[index])

    return property(getter, doc=doc)


class AOATransaction(TransactionRecordAPI):
    """
    A signed or unsigned AOA transaction.

    Can be built from a mapping of field names to values, or from a sequence
    of up to 16 values in wire order.  Values may be bytes, ``0x`` prefixed hex
    strings, integers or anything supporting ``bytes()``.  The address fields
    ``to`` and ``asset`` also accept ``AOA`` prefixed addresses.

    An empty ``to`` denotes contract creation.
    """
    logger = get_extended_debug_logger("aoa.rlp.transactions.AOATransaction")

    fields = TRANSACTION_FIELDS

    nonce = _int_field("nonce", "Sender nonce")
    gas_price = _int_field("gas_price", "Price paid per unit of gas")
    gas_limit = _int_field("gas_limit", "Maximum gas the transaction may use")
    to = _raw_field("to", "Recipient address, empty for contract creation")
    value = _int_field("value", "Amount transferred")
    data = _raw_field("data", "Call data or contract init code")
    action = _int_field("action", "Chain specific action code")
    vote = _raw_field("vote", "Vote payload")
    nickname = _raw_field("nickname", "Nickname payload")
    asset = _raw_field("asset", "Asset contract address")
    asset_info = _raw_field("asset_info", "Asset metadata payload")
    sub_address = _raw_field("sub_address", "Sub-address payload")
    abi = _raw_field("abi", "ABI payload")
    v = _int_field("v", "Signature v, carrying the recovery id and chain id")
    r = _int_field("r", "Signature r")
    s = _int_field("s", "Signature s")

    def __init__(
        self,
        field_values: Union[Mapping[str, Any], Sequence[FieldInput], None] = None,
        *,
        chain_id: Optional[int] = None,
        fee_schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE,
    ) -> None:
        if field_values is None:
            field_values = {}

        if isinstance(field_values, Mapping):
            values = self._values_from_mapping(field_values)
            if chain_id is None:
                chain_id = self._chain_id_from_mapping(field_values)
        elif isinstance(field_values, (bytes, bytearray, str)):
            raise TypeError(
                "Serialized transactions must be loaded with AOATransaction.decode()"
            )
        else:
            values = list(field_values)
            if len(values) > len(self.fields):
                raise ValueError(
                    f"Wrong number of fields: expected at most {len(self.fields)}, "
                    f"got {len(values)}"
                )
            values += [None] * (len(self.fields) - len(values))

        self._raw: List[bytes] = [
            canonicalize(self._coerce_address(descriptor.name, value), descriptor)
            for descriptor, value in zip(self.fields, values)
        ]
        self._fee_schedule = fee_schedule
        self._sender_public_keys: Dict[int, datatypes.PublicKey] = {}

        derived_chain_id = derive_chain_id(self.v)
        self._chain_id = derived_chain_id or chain_id or 0

    @staticmethod
    def _values_from_mapping(field_values: Mapping[str, Any]) -> List[Any]:
        values: List[Any] = [None] * len(FIELD_NAMES)
        for key, value in field_values.items():
            name = FIELD_ALIASES.get(key, key)
            if name in FIELD_INDEX:
                values[FIELD_INDEX[name]] = value
        return values

    @staticmethod
    def _chain_id_from_mapping(field_values: Mapping[str, Any]) -> Optional[int]:
        for key in CHAIN_ID_KEYS:
            value = field_values.get(key)
            if value is None:
                continue
            elif isinstance(value, str) and is_0x_prefixed(value):
                return to_int(hexstr=value)
            elif isinstance(value, str):
                return to_int(text=value)
            return to_int(value)
        return None

    @staticmethod
    def _coerce_address(name: str, value: Any) -> Any:
        if (
            name in ADDRESS_FIELDS
            and isinstance(value, str)
            and value.startswith(AOA_ADDRESS_PREFIX)
        ):
            return aoa_to_hex(value)
        return value

    @classmethod
    def decode(
        cls,
        encoded: Union[bytes, HexStr],
        fee_schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE,
    ) -> "AOATransaction":
        return cls(decode_raw_fields(encoded), fee_schedule=fee_schedule)

    def encode(self) -> bytes:
        return rlp.encode(self._raw)

    def copy(self, **overrides: Any) -> "AOATransaction":
        field_values: Dict[str, Any] = dict(zip(FIELD_NAMES, self._raw))
        field_values.update(overrides)
        return type(self)(
            field_values,
            chain_id=self._chain_id,
            fee_schedule=self._fee_schedule,
        )

    #
    # Raw field access
    #
    @property
    def raw(self) -> Tuple[bytes, ...]:
        return tuple(self._raw)

    def get_raw_field(self, name: str) -> bytes:
        return self._raw[FIELD_INDEX[FIELD_ALIASES.get(name, name)]]

    def _set_field(self, name: str, value: FieldInput) -> None:
        index = FIELD_INDEX[name]
        self._raw[index] = canonicalize(value, self.fields[index])
        self._sender_public_keys.clear()

    def get_chain_id(self) -> int:
        return self._chain_id

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def is_contract_creation(self) -> bool:
        return self.to == CREATE_CONTRACT_ADDRESS

    #
    # Hashing
    #
    def signing_hash(
        self, include_signature: bool = True, chain_id_override: Optional[int] = None
    ) -> Hash32:
        if include_signature:
            if chain_id_override:
                self._set_field("v", chain_id_override)
            return hash_fields(self._raw)
        else:
            return hash_fields(build_signing_preimage(self._raw, self._chain_id))

    @property
    def hash(self) -> Hash32:
        return hash_fields(self._raw)

    #
    # Signature and Sender
    #
    def sign(
        self,
        private_key: Union[datatypes.PrivateKey, bytes],
        chain_id: int = PROTOCOL_CHAIN_ID,
        mode: SigningMode = SigningMode.CANONICAL,
    ) -> None:
        """
        Sign with ``private_key`` and write ``v``, ``r`` and ``s`` into the
        record.

        In ``CANONICAL`` mode the signed message is the chain bound pre-image
        for ``chain_id``, the same one verification rebuilds.  In ``LEGACY``
        mode ``v`` is first set to ``chain_id`` and all 16 current fields are
        hashed.  The two modes produce the same signature only for records with
        an empty ``action`` that were not signed before and a chain id above 0.
        """
        if mode is SigningMode.CANONICAL:
            message_hash = hash_fields(build_signing_preimage(self._raw, chain_id))
        elif mode is SigningMode.LEGACY:
            message_hash = self.signing_hash(True, chain_id)
        else:
            raise TypeError(f"Unknown signing mode: {mode!r}")

        v, r, s = create_transaction_signature(message_hash, private_key, chain_id)
        self.logger.debug(
            "Signed transaction %s for chain id %d (%s mode)",
            encode_hex(message_hash),
            chain_id,
            mode.value,
        )
        self._set_field("v", v)
        self._set_field("r", r)
        self._set_field("s", s)
        self._chain_id = derive_chain_id(v) or self._chain_id

    def _resolve_chain_id(self, chain_id: Optional[int]) -> int:
        if chain_id is None:
            return self._chain_id
        return chain_id

    def get_sender_public_key(
        self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID
    ) -> datatypes.PublicKey:
        chain_id = self._resolve_chain_id(chain_id)
        if chain_id not in self._sender_public_keys:
            self._sender_public_keys[chain_id] = recover_public_key(
                self._raw, chain_id
            )
        return self._sender_public_keys[chain_id]

    def verify_signature(self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID) -> bool:
        """
        Return ``True`` if the sender can be recovered for ``chain_id``.

        ``chain_id`` defaults to the protocol chain id rather than the record's
        own; pass ``None`` to use :meth:`get_chain_id`.
        """
        try:
            self.get_sender_public_key(chain_id)
        except InvalidSignature:
            return False
        else:
            return True

    def check_signature_validity(
        self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID
    ) -> None:
        self.get_sender_public_key(chain_id)

    def get_sender(self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID) -> Address:
        public_key = self.get_sender_public_key(chain_id)
        return Address(public_key.to_canonical_address())

    #
    # Fees
    #
    def get_data_fee(self) -> int:
        return calculate_data_fee(self._fee_schedule, self.data)

    def get_base_fee(self) -> int:
        return calculate_base_fee(
            self._fee_schedule, self.data, self.is_contract_creation()
        )

    def get_upfront_cost(self) -> int:
        return calculate_upfront_cost(
            self.get_raw_field("gas_limit"),
            self.get_raw_field("gas_price"),
            self.get_raw_field("value"),
        )

    def check_gas(self) -> None:
        base_fee = self.get_base_fee()
        if self.gas_limit < base_fee:
            raise InsufficientGas(
                f"gas limit is too low. Need at least {base_fee}", base_fee
            )

    #
    # Validation
    #
    def get_validation_errors(
        self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID
    ) -> List[str]:
        errors = []
        try:
            self.check_signature_validity(chain_id)
        except InvalidSignature:
            errors.append("Invalid Signature")

        try:
            self.check_gas()
        except InsufficientGas as err:
            errors.append(err.args[0])

        return errors

    def validate(
        self, want_string: bool = False, chain_id: Optional[int] = PROTOCOL_CHAIN_ID
    ) -> Union[bool, str]:
        """
        Check the signature and that the gas limit covers the base fee.

        Returns a bool, or with ``want_string`` the space separated failure
        reasons (empty when valid).
        """
        errors = self.get_validation_errors(chain_id)
        if want_string:
            return " ".join(errors)
        else:
            return not errors

    def to_dict(self) -> Dict[str, str]:
        return {name: encode_hex(raw) for name, raw in zip(FIELD_NAMES, self._raw)}

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AOATransaction):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(tuple(self._raw))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} hash={encode_hex(self.hash)}>"
