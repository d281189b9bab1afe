from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Dict,
    Optional,
    Tuple,
)

from eth_keys import (
    datatypes,
)
from eth_typing import (
    Address,
    Hash32,
)

from aoa.constants import (
    PROTOCOL_CHAIN_ID,
)


class TransactionRecordAPI(ABC):
    """
    A transaction made of 16 raw byte string fields, with the hashing, signing
    and fee accounting that operates on them.
    """

    @property
    @abstractmethod
    def raw(self) -> Tuple[bytes, ...]:
        """
        The canonical raw fields, in wire order.
        """
        ...

    @abstractmethod
    def get_raw_field(self, name: str) -> bytes:
        ...

    @abstractmethod
    def get_chain_id(self) -> int:
        """
        Return the chain id derived from ``v`` when the record was built, or
        the explicitly supplied one if ``v`` does not carry a chain id.
        """
        ...

    @abstractmethod
    def is_contract_creation(self) -> bool:
        ...

    #
    # Hashing and serialization
    #
    @abstractmethod
    def signing_hash(
        self, include_signature: bool = True, chain_id_override: Optional[int] = None
    ) -> Hash32:
        """
        Return the Keccak-256 hash of the RLP encoded fields.

        With ``include_signature`` all 16 current fields are hashed.  A truthy
        ``chain_id_override`` is first written into ``v``; this changes the
        record.

        Without ``include_signature`` the chain bound signing pre-image is
        hashed instead, using the record's own chain id.
        """
        ...

    @abstractmethod
    def encode(self) -> bytes:
        ...

    @classmethod
    @abstractmethod
    def decode(cls, encoded: bytes) -> "TransactionRecordAPI":
        ...

    #
    # Signature and Sender
    #
    @abstractmethod
    def sign(
        self,
        private_key: datatypes.PrivateKey,
        chain_id: int = PROTOCOL_CHAIN_ID,
        **kwargs: Any,
    ) -> None:
        """
        Sign the transaction and assign ``v``, ``r`` and ``s`` in place.
        """
        ...

    @abstractmethod
    def verify_signature(self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID) -> bool:
        ...

    @abstractmethod
    def get_sender(self, chain_id: Optional[int] = PROTOCOL_CHAIN_ID) -> Address:
        """
        Return the address that signed this transaction.

        Raises :class:`~aoa.exceptions.InvalidSignature` if the sender cannot
        be recovered.  The result is memoized until the signature changes.
        """
        ...

    #
    # Fees
    #
    @abstractmethod
    def get_data_fee(self) -> int:
        ...

    @abstractmethod
    def get_base_fee(self) -> int:
        """
        The minimum gas the transaction must provide.
        """
        ...

    @abstractmethod
    def get_upfront_cost(self) -> int:
        """
        ``gas_limit * gas_price + value``
        """
        ...

    #
    # Validation
    #
    @abstractmethod
    def validate(self, want_string: bool = False) -> Any:
        ...

    @abstractmethod
    def to_dict(self) -> Dict[str, str]:
        ...
