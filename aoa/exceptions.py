from eth_utils import (
    ValidationError,
)


class AOAError(Exception):
    """
    Base class for all aoa errors.
    """


class InvalidField(AOAError, ValidationError):
    """
    Raised when a transaction field value cannot be canonicalized according to
    its field descriptor.
    """

    @property
    def field_name(self) -> str:
        return self.args[0]


class FieldTooLong(InvalidField):
    """
    Raised when a field value is longer than the descriptor allows.
    """


class DisallowedZero(InvalidField):
    """
    Raised when an empty value is given for a fixed length field that does not
    allow an empty value.
    """


class InvalidSignature(AOAError, ValidationError):
    """
    Raised when the sender of a transaction cannot be recovered: the recovery
    fails, ``s`` is above ``secp256k1n / 2``, or no signature is present.
    """


class InsufficientGas(AOAError, ValidationError):
    """
    Raised when the gas limit of a transaction is below its base fee.
    """

    @property
    def required_gas(self) -> int:
        return self.args[1]


class MalformedEncoding(AOAError, ValidationError):
    """
    Raised when a serialized transaction is not an RLP list of 16 byte strings.
    """
