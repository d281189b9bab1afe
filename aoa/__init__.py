from importlib.metadata import (
    version as __version,
)

from aoa._utils.transactions import (
    SigningMode,
)
from aoa.decoding import (
    DecodedTransaction,
    decode_transaction,
)
from aoa.rlp.transactions import (
    AOATransaction,
)

__version__ = __version("py-aoa-tx")
