"""
otsproto: wire protocol core for timestamp proofs

A proof records the chain of operations taking a document digest to one or
more attestations. This package holds the tagged record families those
proofs are built from, and the byte codec underneath them.

Usage:
    from otsproto import StreamReader, StreamWriter, PendingAttestation, TimeAttestation

    w = StreamWriter()
    PendingAttestation(b"https://alice.example/ots/1").serialize(w)
    att = TimeAttestation.deserialize(StreamReader(w.getvalue()))

    from otsproto import OpSHA256
    digest = OpSHA256()(b"hello")
"""

# Errors
from .errors import (
    DeserializationError,
    TruncatedStream,
    MalformedVarint,
    PayloadTooLarge,
    TrailingGarbage,
    InvalidContent,
    UnsupportedOperation,
)

# Configuration
from .params import ProtocolParams, DEFAULT_PARAMS

# Tags
from .tags import (
    OpTag,
    Discriminant,
    PENDING_TAG,
    BITCOIN_TAG,
    LITECOIN_TAG,
    ETHEREUM_TAG,
    tag_bytes,
)

# Codec
from .codec import StreamReader, StreamWriter, encode_varint, decode_varint

# Registry
from .registry import TagFamily, TaggedRecord

# Operations
from .ops import (
    OPERATIONS,
    Operation,
    CryptOperation,
    OpSHA1,
    OpRIPEMD160,
    OpSHA256,
    OpKECCAK256,
    UnknownOperation,
)

# Attestations
from .attestations import (
    ATTESTATIONS,
    TimeAttestation,
    PendingAttestation,
    BlockHeaderAttestation,
    BitcoinBlockHeaderAttestation,
    LitecoinBlockHeaderAttestation,
    EthereumBlockHeaderAttestation,
    UnknownAttestation,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Errors
    "DeserializationError",
    "TruncatedStream",
    "MalformedVarint",
    "PayloadTooLarge",
    "TrailingGarbage",
    "InvalidContent",
    "UnsupportedOperation",
    # Configuration
    "ProtocolParams",
    "DEFAULT_PARAMS",
    # Tags
    "OpTag",
    "Discriminant",
    "PENDING_TAG",
    "BITCOIN_TAG",
    "LITECOIN_TAG",
    "ETHEREUM_TAG",
    "tag_bytes",
    # Codec
    "StreamReader",
    "StreamWriter",
    "encode_varint",
    "decode_varint",
    # Registry
    "TagFamily",
    "TaggedRecord",
    # Operations
    "OPERATIONS",
    "Operation",
    "CryptOperation",
    "OpSHA1",
    "OpRIPEMD160",
    "OpSHA256",
    "OpKECCAK256",
    "UnknownOperation",
    # Attestations
    "ATTESTATIONS",
    "TimeAttestation",
    "PendingAttestation",
    "BlockHeaderAttestation",
    "BitcoinBlockHeaderAttestation",
    "LitecoinBlockHeaderAttestation",
    "EthereumBlockHeaderAttestation",
    "UnknownAttestation",
]
