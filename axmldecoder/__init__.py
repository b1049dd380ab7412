"""
Decoder for the binary XML format used by Android.

Only the parts needed to read a compiled `AndroidManifest.xml` are
implemented. Resource identifiers are never resolved, there is no
resource table; attribute values keep their raw typed form.
"""
from loguru import logger

from .builder import BuilderState, DocumentBuilder, decode
from .exceptions import (
    CDataOutsideElementError,
    DecodeError,
    InvalidChunkError,
    InvalidReferenceError,
    InvalidStringError,
    MismatchedEndElementError,
    MultipleRootsError,
    TruncatedChunkError,
    UnbalancedNamespaceError,
    UnclosedElementError,
    UnexpectedChunkError,
    UnexpectedEofError,
    UnsupportedEncodingError,
    UnsupportedLengthError,
)
from .manifest import ManifestInfo
from .model import Attribute, Document, Element, NamespaceBinding, Text
from .stringpool import StringPool
from .values import (
    BooleanValue,
    FloatValue,
    IntDecimal,
    IntHex,
    NullValue,
    OtherValue,
    ReferenceValue,
    StringValue,
    TypedValue,
)

__all__ = [
    "Attribute",
    "BooleanValue",
    "BuilderState",
    "CDataOutsideElementError",
    "DecodeError",
    "Document",
    "DocumentBuilder",
    "Element",
    "FloatValue",
    "IntDecimal",
    "IntHex",
    "InvalidChunkError",
    "InvalidReferenceError",
    "InvalidStringError",
    "ManifestInfo",
    "MismatchedEndElementError",
    "MultipleRootsError",
    "NamespaceBinding",
    "NullValue",
    "OtherValue",
    "ReferenceValue",
    "StringPool",
    "StringValue",
    "Text",
    "TruncatedChunkError",
    "TypedValue",
    "UnbalancedNamespaceError",
    "UnclosedElementError",
    "UnexpectedChunkError",
    "UnexpectedEofError",
    "UnsupportedEncodingError",
    "UnsupportedLengthError",
    "decode",
]

# silent unless an application enables it, see `cli.configure_logging`
logger.disable(__name__)
