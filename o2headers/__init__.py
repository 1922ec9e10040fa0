"""
# o2headers: data headers for the O2 data flow.

Two families of binary headers are described here:

 1. the header stack: a sequence of self-describing headers, each one
    starting with the same preamble (BaseHeader) that tells its size and if
    another header follows. DataHeader describes the payload after the stack.

 2. the RAW data header (RDH): the fixed 32 bytes descriptor in front of every
    page of raw data coming from the front-end electronics.

Each header is a Chunk, an ordered sequence of fields, that can be

 1. unpack()-ed: build the high-level representation from binary data,
    passing the data to the constructor does exactly that.

 2. pack()-ed: encode the high-level representation into binary data.

    >>> from o2headers import DataHeader, DataOrigin
    >>> header = DataHeader(origin=DataOrigin.TPC, payload_size=0x100)
    >>> DataHeader(header.pack()).payload_size.value
    256
"""
from .exceptions import (
    O2HeaderException,
    InvalidLength,
    MagicMismatch,
    TruncatedBuffer,
    UnresolvedField,
)
from .tags import (
    InvalidToken32,
    InvalidToken64,
    Tag,
    Magic,
    DataOrigin,
    DataDescription,
    HeaderType,
    SerializationMethod,
)
from .headers import (
    PREAMBLE_SIZE,
    BaseHeader,
    DataHeader,
    DataIdentifier,
    NameHeader,
    HeartbeatHeader,
    HeartbeatTrailer,
    HeartbeatStatistics,
)
from .stack import (
    HEADER_CLASSES,
    register_header,
    decode_header,
    iter_headers,
    decode_stack,
    find_header,
    encode_stack,
    encode_message,
    split_message,
)
from .rdh import (
    RDH_SIZE,
    RAWDataHeader,
    register_layout,
)
