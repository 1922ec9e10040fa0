'''
# Header stack

Every message travelling between two devices starts with a stack of headers,
each of them made of the same preamble (BaseHeader) followed by the fields
specific of its kind.

     0       4       8       12      16                      32              40
     |-------|-------|-------|-------|-----------------------|---------------|
     | magic | hdrsz | flags |version|     header type       | serialization |

The preamble tells how big the header is (preamble included), which kind
of header it is and, via bit 0 of the flags, if another header follows
right after. Every integer is little endian.

DataHeader is the main one and it should be present in every message, it
describes the payload that follows the stack: its size, where it comes from
and what it contains.
'''
from collections import namedtuple

from . import fields
from .bits import BitPacked, BitProperty, Layout
from .core import Chunk
from .exceptions import InvalidLength
from .tags import (
    DataDescription,
    DataOrigin,
    HeaderType,
    Magic,
    SerializationMethod,
)


PREAMBLE_SIZE = 40

FLAG_NEXT_HEADER = 1 << 0


class BaseHeader(Chunk):
    magic         = fields.TagField(Magic, default=Magic.O2, is_magic=True)
    hdrsz         = fields.StructField('I')
    flags         = fields.StructField('I')
    version       = fields.StructField('I')
    type          = fields.TagField(HeaderType)
    serialization = fields.TagField(SerializationMethod, default=SerializationMethod.NONE)

    HEADER_TYPE = None
    VERSION = 0

    def init(self):
        self.hdrsz = self.size
        self.version = self.VERSION
        if self.HEADER_TYPE is not None:
            self.type = self.HEADER_TYPE

    @classmethod
    def decode(cls, data, offset=0, **kwargs):
        '''Unpack a header starting at offset of a bytes-like object.'''
        view = memoryview(data)[offset:]
        return cls(view, **kwargs)

    def encode(self) -> bytes:
        return self.pack()

    def _get_has_next(self) -> bool:
        return bool(self.flags.value & FLAG_NEXT_HEADER)

    def _set_has_next(self, value: bool) -> None:
        if value:
            self.flags = self.flags.value | FLAG_NEXT_HEADER
        else:
            self.flags = self.flags.value & ~FLAG_NEXT_HEADER

    has_next = property(_get_has_next, _set_has_next)

    @property
    def header_type(self) -> HeaderType:
        return self.type.value

    def validate(self):
        if self.hdrsz.value < PREAMBLE_SIZE:
            raise InvalidLength(
                chain=['hdrsz'],
                msg=f'header size {self.hdrsz.value} is smaller than the preamble ({PREAMBLE_SIZE} bytes)')


class DataIdentifier(namedtuple('DataIdentifier', ['description', 'origin'])):
    """Routing key of a block of data."""
    __slots__ = ()

    def __str__(self):
        return f'{self.origin.text}/{self.description.text}'

    def matches(self, other: "DataIdentifier") -> bool:
        '''Equality where the ANY sentinels work as wildcards.'''
        description = self.description.is_any() or other.description.is_any() \
            or self.description == other.description
        origin = self.origin.is_any() or other.origin.is_any() or self.origin == other.origin

        return description and origin


class DataHeader(BaseHeader):
    """Describe the payload following the header stack."""
    description           = fields.TagField(DataDescription, default=DataDescription.INVALID)
    origin                = fields.TagField(DataOrigin, default=DataOrigin.INVALID)
    reserved              = fields.ReservedField(4)
    payload_serialization = fields.TagField(SerializationMethod, default=SerializationMethod.INVALID)
    sub_specification     = fields.StructField('Q')
    payload_size          = fields.StructField('Q')

    HEADER_TYPE = HeaderType.padded(b'DataHeader')
    VERSION = 1

    @property
    def data_identifier(self) -> DataIdentifier:
        return DataIdentifier(self.description.value, self.origin.value)


class NameField(fields.StringField):
    """String whose length is given by the header size of the father."""

    def __init__(self, **kw):
        super().__init__(n=0, default=b'', **kw)

    def value_from_default(self):
        return b''

    def _set_value(self, value) -> None:
        if isinstance(value, str):
            value = value.encode('ascii')

        self.length = len(value)
        self._value = bytes(value)

        if self.father is not None:
            self.father.hdrsz = PREAMBLE_SIZE + self.length

    def unpack(self, stream):
        length = self.father.hdrsz.value - PREAMBLE_SIZE
        if length < 0:
            raise InvalidLength(chain=[], msg=f'header size {self.father.hdrsz.value} leaves no room for the name')

        self.length = length
        super().unpack(stream)


class NameHeader(BaseHeader):
    """Header carrying the name of an object, the name fills the rest of the header."""
    hdr_name = NameField()

    HEADER_TYPE = HeaderType.padded(b'NameHead')
    VERSION = 1

    @property
    def text(self) -> str:
        return self.hdr_name.value.rstrip(b'\x00').decode('ascii')


class HeartbeatHeader(BitPacked, BaseHeader):
    """Frame emitted to signal a device is still alive."""
    word = fields.StructField('Q')

    WORDS = ('word',)
    LAYOUT = Layout([
        ('block_type', 0, 0, 3),
        ('header_length', 0, 3, 5),
        ('orbit', 0, 8, 24),
    ], n_words=1)

    block_type = BitProperty('block_type')
    header_length = BitProperty('header_length')
    orbit = BitProperty('orbit')

    HEADER_TYPE = HeaderType.padded(b'HeartbeatHeader')
    VERSION = 1

    def init(self):
        super().init()
        self.block_type = 1
        self.header_length = 1

    def get_layout(self):
        return self.LAYOUT


class HeartbeatTrailer(BitPacked, BaseHeader):
    word = fields.StructField('Q')

    WORDS = ('word',)
    LAYOUT = Layout([
        ('block_type', 0, 0, 3),
        ('trailer_length', 0, 3, 5),
        ('data_length', 0, 8, 24),
    ], n_words=1)

    block_type = BitProperty('block_type')
    trailer_length = BitProperty('trailer_length')
    data_length = BitProperty('data_length')

    HEADER_TYPE = HeaderType.padded(b'HeartbeatTrailer')
    VERSION = 1

    def init(self):
        super().init()
        self.block_type = 5
        self.trailer_length = 1

    def get_layout(self):
        return self.LAYOUT


class HeartbeatStatistics(BaseHeader):
    """Statistics about the heartbeat frames, transmitted in real time."""
    time_tick_ns = fields.StructField('Q')  # time tick when this statistics was created
    duration_ns  = fields.StructField('Q')  # difference to the previous time tick

    HEADER_TYPE = HeaderType.padded(b'HeartbeatStats')
    VERSION = 1
