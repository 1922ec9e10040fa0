'''
# Tags

Fixed width ASCII identifiers used all over the header stack to tell what a
block of data is and where it comes from.

A tag is just a bytes value with a length that depends on its kind, two tags
are equal only when they are of the same kind and have exactly the same bytes
(zero padding included).

The well-known values are collected per kind into a read-only registry at
import time, for example

    >>> str(DataOrigin.TPC)
    'TPC\\x00'
    >>> DataOrigin.registry['TPC'] is DataOrigin.TPC
    True
'''
from types import MappingProxyType

from .exceptions import InvalidLength


InvalidToken32 = 0xFFFFFFFF
InvalidToken64 = 0xFFFFFFFFFFFFFFFF


class Tag(bytes):
    """Base class for the fixed width identifiers."""
    size = 0
    registry = MappingProxyType({})

    def __new__(cls, value):
        if isinstance(value, str):
            value = value.encode('ascii')
        elif not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f'{cls.__name__} must be built from bytes, not {value.__class__.__name__}')

        value = bytes(value)

        if len(value) != cls.size:
            raise InvalidLength(
                chain=[],
                msg=f'{cls.__name__} must be {cls.size} bytes long, got {len(value)}')

        return super().__new__(cls, value)

    @classmethod
    def padded(cls, value) -> "Tag":
        '''Build the tag from a possibly shorter value, the missing bytes are zeros.'''
        if isinstance(value, str):
            value = value.encode('ascii')

        if len(value) > cls.size:
            raise InvalidLength(
                chain=[],
                msg=f'{cls.__name__} can hold at most {cls.size} bytes, got {len(value)}')

        return cls(bytes(value) + b'\x00' * (cls.size - len(value)))

    def __str__(self):
        return self.decode('latin1')

    def __repr__(self):
        return f'{self.__class__.__name__}({bytes(self)!r})'

    def __eq__(self, other):
        if isinstance(other, Tag) and type(other) is not type(self):
            return False

        return bytes.__eq__(self, other)

    def __ne__(self, other):
        return not self == other

    __hash__ = bytes.__hash__

    @property
    def text(self) -> str:
        '''The rendering without the zero padding.'''
        return str(self).rstrip('\x00')

    def is_any(self) -> bool:
        return self == getattr(self.__class__, 'ANY', None)

    def is_invalid(self) -> bool:
        return self == getattr(self.__class__, 'INVALID', None)


class Magic(Tag):
    size = 4


class DataOrigin(Tag):
    '''Origin (detector or subsystem name) of a datum.'''
    size = 4


class DataDescription(Tag):
    size = 16


class HeaderType(Tag):
    size = 16


class SerializationMethod(Tag):
    size = 8


def _register(cls, **tags):
    '''Set the well-known values as class attributes and freeze the registry.'''
    registry = {}
    for name, value in tags.items():
        tag = cls.padded(value)
        setattr(cls, name, tag)
        registry[name] = tag

    cls.registry = MappingProxyType(registry)


_register(
    Magic,
    O2=b'O2O2',
)

_register(
    DataOrigin,
    ANY=b'****',
    INVALID=b'NIL',
    FLP=b'FLP',
    ACO=b'ACO',
    CPV=b'CPV',
    CTP=b'CTP',
    EMC=b'EMC',
    FIT=b'FIT',
    HMP=b'HMP',
    ITS=b'ITS',
    MCH=b'MCH',
    MFT=b'MFT',
    MID=b'MID',
    PHS=b'PHS',
    TOF=b'TOF',
    TPC=b'TPC',
    TRD=b'TRD',
    ZDC=b'ZDC',
)

_register(
    DataDescription,
    ANY=b'*' * (DataDescription.size - 1),
    INVALID=b'INVALID_DESC',
    RAWDATA=b'RAWDATA',
    CLUSTERS=b'CLUSTERS',
    TRACKS=b'TRACKS',
    CONFIG=b'CONFIGURATION',
    INFO=b'INFORMATION',
    ROOT_STREAMERS=b'ROOT STREAMERS',
)

_register(
    HeaderType,
    ANY=b'*' * HeaderType.size,
    INVALID=b'INVALID',
)

_register(
    SerializationMethod,
    ANY=b'*' * SerializationMethod.size,
    INVALID=b'INVALID',
    NONE=b'NONE',
    ROOT=b'ROOT',
    FLATBUF=b'FLATBUF',
)
