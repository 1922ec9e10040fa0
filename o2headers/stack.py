'''
Reading and writing of a whole header stack.

A stack is walked from its first header: the preamble tells the kind of
header, used to choose the class that decodes it, and its size, that tells
where the next one starts when the continuation flag is set.
'''
import logging
from types import MappingProxyType
from typing import Iterator, List, Optional, Sequence, Tuple, Type

from .exceptions import InvalidLength, TruncatedBuffer
from .headers import (
    BaseHeader,
    DataHeader,
    HeartbeatHeader,
    HeartbeatStatistics,
    HeartbeatTrailer,
    NameHeader,
)


logger = logging.getLogger(__name__)

_header_classes = {}
HEADER_CLASSES = MappingProxyType(_header_classes)


def register_header(cls: Type[BaseHeader]) -> Type[BaseHeader]:
    '''Make the stack reader decode the headers having cls.HEADER_TYPE with cls.'''
    if cls.HEADER_TYPE is None:
        raise ValueError(f'{cls.__name__} doesn\'t define HEADER_TYPE')

    _header_classes[cls.HEADER_TYPE] = cls

    return cls


for _cls in (DataHeader, NameHeader, HeartbeatHeader, HeartbeatTrailer, HeartbeatStatistics):
    register_header(_cls)


def decode_header(data, offset: int = 0) -> BaseHeader:
    '''Decode the header at offset with the class registered for its type.

    Headers of unknown type, or with a version different from the one of the
    registered class, are returned as plain BaseHeader.'''
    base = BaseHeader.decode(data, offset)

    cls = _header_classes.get(base.header_type)
    if cls is None:
        logger.debug('no class registered for header type %r', base.header_type)
        return base

    if base.version.value != cls.VERSION:
        logger.warning('%s has version %d, only %d is known', cls.__name__, base.version.value, cls.VERSION)
        return base

    end = offset + base.hdrsz.value
    return cls(memoryview(data)[offset:end])


def iter_headers(data, offset: int = 0) -> Iterator[BaseHeader]:
    '''Yield the headers of the stack starting at offset.

    The walk stops at the first header without the continuation flag, even
    if more data follows.'''
    while True:
        header = decode_header(data, offset)
        yield header

        if not header.has_next:
            return

        offset += header.hdrsz.value
        if offset >= len(data):
            raise TruncatedBuffer(
                chain=[],
                msg=f'{header.__class__.__name__} announces another header but the data ends at {len(data)}')


def decode_stack(data, offset: int = 0) -> List[BaseHeader]:
    return list(iter_headers(data, offset))


def stack_size(headers: Sequence[BaseHeader]) -> int:
    return sum(_.hdrsz.value for _ in headers)


def find_header(data, cls: Type[BaseHeader], offset: int = 0) -> Optional[BaseHeader]:
    '''Return the first header of the stack that is an instance of cls.'''
    for header in iter_headers(data, offset):
        if isinstance(header, cls):
            return header

    return None


def encode_stack(headers: Sequence[BaseHeader]) -> bytes:
    '''Concatenate the headers setting the continuation flag on all but the last one.

    Every header takes hdrsz bytes, what its fields don't cover is zero.

    NOTE: the flags of the headers passed are updated.'''
    last = len(headers) - 1
    raw = []
    for idx, header in enumerate(headers):
        header.has_next = idx < last
        packed = header.pack()

        hdrsz = header.hdrsz.value
        if hdrsz < len(packed):
            raise InvalidLength(
                chain=['hdrsz'],
                msg=f'{hdrsz} bytes can\'t hold the {len(packed)} bytes of the header')

        raw.append(packed + b'\x00' * (hdrsz - len(packed)))

    return b''.join(raw)


def encode_message(headers: Sequence[BaseHeader], payload: bytes) -> bytes:
    '''Header stack followed by the payload, the first DataHeader gets its payload size updated.'''
    for header in headers:
        if isinstance(header, DataHeader):
            header.payload_size = len(payload)
            break

    return encode_stack(headers) + bytes(payload)


def split_message(data, offset: int = 0) -> Tuple[List[BaseHeader], bytes]:
    '''Separate the header stack from the payload.

    The payload size comes from the first DataHeader of the stack, without
    one everything after the stack is considered payload.'''
    headers = decode_stack(data, offset)
    start = offset + stack_size(headers)

    data_header = next((_ for _ in headers if isinstance(_, DataHeader)), None)
    if data_header is None:
        return headers, bytes(data[start:])

    end = start + data_header.payload_size.value
    if end > len(data):
        raise TruncatedBuffer(
            chain=['payload'],
            msg=f'payload of {data_header.payload_size.value} bytes but only {len(data) - start} available')

    return headers, bytes(data[start:end])
