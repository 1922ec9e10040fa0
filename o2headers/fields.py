"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .enum import Compliant
from .meta import FieldBase, Endianess
from .streams import Stream
from .tags import Tag
from .exceptions import InvalidLength, MagicMismatch, TruncatedBuffer


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def is_compliant(self, level):
        '''Walk up the fathers until someone tells if we must be compliant to level.'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def check_magic(self):
        if not self.is_magic or self.value == self.default:
            return

        self.logger.warning(f'the magic doesn\'t correspond for field \'{self.name}\': {self.value!r}')
        if self.is_compliant(Compliant.MAGIC):
            raise MagicMismatch(
                chain=[],
                msg=f'expected {self.default!r}, found {self.value!r}')

    def pack(self, stream=None):
        '''Write the binary representation at the actual position of the stream.

        If no stream is passed a new one is created and its content returned.'''
        own_stream = stream is None
        stream = Stream(b'') if own_stream else stream

        stream.write(self.raw)

        return stream.obj.getvalue() if own_stream else None

    def unpack(self, stream):
        '''Read exactly size bytes from the actual position of the stream.'''
        size = self.size
        data = stream.read(size)

        if len(data) < size:
            raise TruncatedBuffer(
                chain=[],
                msg=f'needed {size} bytes, only {len(data)} available')

        self.raw = data
        self.check_magic()


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2  # we want to be as large as possible
        formatter = '0x%%0%dx' % width
        return formatter % self.value

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _set_value(self, value) -> None:
        try:
            struct.pack(self.get_format(), value)
        except struct.error as e:
            raise ValueError(f'{value!r} doesn\'t fit into field \'{self.name}\' ({self.format}): {e}') from e

        super()._set_value(value)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def _set_raw(self, raw: bytes) -> None:
        if len(raw) != self.size:
            raise InvalidLength(chain=[], msg=f'field needs {self.size} bytes, got {len(raw)}')

        self._value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes with a fixed length."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])

        super().__init__(**kw)

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _get_size(self):
        return self.length

    def _set_value(self, value) -> None:
        value = bytes(value)
        if len(value) != self.length:
            raise InvalidLength(
                chain=[],
                msg=f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(value)

    def _get_raw(self) -> bytes:
        return self.value

    def _set_raw(self, raw: bytes) -> None:
        self.value = raw


class ReservedField(StringField):
    """Bytes that must be zero when written and that are ignored when read."""

    def value_from_default(self):
        return b'\x00' * self.length

    def _set_raw(self, raw: bytes) -> None:
        if len(raw) != self.length:
            raise InvalidLength(chain=[], msg=f'field needs {self.length} bytes, got {len(raw)}')

        if any(raw):
            self.logger.debug('ignoring non zero reserved bytes %r', raw)

    def _get_raw(self) -> bytes:
        return b'\x00' * self.length


class TagField(Field):
    """Contains one of the fixed width identifiers defined in tags."""

    def __init__(self, tag_cls, default=None, **kw):
        if not issubclass(tag_cls, Tag):
            raise ValueError(f'{tag_cls!r} is not a Tag')

        self.tag_cls = tag_cls
        super().__init__(default=default, **kw)

    def __str__(self):
        return str(self.value)

    def value_from_default(self):
        return self.tag_cls(self.default) if self.default is not None else self.tag_cls.padded(b'')

    def _get_size(self):
        return self.tag_cls.size

    def _set_value(self, value) -> None:
        if isinstance(value, Tag) and not isinstance(value, self.tag_cls):
            raise ValueError(f'field \'{self.name}\' wants a {self.tag_cls.__name__}, not a {value!r}')

        super()._set_value(value if isinstance(value, self.tag_cls) else self.tag_cls(value))

    def _get_raw(self) -> bytes:
        return bytes(self.value)

    def _set_raw(self, raw: bytes) -> None:
        self.value = raw
