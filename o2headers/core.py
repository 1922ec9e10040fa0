"""
Core module for the abstraction of a binary header

"""
from typing import Tuple, List, Dict

from .bits import BitProperty
from .fields import Field
from .enum import Compliant
from .meta import MetaChunk
from .streams import Stream
from .exceptions import O2HeaderException


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: it's an ordered
    sequence of fields, each one placed right after the previous one.

    Passing some data to the constructor unpacks it, otherwise every field
    is initialized to its default; keyword arguments named as a field, or as
    a BitProperty of the class, set its value. The fields are set first.
    """

    def __init__(self, data=None, compliant=Compliant.MAGIC | Compliant.INHERIT, **kwargs):
        values = {_: kwargs.pop(_) for _ in list(kwargs) if _ in self._meta.fields}
        values.update({
            _: kwargs.pop(_) for _ in list(kwargs)
            if isinstance(getattr(type(self), _, None), BitProperty)
        })
        super().__init__(compliant=compliant, **kwargs)

        self.relayout()

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
            self.unpack(stream)

        for field_name, value in values.items():
            setattr(self, field_name, value)

    def init(self):
        pass

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, field)
        return msg

    def __eq__(self, other):
        if not isinstance(other, Chunk) or self.__class__ is not other.__class__:
            return NotImplemented

        return self.values() == other.values()

    __hash__ = None

    def values(self) -> Dict[str, object]:
        return {name: field.value for name, field in self.get_fields()}

    @property
    def value(self):
        return self

    def _get_size(self):
        '''the size is derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def _get_raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            self.logger.debug("field '{}' raw={}".format(field_name, field_raw))
            value += field_raw

        return value

    def _set_raw(self, raw):
        self.unpack(Stream(raw))

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''Set the offsets of the fields with respect to the start of the chunk.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            if isinstance(field_instance, Chunk):
                field_instance.relayout(offset=offset + size)
            else:
                field_instance.offset = offset + size
            size += field_instance.size

        return size

    def pack(self, stream=None):
        '''Encode the fields one after the other.'''
        own_stream = stream is None
        stream = Stream(b'') if own_stream else stream

        for field_name, field_instance in self.get_fields():
            self.logger.debug('packing %s.%s' % (self.__class__.__name__, field_name))
            field_instance.pack(stream=stream)

        return stream.obj.getvalue() if own_stream else None

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are read in order starting from the actual position of the stream,
        any error coming from a field is re-raised with the name of the field
        prepended to its chain.
        '''
        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            try:
                field.unpack(stream)
            except O2HeaderException as e:
                e.chain.insert(0, field_name)
                raise

        if hasattr(self, 'validate'):
            self.validate()
