'''
Declarative description of fields packed at arbitrary bit positions inside
64 bit little endian words.

A layout is a table of BitRange(name, word, offset, width) where offset is
counted from the least significant bit of the word; a single routine reads
and writes every entry so there is only one place where the bit arithmetic
happens.
'''
from collections import namedtuple
from typing import Dict, Iterable, List, Sequence

from bitstring import BitArray, Bits

from .exceptions import UnresolvedField


WORD_BITS = 64


class BitRange(namedtuple('BitRange', ['name', 'word', 'offset', 'width'])):
    __slots__ = ()

    @property
    def max_value(self) -> int:
        return (1 << self.width) - 1

    def span(self):
        '''Position of the range inside a big endian BitArray of a word.'''
        return WORD_BITS - self.offset - self.width, WORD_BITS - self.offset


class Layout(object):
    """Validated, ordered table of bit ranges spread over n_words words."""

    def __init__(self, ranges: Iterable[Sequence], n_words: int):
        self.n_words = n_words
        self.ranges = tuple(BitRange(*_) for _ in ranges)
        self._by_name = {_.name: _ for _ in self.ranges}

        self.validate()

    def __repr__(self):
        return f'<{self.__class__.__name__}({", ".join(self.names())})>'

    def __contains__(self, name):
        return name in self._by_name

    def __getitem__(self, name) -> BitRange:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnresolvedField(chain=[name], msg='the layout doesn\'t define this field') from None

    def __iter__(self):
        return iter(self.ranges)

    def names(self) -> List[str]:
        return [_.name for _ in self.ranges]

    def validate(self):
        if len(self._by_name) != len(self.ranges):
            raise ValueError('a field name is used more than once in the layout')

        occupied = [BitArray(uint=0, length=WORD_BITS) for _ in range(self.n_words)]

        for bit_range in self.ranges:
            if not 0 <= bit_range.word < self.n_words:
                raise ValueError(f'{bit_range.name} is in word {bit_range.word} but there are only {self.n_words}')

            if bit_range.width < 1 or bit_range.offset < 0 or bit_range.offset + bit_range.width > WORD_BITS:
                raise ValueError(f'{bit_range.name} doesn\'t fit into a {WORD_BITS} bit word')

            start, end = bit_range.span()
            word = occupied[bit_range.word]
            if word[start:end].uint:
                raise ValueError(f'{bit_range.name} overlaps another field in word {bit_range.word}')

            word[start:end] = Bits(uint=bit_range.max_value, length=bit_range.width)

    def unpack(self, words: Sequence[int], name: str) -> int:
        '''Extract the value of the named field from the words.'''
        bit_range = self[name]
        start, end = bit_range.span()

        return Bits(uint=words[bit_range.word], length=WORD_BITS)[start:end].uint

    def unpack_all(self, words: Sequence[int]) -> Dict[str, int]:
        return {_.name: self.unpack(words, _.name) for _ in self.ranges}

    def replace(self, word: int, name: str, value: int) -> int:
        '''Return the word with the bits of the named field set to value, the others untouched.'''
        bit_range = self[name]
        if not 0 <= value <= bit_range.max_value:
            raise ValueError(f'{value} doesn\'t fit into the {bit_range.width} bits of {name}')

        start, end = bit_range.span()
        bits = BitArray(uint=word, length=WORD_BITS)
        bits[start:end] = Bits(uint=value, length=bit_range.width)

        return bits.uint

    def pack(self, values: Dict[str, int]) -> List[int]:
        '''Build the words from scratch, bits not covered by any field are zero.'''
        words = [0] * self.n_words
        for name, value in values.items():
            word_index = self[name].word
            words[word_index] = self.replace(words[word_index], name, value)

        return words


class BitProperty(object):
    """Expose a field of the layout as an attribute of a BitPacked chunk."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        return instance.get_bits(self.name)

    def __set__(self, instance, value):
        instance.set_bits(self.name, value)


class BitPacked(object):
    """Mixin for chunks made of 64 bit words described by a Layout.

    WORDS lists the names of the word fields in order."""
    WORDS = ()

    def get_layout(self) -> Layout:
        raise NotImplementedError(f'{self.__class__.__name__} must define its layout')

    def get_words(self) -> List[int]:
        return [getattr(self, _).value for _ in self.WORDS]

    def get_bits(self, name: str) -> int:
        return self.get_layout().unpack(self.get_words(), name)

    def set_bits(self, name: str, value: int) -> None:
        layout = self.get_layout()
        word_field = getattr(self, self.WORDS[layout[name].word])
        word_field.value = layout.replace(word_field.value, name, value)

    def as_dict(self) -> Dict[str, int]:
        return self.get_layout().unpack_all(self.get_words())
