import pytest

from o2headers.bits import BitRange, Layout
from o2headers.exceptions import UnresolvedField


@pytest.fixture
def layout():
    return Layout([
        ('low', 0, 0, 4),
        ('high', 0, 4, 4),
        ('top', 0, 60, 4),
        ('other', 1, 0, 64),
    ], n_words=2)


def test_unpack(layout):
    words = [0xF00000000000002A, 0x0102030405060708]

    assert layout.unpack(words, 'low') == 0xA
    assert layout.unpack(words, 'high') == 0x2
    assert layout.unpack(words, 'top') == 0xF
    assert layout.unpack(words, 'other') == 0x0102030405060708


def test_pack(layout):
    words = layout.pack({'low': 0xA, 'high': 0x2, 'top': 0xF})

    assert words == [0xF00000000000002A, 0]


def test_replace_keeps_other_bits(layout):
    assert layout.replace(0xFF, 'high', 0) == 0x0F
    assert layout.replace(0x00, 'top', 1) == 1 << 60


@pytest.mark.parametrize('value', [-1, 16])
def test_value_too_big(layout, value):
    with pytest.raises(ValueError):
        layout.pack({'low': value})


def test_unknown_field(layout):
    with pytest.raises(UnresolvedField) as excinfo:
        layout.unpack([0, 0], 'missing')

    assert excinfo.value.chain == ['missing']
    assert 'missing' not in layout


@pytest.mark.parametrize('ranges', [
    [('a', 0, 0, 8), ('b', 0, 7, 8)],   # overlap
    [('a', 0, 60, 8)],                  # out of the word
    [('a', 2, 0, 8)],                   # no such word
    [('a', 0, 0, 0)],                   # empty
    [('a', 0, 0, 8), ('a', 1, 0, 8)],   # same name
])
def test_invalid_layout(ranges):
    with pytest.raises(ValueError):
        Layout(ranges, n_words=2)


def test_bitrange():
    bit_range = BitRange('a', 0, 8, 16)

    assert bit_range.max_value == 0xffff
    assert bit_range.span() == (40, 56)


def test_adjacent_ranges_fill_the_word():
    layout = Layout([
        ('a', 0, 0, 1),
        ('b', 0, 1, 62),
        ('c', 0, 63, 1),
    ], n_words=1)

    words = layout.pack({'a': 1, 'b': (1 << 62) - 1, 'c': 1})

    assert words == [0xFFFFFFFFFFFFFFFF]
    assert layout.replace(words[0], 'b', 0) == 0x8000000000000001
    assert layout.unpack(words, 'c') == 1
