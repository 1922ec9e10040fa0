import pytest

from o2headers.exceptions import InvalidLength
from o2headers.tags import (
    DataDescription,
    DataOrigin,
    HeaderType,
    Magic,
    SerializationMethod,
)


def test_sizes():
    assert Magic.size == 4
    assert DataOrigin.size == 4
    assert DataDescription.size == 16
    assert HeaderType.size == 16
    assert SerializationMethod.size == 8


def test_rendering():
    assert str(DataOrigin.ANY) == '****'
    assert str(Magic.O2) == 'O2O2'

    # the zero padding is part of the value
    assert str(SerializationMethod.ROOT) == 'ROOT\x00\x00\x00\x00'
    assert SerializationMethod.ROOT.text == 'ROOT'
    assert str(DataDescription.ROOT_STREAMERS).startswith('ROOT STREAMERS')


@pytest.mark.parametrize('value', [b'TP', b'TPC', b'TPC\x00\x00'])
def test_wrong_length(value):
    with pytest.raises(InvalidLength):
        DataOrigin(value)


def test_padded():
    assert DataOrigin.padded(b'TPC') == DataOrigin(b'TPC\x00')
    assert DataOrigin.padded('TPC') == DataOrigin.TPC

    with pytest.raises(InvalidLength):
        DataOrigin.padded(b'TPCXX')


def test_build_from_str():
    assert DataOrigin('TPC\x00') == DataOrigin.TPC


def test_build_from_wrong_type():
    with pytest.raises(TypeError):
        DataOrigin(4)


def test_equality():
    assert DataOrigin(b'TPC\x00') == DataOrigin.TPC
    assert DataOrigin.TPC != DataOrigin.TRD
    # same bytes but a different kind of tag
    assert Magic(b'TPC\x00') != DataOrigin.TPC
    assert {DataOrigin.TPC: 1}[DataOrigin(b'TPC\x00')] == 1


def test_sentinels():
    assert DataOrigin.ANY.is_any()
    assert DataOrigin.INVALID.is_invalid()
    assert not DataOrigin.TPC.is_any()
    # only the exact value is the sentinel
    assert not DataOrigin(b'***\x00').is_any()
    assert DataDescription(b'*' * 15 + b'\x00').is_any()
    assert not DataDescription(b'*' * 16).is_any()
    assert not Magic.O2.is_any()


def test_registry():
    assert DataOrigin.registry['TPC'] is DataOrigin.TPC
    assert SerializationMethod.registry['ROOT'] == SerializationMethod.ROOT
    assert set(SerializationMethod.registry) == {'ANY', 'INVALID', 'NONE', 'ROOT', 'FLATBUF'}

    with pytest.raises(TypeError):
        DataOrigin.registry['XYZ'] = DataOrigin.padded(b'XYZ')
