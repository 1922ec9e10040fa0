import logging

import pytest

from o2headers import RAWDataHeader, InvalidLength, UnresolvedField
from o2headers.rdh import register_layout, unregister_layout, DEFAULT_LAYOUT


def test_word0():
    raw = bytes([0x01, 0x08, 0x00, 0x12, 0x34, 0x05, 0x08, 0x00]) + b'\x00' * 24

    rdh = RAWDataHeader(raw)

    assert rdh.version == 1
    assert rdh.block_length == 8
    assert rdh.fee_id == 0x3412
    assert rdh.link_id == 5
    assert rdh.header_size == 8


def test_all_fields(rdh_raw):
    rdh = RAWDataHeader(rdh_raw)

    assert rdh.trigger_orbit == 0x11223344
    assert rdh.heartbeat_orbit == 0x55667788
    assert rdh.stop_code == 1
    assert rdh.is_last_page
    assert rdh.detector_field == 0x1234
    assert rdh.par == 0x5678
    assert rdh.pages_counter == 0x0102


@pytest.mark.parametrize('size', [0, 31, 33])
def test_wrong_size(size):
    with pytest.raises(InvalidLength):
        RAWDataHeader(b'\x00' * size)


@pytest.mark.parametrize('raw', [b'\x00' * 32, b'\xff' * 32, bytes(range(32))])
def test_any_32_bytes(raw):
    rdh = RAWDataHeader(raw)

    assert set(rdh.as_dict()) == set(DEFAULT_LAYOUT.names())
    assert rdh.pack() == raw


@pytest.mark.parametrize('name', ['trigger_bcid', 'trigger_type', 'heartbeat_bcid'])
def test_unresolved_fields(rdh_raw, name):
    rdh = RAWDataHeader(rdh_raw)

    with pytest.raises(UnresolvedField):
        getattr(rdh, name)


def test_build_round_trip():
    values = {
        'version': 3,
        'block_length': 0x2000,
        'fee_id': 0xabcd,
        'link_id': 11,
        'header_size': 4,
        'trigger_orbit': 0xdeadbeef,
        'heartbeat_orbit': 0xcafebabe,
        'stop_code': 1,
        'detector_field': 0x0f0f,
        'par': 0xf0f0,
        'pages_counter': 42,
    }

    raw = RAWDataHeader.build(**values).pack()

    assert len(raw) == 32
    assert RAWDataHeader(raw).as_dict() == values


def test_build_zero_fills():
    assert RAWDataHeader.build(version=1).pack() == b'\x01' + b'\x00' * 31


def test_build_out_of_range():
    with pytest.raises(ValueError):
        RAWDataHeader.build(link_id=0x100)


def test_set_field(rdh_raw):
    rdh = RAWDataHeader(rdh_raw)

    rdh.link_id = 7
    raw = rdh.pack()

    assert raw[5] == 7
    assert raw[:5] == rdh_raw[:5]
    assert raw[6:] == rdh_raw[6:]


def test_decode_from_page(rdh_raw):
    rdh = RAWDataHeader.decode(b'\xee' * 4 + rdh_raw + b'payload', offset=4)

    assert rdh == RAWDataHeader(rdh_raw)

    with pytest.raises(InvalidLength):
        RAWDataHeader.decode(rdh_raw[:31])


def test_registered_layout():
    register_layout(0x42, [
        ('version', 0, 0, 8),
        ('trigger_bcid', 2, 0, 12),
        ('heartbeat_bcid', 2, 16, 12),
        ('trigger_type', 2, 32, 32),
    ])
    try:
        rdh = RAWDataHeader.build(version=0x42, trigger_bcid=0xabc, heartbeat_bcid=0x123, trigger_type=7)
        decoded = RAWDataHeader(rdh.pack())

        assert decoded.trigger_bcid == 0xabc
        assert decoded.heartbeat_bcid == 0x123
        assert decoded.trigger_type == 7
        with pytest.raises(UnresolvedField):
            decoded.fee_id
    finally:
        unregister_layout(0x42)


@pytest.mark.parametrize('ranges', [
    [('version', 0, 0, 8), ('a', 0, 4, 8)],
    [('a', 0, 0, 8)],
    [('version', 0, 8, 8)],
])
def test_register_invalid_layout(ranges):
    with pytest.raises(ValueError):
        register_layout(0x43, ranges)


def test_unknown_version_warns(caplog):
    raw = b'\x07' + b'\x00' * 31

    with caplog.at_level(logging.WARNING, logger='o2headers.rdh'):
        rdh = RAWDataHeader(raw)

    assert rdh.version == 7
    assert any(
        _.levelno == logging.WARNING and 'version 7' in _.getMessage()
        for _ in caplog.records)


def test_default_version_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger='o2headers.rdh'):
        RAWDataHeader(b'\x03' + b'\x00' * 31)

    assert not [_ for _ in caplog.records if _.levelno >= logging.WARNING]


def test_keyword_values():
    rdh = RAWDataHeader(fee_id=1, link_id=2, version=3)

    assert rdh.version == 3
    assert rdh.fee_id == 1
    assert rdh.link_id == 2
    assert rdh.pack()[:6] == b'\x03\x00\x00\x01\x00\x02'
