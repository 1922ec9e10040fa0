import logging
import os
import struct

import pytest

from o2headers import DataDescription, DataHeader, DataOrigin, SerializationMethod


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


@pytest.fixture
def data_header():
    return DataHeader(
        description=DataDescription.RAWDATA,
        origin=DataOrigin.TPC,
        payload_serialization=SerializationMethod.ROOT,
        sub_specification=0xdead,
        payload_size=1024,
    )


@pytest.fixture
def rdh_raw():
    """A RDH with every field of the default layout set to a recognizable value."""
    word0 = bytes([0x01, 0x08, 0x00, 0x12, 0x34, 0x05, 0x08, 0x00])
    word1 = struct.pack('<II', 0x11223344, 0x55667788)
    word2 = bytes([0x00, 0x00, 0x01, 0x34, 0x12, 0x78, 0x56, 0x00])
    word3 = bytes([0x02, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])

    return word0 + word1 + word2 + word3
