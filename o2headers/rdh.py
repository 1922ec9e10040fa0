'''
# RAW Data Header

The RDH is the 32 bytes descriptor the front-end electronics put in front of
every readout page. It's made of 4 little endian 64 bit words

         63     56      48      40      32      24      16       8       0
         |---------------|---------------|---------------|---------------|

   0     | zero  | size  |link id|    FEE id     |  block length | vers  |

   1     |      heartbeat orbit          |       trigger orbit           |

   2     | zero  |      par      | detector field| stop  |     zero      |

   3     |                     zero                      |  page count   |

 - version:      the header version number, it selects the layout of the other fields
 - block length: assumed to be in byte
 - FEE ID:       unique id of the Frontend equipment
 - link ID:      id of the link within CRU
 - header size:  number of 64 bit words
 - heartbeat and trigger orbit: LHC clock parameters
 - page count:   incremented if data is bigger than the page size, starting from 0
 - stop:         bit 0 of the stop field is set if this is the last page
 - detector field and par are detector specific fields

The trigger and heartbeat bunch crossings and the trigger type are part of
the format but the default layout doesn't place them: a layout defining them
can be added with register_layout().
'''
import logging
from types import MappingProxyType
from typing import Iterable, Sequence

from . import fields
from .bits import BitPacked, BitProperty, Layout
from .core import Chunk
from .exceptions import InvalidLength


logger = logging.getLogger(__name__)

RDH_SIZE = 32
RDH_WORDS = 4
DEFAULT_VERSION = 3

DEFAULT_LAYOUT = Layout([
    ('version',         0,  0,  8),
    ('block_length',    0,  8, 16),
    ('fee_id',          0, 24, 16),
    ('link_id',         0, 40,  8),
    ('header_size',     0, 48,  8),
    ('trigger_orbit',   1,  0, 32),
    ('heartbeat_orbit', 1, 32, 32),
    ('stop_code',       2, 16,  8),
    ('detector_field',  2, 24, 16),
    ('par',             2, 40, 16),
    ('pages_counter',   3,  0, 16),
], n_words=RDH_WORDS)

_layouts = {}
layouts = MappingProxyType(_layouts)
_layouts[DEFAULT_VERSION] = DEFAULT_LAYOUT


def register_layout(version: int, ranges: Iterable[Sequence]) -> Layout:
    '''Use the given table of (name, word, offset, width) for the RDHs with this version.'''
    layout = Layout(ranges, n_words=RDH_WORDS)

    if 'version' not in layout or tuple(layout['version'])[1:] != (0, 0, 8):
        raise ValueError('the version must stay in the first byte of the first word')

    logger.debug('registering layout for RDH version %d: %r', version, layout)
    _layouts[version] = layout

    return layout


def unregister_layout(version: int) -> None:
    del _layouts[version]


def get_layout(version: int) -> Layout:
    return _layouts.get(version, DEFAULT_LAYOUT)


class RAWDataHeader(BitPacked, Chunk):
    word0 = fields.StructField('Q')
    word1 = fields.StructField('Q')
    word2 = fields.StructField('Q')
    word3 = fields.StructField('Q')

    WORDS = ('word0', 'word1', 'word2', 'word3')

    version         = BitProperty('version')
    block_length    = BitProperty('block_length')
    fee_id          = BitProperty('fee_id')
    link_id         = BitProperty('link_id')
    header_size     = BitProperty('header_size')
    trigger_orbit   = BitProperty('trigger_orbit')
    heartbeat_orbit = BitProperty('heartbeat_orbit')
    trigger_bcid    = BitProperty('trigger_bcid')
    trigger_type    = BitProperty('trigger_type')
    heartbeat_bcid  = BitProperty('heartbeat_bcid')
    stop_code       = BitProperty('stop_code')
    detector_field  = BitProperty('detector_field')
    par             = BitProperty('par')
    pages_counter   = BitProperty('pages_counter')

    def __init__(self, data=None, **kwargs):
        if data is not None and len(memoryview(data)) != RDH_SIZE:
            raise InvalidLength(
                chain=[],
                msg=f'a RAWDataHeader is exactly {RDH_SIZE} bytes, got {len(memoryview(data))}')

        # the version selects the layout used by the other fields
        if 'version' in kwargs:
            kwargs = {'version': kwargs.pop('version'), **kwargs}

        super().__init__(data, **kwargs)

    @classmethod
    def decode(cls, data, offset=0):
        '''Unpack the RDH at offset, the data can continue with the page payload.'''
        return cls(memoryview(data)[offset:offset + RDH_SIZE])

    @classmethod
    def build(cls, **values) -> "RAWDataHeader":
        '''Pack each field into its word, the bits not covered by a field are zero.'''
        layout = get_layout(values.get('version', 0))
        rdh = cls()

        for word_name, word in zip(cls.WORDS, layout.pack(values)):
            setattr(rdh, word_name, word)

        return rdh

    def encode(self) -> bytes:
        return self.pack()

    def get_layout(self) -> Layout:
        return get_layout(self.word0.value & 0xff)

    @property
    def is_last_page(self) -> bool:
        return bool(self.stop_code & 1)

    def validate(self):
        version = self.word0.value & 0xff
        if version not in _layouts:
            logger.warning('no layout registered for RDH version %d, using the default one', version)
