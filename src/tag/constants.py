"""Tag layout constants and configuration."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

# APDU Commands for NFC operations
APDU_COMMANDS = {
    'GET_UID': [0xFF, 0xCA, 0x00, 0x00, 0x00],
    'READ_PAGE': [0xFF, 0xB0, 0x00],  # Needs page number and length
    'READ_PAGE_ALT': [0xFF, 0x30, 0x00],  # Alternative read command
    'WRITE_PAGE': [0xFF, 0xD6, 0x00],  # Needs page number, length, and data
    'WRITE_PAGE_ALT': [0xFF, 0xA2, 0x00]  # Alternative write command
}

PAGE_SIZE = 4

# Fixed Type 2 memory map
STATIC_LOCK_PAGE = 0x02
CC_PAGE = 0x03
DATA_START_PAGE = 0x04

NXP_MANUFACTURER = 0x04
AUTH0_DISABLED = 0xFF

# Formatting
FORMAT_LOCK_BYTES = bytes([0x00, 0x00, 0x00, 0x00])
DEFAULT_CC = bytes([0xE1, 0x10, 0x3F, 0x00])
EMPTY_TLV_AREA = bytes([0x00, 0x00, 0x00, 0xFE])
POST_FORMAT_DELAY = 0.2  # seconds between formatting and writing NDEF

# URL writer
DEFAULT_URL_HOST = 'dnd.qrand.me'
URL_TEMPLATE = 'https://{host}/r/{uid}'

# UID output formats
UID_FORMATS = ('hex', 'hex-reversed', 'decimal')
DEFAULT_UID_FORMAT = 'hex'

# Data area reading
MAX_CONSECUTIVE_READ_ERRORS = 3


class TagFamily(Enum):
    """Tag families told apart by the topology probe."""
    NTAG213 = 'NTAG213'
    NTAG215 = 'NTAG215'
    NTAG216 = 'NTAG216'
    GENERIC_TYPE2 = 'Type2-compatible'
    UNKNOWN = 'unknown'

    @property
    def is_ntag(self) -> bool:
        return self in (TagFamily.NTAG213, TagFamily.NTAG215, TagFamily.NTAG216)


@dataclass(frozen=True)
class FamilyLayout:
    """Per-family memory constants."""
    top_page: int
    boundary_probe: Optional[int] = None  # unreadable on this family, readable on larger ones
    dynamic_lock_page: Optional[int] = None
    config_page: Optional[int] = None
    data_area: Optional[Tuple[int, int]] = None
    cc_size: Optional[int] = None

    @property
    def max_size(self) -> Optional[int]:
        return None if self.cc_size is None else self.cc_size * 8


# The values come from: https://www.nxp.com/docs/en/data-sheet/NTAG213_215_216.pdf
FAMILY_LAYOUT: Dict[TagFamily, FamilyLayout] = {
    TagFamily.NTAG213: FamilyLayout(
        top_page=0x2C,
        boundary_probe=0x2C,
        dynamic_lock_page=0x2A,
        config_page=0x2B,
        data_area=(0x04, 0x27),
        cc_size=0x12,
    ),
    TagFamily.NTAG215: FamilyLayout(
        top_page=0x86,
        boundary_probe=0x86,
        dynamic_lock_page=0x82,
        config_page=0x83,
        data_area=(0x04, 0x81),
        cc_size=0x3E,
    ),
    TagFamily.NTAG216: FamilyLayout(
        top_page=0xE7,
        dynamic_lock_page=0xE2,
        config_page=0xE3,
        data_area=(0x04, 0xE1),
        cc_size=0x6D,
    ),
    TagFamily.GENERIC_TYPE2: FamilyLayout(top_page=0x10),
    TagFamily.UNKNOWN: FamilyLayout(top_page=0x10),
}

# NTAG families in order of increasing memory size
NTAG_PROBE_ORDER = (TagFamily.NTAG213, TagFamily.NTAG215, TagFamily.NTAG216)
