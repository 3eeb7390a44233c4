"""Reference layout of a correctly formatted NTAG213."""

from typing import List

from ..codec.payloads import build_uri_record
from ..codec.tlv import encode_tlv
from .constants import CC_PAGE, DATA_START_PAGE, FAMILY_LAYOUT, PAGE_SIZE, TagFamily
from .formatter import capability_container_for

EXAMPLE_URL = "https://example.com"

LAYOUT_TEXT = """\
NTAG213 MEMORY LAYOUT (180 bytes total, 45 pages of 4 bytes each):

=== HEADER PAGES (0-3) - FACTORY SET ===
Page 00: [UID0][UID1][UID2][BCC0]     UID part 1 + checksum
Page 01: [UID3][UID4][UID5][UID6]     UID part 2
Page 02: [BCC1][INT][LOCK0][LOCK1]    Checksum + Internal + Static locks
Page 03: [E1][10][SIZE][ACCESS]       Capability Container (CC)

CAPABILITY CONTAINER (Page 3):
  E1 = Magic number (NDEF compatible Type 2 tag)
  10 = Version (1.0)
  SIZE = Data area size in 8-byte units (0x12 = 18*8 = 144 bytes for NTAG213)
  ACCESS = Access conditions (0x00 = read/write allowed)

=== NDEF DATA AREA (Pages 4-39) ===
Page 04: [03][LEN][NDEF...][FE]       TLV: Type=03 (NDEF), Length, Data, Terminator

TLV STRUCTURE:
  03 = TLV Type (NDEF Message)
  LEN = Length of NDEF message (1 byte for messages up to 254 bytes)
  FE = Terminator TLV

NDEF RECORD FORMAT (for URI):
  [HEADER][TYPE_LEN][PAYLOAD_LEN][TYPE][PAYLOAD]
  HEADER 0xD1 = MB=1 ME=1 CF=0 SR=1 IL=0 TNF=001 (Well-known)
  TYPE = 'U' (0x55), PAYLOAD = [URI_CODE][URI_STRING]
  URI_CODE 0x04 = "https://"

KEY CONFIGURATION BYTES:
  AUTH0: 0xFF = no password protection,
         otherwise password required from this page on
  ACCESS (Page 3, byte 3): access permissions for the data area"""


def ideal_format_lines(url: str = EXAMPLE_URL) -> List[str]:
    """Layout description followed by the actual pages for ``url``."""
    family = TagFamily.NTAG213
    cc = capability_container_for(family)
    tlv = encode_tlv(build_uri_record(url))

    lines = LAYOUT_TEXT.splitlines()
    lines += ["", f'EXAMPLE: FORMATTED {family.value} WITH "{url}"']
    lines.append(f"Page {CC_PAGE:02X}: {cc.hex(' ').upper()}")
    for i in range(0, len(tlv), PAGE_SIZE):
        page = DATA_START_PAGE + i // PAGE_SIZE
        lines.append(f"Page {page:02X}: {tlv[i:i + PAGE_SIZE].hex(' ').upper()}")
    lines.append(f"Data area ends at page {FAMILY_LAYOUT[family].data_area[1]:02X}")
    return lines
