"""Page-write plans for formatting a tag and storing an NDEF message."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .constants import (
    CC_PAGE,
    DATA_START_PAGE,
    DEFAULT_CC,
    EMPTY_TLV_AREA,
    FAMILY_LAYOUT,
    FORMAT_LOCK_BYTES,
    PAGE_SIZE,
    STATIC_LOCK_PAGE,
    TagFamily,
)
from .exceptions import IOFailure
from .store import PageStore


@dataclass(frozen=True)
class PageWrite:
    """One step of a write plan."""
    page: int
    data: bytes
    description: str = ''


def capability_container_for(family: Optional[TagFamily] = None) -> bytes:
    """CC bytes for a family; the generic 504-byte CC when none is given."""
    if family is None:
        return DEFAULT_CC
    cc_size = FAMILY_LAYOUT[family].cc_size
    if cc_size is None:
        return DEFAULT_CC
    return bytes([DEFAULT_CC[0], DEFAULT_CC[1], cc_size, DEFAULT_CC[3]])


def format_plan(family: Optional[TagFamily] = None) -> List[PageWrite]:
    """Writes that initialise a blank tag as an empty NFC Forum Type 2 tag.

    1. clear the static lock bytes on page 2
    2. write the Capability Container on page 3
    3. write an empty TLV area on page 4
    """
    return [
        PageWrite(STATIC_LOCK_PAGE, FORMAT_LOCK_BYTES, 'lock bytes'),
        PageWrite(CC_PAGE, capability_container_for(family), 'capability container'),
        PageWrite(DATA_START_PAGE, EMPTY_TLV_AREA, 'initial NDEF area'),
    ]


def ndef_write_plan(tlv: bytes, start_page: int = DATA_START_PAGE) -> List[PageWrite]:
    """Split TLV bytes into consecutive page writes, zero padding the last page."""
    data = bytes(tlv)
    if len(data) % PAGE_SIZE:
        data += bytes(PAGE_SIZE - len(data) % PAGE_SIZE)
    return [
        PageWrite(start_page + i // PAGE_SIZE, data[i:i + PAGE_SIZE], 'NDEF data')
        for i in range(0, len(data), PAGE_SIZE)
    ]


def execute_plan(store: PageStore, plan: List[PageWrite]) -> int:
    """Run the writes in order and return how many were made.

    The first failing write stops the plan and its IOFailure propagates.
    Earlier writes are not undone.
    """
    for done, step in enumerate(plan):
        try:
            store.write_page(step.page, step.data)
        except IOFailure as e:
            logging.error(f"Write {step.description or 'data'} to page {step.page:02X} failed: {e}")
            if done:
                logging.warning(f"Tag left partially written ({done}/{len(plan)} pages)")
            raise
        logging.debug(f"Wrote {step.description} to page {step.page:02X}: {step.data.hex()}")
    return len(plan)


def format_tag(store: PageStore, family: Optional[TagFamily] = None) -> None:
    """Format a tag for NDEF use."""
    execute_plan(store, format_plan(family))
    logging.info("Tag formatted successfully")
