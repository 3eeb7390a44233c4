"""Tag family detection by memory boundary probing."""

import logging
from dataclasses import dataclass

from .constants import FAMILY_LAYOUT, NTAG_PROBE_ORDER, NXP_MANUFACTURER, FamilyLayout, TagFamily
from .exceptions import IOFailure, UnknownTagFamily
from .store import PageStore


@dataclass
class TagProfile:
    """Detected tag family and memory extent."""
    manufacturer_byte: int
    family: TagFamily
    top_page: int

    @property
    def layout(self) -> FamilyLayout:
        return FAMILY_LAYOUT[self.family]

    @property
    def page_count(self) -> int:
        return self.top_page + 1

    @property
    def last_page(self) -> int:
        """Highest page worth reading; a failed boundary probe page is excluded."""
        if self.layout.boundary_probe == self.top_page:
            return self.top_page - 1
        return self.top_page


def _profile(manufacturer: int, family: TagFamily) -> TagProfile:
    return TagProfile(manufacturer, family, FAMILY_LAYOUT[family].top_page)


def _page_readable(store: PageStore, page: int) -> bool:
    try:
        store.read_page(page)
    except IOFailure as e:
        logging.debug(f"Probe read of page {page:02X} failed: {e}")
        return False
    logging.debug(f"Probe read of page {page:02X} succeeded")
    return True


def detect_tag(store: PageStore) -> TagProfile:
    """Identify the tag family.

    Page 0 gives the manufacturer byte. NXP tags are then sized by probing
    the first page past the end of each smaller family: a failed read is
    taken to mean the page lies beyond the tag's memory.
    """
    try:
        page0 = store.read_page(0x00)
    except IOFailure as e:
        logging.debug(f"Could not read manufacturer page: {e}")
        return _profile(-1, TagFamily.UNKNOWN)
    if not page0:
        return _profile(-1, TagFamily.UNKNOWN)

    manufacturer = page0[0]
    if manufacturer != NXP_MANUFACTURER:
        logging.debug(f"Manufacturer byte {manufacturer:02X} is not NXP")
        return _profile(manufacturer, TagFamily.GENERIC_TYPE2)

    for family in NTAG_PROBE_ORDER:
        probe = FAMILY_LAYOUT[family].boundary_probe
        if probe is None or not _page_readable(store, probe):
            return _profile(manufacturer, family)

    raise UnknownTagFamily("Boundary probe inconclusive: every probe page was readable")


def require_ntag(profile: TagProfile) -> FamilyLayout:
    """Layout of an NTAG profile; other families have no known config pages."""
    if not profile.family.is_ntag:
        raise UnknownTagFamily(f"Tag family {profile.family.value} has no known lock layout")
    return profile.layout
