"""Capability Container and lock byte interpretation."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .constants import AUTH0_DISABLED, CC_PAGE, FAMILY_LAYOUT, STATIC_LOCK_PAGE, TagFamily
from .exceptions import UnknownTagFamily
from .store import PageStore

NDEF_MAGIC = 0xE1
TYPE2_VERSION = 0x10
TYPE4_VERSION = 0x11

STATIC_LOCK_FIRST_PAGE = 3
STATIC_LOCK_BITS = 16


class CCStatus(Enum):
    TYPE2 = 'Valid NDEF CC (Type 2 Tag)'
    TYPE4 = 'Valid NDEF CC (Type 4 Tag)'
    NONSTANDARD_VERSION = 'NDEF CC with non-standard version'
    BLANK = 'Invalid or non-NDEF CC (appears to be empty/unformatted)'
    INVALID = 'Invalid or non-NDEF CC'


@dataclass
class CapabilityContainer:
    """Page 3 of a Type 2 tag."""
    magic0: int
    magic1: int
    size_unit: int
    access: int

    @property
    def data_area_size(self) -> int:
        return self.size_unit * 8

    @property
    def ndef_capable(self) -> bool:
        return self.magic0 == NDEF_MAGIC

    @property
    def status(self) -> CCStatus:
        if self.magic0 == NDEF_MAGIC:
            if self.magic1 == TYPE2_VERSION:
                return CCStatus.TYPE2
            if self.magic1 == TYPE4_VERSION:
                return CCStatus.TYPE4
            return CCStatus.NONSTANDARD_VERSION
        if not any((self.magic0, self.magic1, self.size_unit, self.access)):
            return CCStatus.BLANK
        return CCStatus.INVALID

    def to_bytes(self) -> bytes:
        return bytes([self.magic0, self.magic1, self.size_unit, self.access])


def parse_capability_container(page: bytes) -> CapabilityContainer:
    """Split a CC page into its four fields."""
    if len(page) < 4:
        raise ValueError(f"Capability container needs 4 bytes, got {len(page)}")
    return CapabilityContainer(page[0], page[1], page[2], page[3])


def static_locked_pages(lock0: int, lock1: int) -> List[int]:
    """Pages write-protected by the static lock bytes.

    Bit i of the 16-bit field {lock0, lock1} locks page 3 + i.
    """
    bits = lock0 | (lock1 << 8)
    return [STATIC_LOCK_FIRST_PAGE + i for i in range(STATIC_LOCK_BITS) if bits >> i & 1]


@dataclass
class ConfigPage:
    """NTAG configuration page following the dynamic lock page."""
    mirror: int
    rfui: int
    mirror_page: int
    auth0: int

    @property
    def password_protected(self) -> bool:
        return self.auth0 != AUTH0_DISABLED

    @property
    def protected_from(self) -> Optional[int]:
        """First page needing password authentication, None when disabled."""
        return self.auth0 if self.password_protected else None

    def to_bytes(self) -> bytes:
        return bytes([self.mirror, self.rfui, self.mirror_page, self.auth0])


def parse_config_page(page: bytes) -> ConfigPage:
    if len(page) < 4:
        raise ValueError(f"Configuration page needs 4 bytes, got {len(page)}")
    return ConfigPage(page[0], page[1], page[2], page[3])


@dataclass
class LockState:
    """Static and dynamic lock bytes plus AUTH0."""
    static_lock_bits: int
    dynamic_lock_bytes: bytes = b''
    auth0: Optional[int] = None
    config: Optional[ConfigPage] = field(default=None, repr=False)

    @property
    def locked_pages(self) -> List[int]:
        return static_locked_pages(self.static_lock_bits & 0xFF, self.static_lock_bits >> 8)

    @property
    def dynamically_locked(self) -> bool:
        return any(self.dynamic_lock_bytes[:3])

    @property
    def password_protected(self) -> bool:
        return self.auth0 is not None and self.auth0 != AUTH0_DISABLED

    def is_locked(self) -> bool:
        return bool(self.static_lock_bits) or self.dynamically_locked


def dynamic_lock_pages(family: TagFamily):
    """Dynamic lock page and configuration page of an NTAG family."""
    layout = FAMILY_LAYOUT[family]
    if layout.dynamic_lock_page is None:
        raise UnknownTagFamily(f"No dynamic lock layout for {family.value}")
    return layout.dynamic_lock_page, layout.config_page


def read_static_lock_bits(store: PageStore) -> int:
    page = store.read_page(STATIC_LOCK_PAGE)
    logging.debug(f"Static lock bytes: {page[2]:02X} {page[3]:02X}")
    return page[2] | (page[3] << 8)


def read_capability_container(store: PageStore) -> CapabilityContainer:
    return parse_capability_container(store.read_page(CC_PAGE))


def read_lock_state(store: PageStore, family: TagFamily) -> LockState:
    """Read static locks, and for NTAG families the dynamic lock and config pages.

    Read failures propagate as IOFailure.
    """
    state = LockState(read_static_lock_bits(store))
    if not family.is_ntag:
        return state

    lock_page, config_page = dynamic_lock_pages(family)
    state.dynamic_lock_bytes = store.read_page(lock_page)
    logging.debug(f"Dynamic lock bytes at page {lock_page:02X}: {state.dynamic_lock_bytes.hex()}")

    state.config = parse_config_page(store.read_page(config_page))
    state.auth0 = state.config.auth0
    return state
