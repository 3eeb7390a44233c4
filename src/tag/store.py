"""Page-level access to tag memory."""

import logging
from typing import Iterable, Optional, Protocol, Set

from .constants import PAGE_SIZE
from .exceptions import ReadError, WriteError


class PageStore(Protocol):
    """Transport used by the detector, analyzer and formatter.

    Failures are reported by raising IOFailure (ReadError / WriteError).
    """

    def read_page(self, page: int) -> bytes:
        ...

    def write_page(self, page: int, data: bytes) -> None:
        ...

    def get_uid(self) -> bytes:
        ...


class MemoryPageStore:
    """PageStore backed by a byte buffer.

    Pages beyond the buffer, or listed in ``failing_pages``, raise ReadError /
    WriteError the way an unreachable page on a real tag does. ``writes``
    records every successful write in order.
    """

    def __init__(self, memory: bytes = b'', uid: Optional[bytes] = None,
                 failing_pages: Iterable[int] = (), read_only_pages: Iterable[int] = ()):
        self.memory = bytearray(memory)
        if len(self.memory) % PAGE_SIZE:
            self.memory += bytes(PAGE_SIZE - len(self.memory) % PAGE_SIZE)
        self.uid = uid
        self.failing_pages: Set[int] = set(failing_pages)
        self.read_only_pages: Set[int] = set(read_only_pages)
        self.writes = []

    @classmethod
    def from_hex(cls, dump: str, **kwargs) -> 'MemoryPageStore':
        """Build a store from a hex dump starting at page 0."""
        return cls(bytes.fromhex(''.join(dump.split())), **kwargs)

    @property
    def page_count(self) -> int:
        return len(self.memory) // PAGE_SIZE

    def read_page(self, page: int) -> bytes:
        if page in self.failing_pages or page >= self.page_count:
            raise ReadError(f"Page {page:02X} not readable")
        start = page * PAGE_SIZE
        return bytes(self.memory[start:start + PAGE_SIZE])

    def write_page(self, page: int, data: bytes) -> None:
        if len(data) != PAGE_SIZE:
            raise WriteError(f"Page write must be {PAGE_SIZE} bytes, got {len(data)}")
        if page in self.failing_pages or page in self.read_only_pages or page >= self.page_count:
            raise WriteError(f"Page {page:02X} not writable")
        start = page * PAGE_SIZE
        self.memory[start:start + PAGE_SIZE] = data
        self.writes.append((page, bytes(data)))
        logging.debug(f"Wrote page {page:02X}: {bytes(data).hex()}")

    def get_uid(self) -> bytes:
        if self.uid is not None:
            return self.uid
        if self.page_count < 3:
            raise ReadError("UID pages not readable")
        # 7-byte UID: UID0-2 on page 0, UID3-6 on page 1
        return bytes(self.memory[0:3] + self.memory[4:8])
