import pytest

from src.tag.store import MemoryPageStore

from .helpers import UID, build_memory


@pytest.fixture
def ntag213_store():
    """Formatted NTAG213 with an empty TLV area and AUTH0 disabled."""
    memory = build_memory(0x2C, data=b'\x00\x00\x00\xFE',
                          pages={0x2B: bytes([0x04, 0x00, 0x05, 0xFF])})
    return MemoryPageStore(memory, uid=UID)


@pytest.fixture
def ntag215_store():
    memory = build_memory(0x86, cc=b'\xE1\x10\x3E\x00')
    return MemoryPageStore(memory, uid=UID)
