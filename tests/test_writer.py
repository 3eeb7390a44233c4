import pytest

from src.codec.area import decode_data_area
from src.codec.exceptions import NDEFError, UnsupportedLength
from src.tag.exceptions import TagLockedException
from src.tag.store import MemoryPageStore
from src.tag.writer import build_tag_url, check_writable, write_tag_url, write_url

from .helpers import UID, build_memory


def test_build_tag_url():
    assert build_tag_url(UID) == "https://dnd.qrand.me/r/04A1B2C4D5E6F7"
    assert build_tag_url(b'\x01\x02', "tags.example.org") == "https://tags.example.org/r/0102"


def test_write_tag_url(ntag215_store):
    url = write_tag_url(ntag215_store, delay=0)

    assert url == "https://dnd.qrand.me/r/04A1B2C4D5E6F7"
    assert [page for page, _ in ntag215_store.writes] == [2, 3, 4] + list(range(4, 14))

    data = b''.join(ntag215_store.read_page(p) for p in range(4, 14))
    area = decode_data_area(data)
    assert area.terminated
    assert area.entries[0].records[0].value.uri == url


def test_written_record_layout(ntag213_store):
    write_url(ntag213_store, "https://example.com", delay=0)

    assert ntag213_store.read_page(4) == bytes([0x03, 0x10, 0xD1, 0x01])
    assert ntag213_store.read_page(5) == bytes([0x0C, 0x55, 0x04]) + b'e'
    assert ntag213_store.read_page(8) == b'om' + bytes([0xFE, 0x00])


def test_locked_tag_is_not_written():
    store = MemoryPageStore(build_memory(0x86, lock0=0x02), uid=UID)

    with pytest.raises(TagLockedException):
        write_tag_url(store, delay=0)
    assert store.writes == []


def test_force_writes_locked_tag():
    store = MemoryPageStore(build_memory(0x86, lock0=0x02), uid=UID)
    write_tag_url(store, force=True, delay=0)
    assert store.writes


def test_check_writable_passes_unlocked_tag(ntag213_store):
    check_writable(ntag213_store)


@pytest.mark.parametrize('host', ["a" * 235, "a" * 300])
def test_oversized_url_leaves_tag_untouched(ntag215_store, host):
    with pytest.raises(NDEFError):
        write_tag_url(ntag215_store, host=host, delay=0)
    assert ntag215_store.writes == []


def test_message_too_long_for_short_tlv(ntag215_store):
    with pytest.raises(UnsupportedLength):
        write_tag_url(ntag215_store, host="a" * 235, delay=0)
