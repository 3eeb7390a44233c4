import pytest

from src.tag.constants import TagFamily
from src.tag.exceptions import WriteError
from src.tag.formatter import (
    PageWrite,
    capability_container_for,
    execute_plan,
    format_plan,
    format_tag,
    ndef_write_plan,
)
from src.tag.store import MemoryPageStore

from .helpers import UID, build_memory


def test_format_plan():
    plan = format_plan()
    assert [(step.page, step.data) for step in plan] == [
        (2, bytes([0x00, 0x00, 0x00, 0x00])),
        (3, bytes([0xE1, 0x10, 0x3F, 0x00])),
        (4, bytes([0x00, 0x00, 0x00, 0xFE])),
    ]


@pytest.mark.parametrize('family, cc', [
    (None, b'\xE1\x10\x3F\x00'),
    (TagFamily.NTAG213, b'\xE1\x10\x12\x00'),
    (TagFamily.NTAG215, b'\xE1\x10\x3E\x00'),
    (TagFamily.NTAG216, b'\xE1\x10\x6D\x00'),
    (TagFamily.GENERIC_TYPE2, b'\xE1\x10\x3F\x00'),
])
def test_capability_container_for(family, cc):
    assert capability_container_for(family) == cc


def test_format_tag_writes_in_order(ntag215_store):
    format_tag(ntag215_store)

    assert [page for page, _ in ntag215_store.writes] == [2, 3, 4]
    assert ntag215_store.read_page(3) == b'\xE1\x10\x3F\x00'
    assert ntag215_store.read_page(4) == b'\x00\x00\x00\xFE'


def test_failed_write_stops_the_plan(caplog):
    store = MemoryPageStore(build_memory(0x2C), uid=UID, read_only_pages={3})

    with pytest.raises(WriteError):
        format_tag(store)

    assert [page for page, _ in store.writes] == [2]
    assert "partially written (1/3 pages)" in caplog.text


def test_ndef_write_plan_chunks_pages():
    plan = ndef_write_plan(bytes(range(10)), start_page=4)

    assert [step.page for step in plan] == [4, 5, 6]
    assert plan[0].data == bytes([0, 1, 2, 3])
    assert plan[2].data == bytes([8, 9, 0, 0])


def test_execute_plan_returns_write_count(ntag213_store):
    plan = [PageWrite(5, b'\x01\x02\x03\x04'), PageWrite(6, b'\x05\x06\x07\x08')]
    assert execute_plan(ntag213_store, plan) == 2
    assert ntag213_store.read_page(6) == b'\x05\x06\x07\x08'
