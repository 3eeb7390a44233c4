import pytest

from src.codec.message import build_message
from src.codec.payloads import uri_record
from src.codec.tlv import encode_tlv
from src.tag.analyzer import analyze_tag, format_report, read_data_area, scan_for_ndef
from src.tag.constants import TagFamily
from src.tag.exceptions import ReadError
from src.tag.store import MemoryPageStore

from .helpers import UID, build_memory

URL_TLV = encode_tlv(build_message([uri_record("https://example.com")]))


def test_read_data_area_stops_at_terminator():
    store = MemoryPageStore(build_memory(0x2C, data=URL_TLV), uid=UID)
    pages = read_data_area(store, 0x2C)

    assert [page for page, _ in pages] == [4, 5, 6, 7, 8]
    assert b''.join(data for _, data in pages) == URL_TLV


def test_read_data_area_stops_after_repeated_errors():
    store = MemoryPageStore(build_memory(0x2C), uid=UID, failing_pages={4, 5, 6})
    diagnostics = []

    assert read_data_area(store, 0x2C, diagnostics=diagnostics) == []
    assert len(diagnostics) == 3


def test_analyze_ntag213_with_url():
    memory = build_memory(0x2C, data=URL_TLV, pages={0x2B: bytes([0x04, 0x00, 0x05, 0xFF])})
    report = analyze_tag(MemoryPageStore(memory, uid=UID))

    assert report.uid == UID
    assert report.profile.family is TagFamily.NTAG213
    assert sorted(report.header_pages) == [0, 1, 2, 3]
    assert report.cc.size_unit == 0x12
    assert report.area.found_ndef
    assert report.area.entries[0].records[0].value.uri == "https://example.com"
    assert report.scan_hit is None
    assert report.lock_state.auth0 == 0xFF
    assert sorted(report.config_pages) == [0x29, 0x2A, 0x2B]
    assert report.diagnostics == []


def test_generic_tag_has_no_config_pages():
    memory = build_memory(0x10, manufacturer=0x05, data=URL_TLV)
    report = analyze_tag(MemoryPageStore(memory, uid=UID))

    assert report.profile.family is TagFamily.GENERIC_TYPE2
    assert report.config_pages == {}
    assert report.lock_state.config is None


def test_fallback_scan_finds_displaced_message():
    memory = build_memory(0x2C, pages={
        7: URL_TLV[0:4], 8: URL_TLV[4:8], 9: URL_TLV[8:12],
        10: URL_TLV[12:16], 11: URL_TLV[16:20],
    })
    store = MemoryPageStore(memory, uid=UID, failing_pages={4, 5, 6})
    report = analyze_tag(store)

    assert report.data_pages == []
    assert "No NDEF data found in standard location (pages 4+)" in report.diagnostics
    hit = report.scan_hit
    assert (hit.page, hit.byte_in_page, hit.length) == (7, 0, 0x10)
    assert hit.message.ok
    assert hit.message.value[0].type == b'U'


def test_scan_for_ndef_without_message():
    store = MemoryPageStore(build_memory(0x10, cc=b'\x00\x00\x00\x00'), uid=UID)
    assert scan_for_ndef(store, 0x0F) is None


def test_format_report(ntag213_store):
    lines = format_report(analyze_tag(ntag213_store))

    assert lines[0] == "Tag UID: 04A1B2C4D5E6F7"
    assert lines[1] == "Tag Type: NTAG213"
    assert "    Valid NDEF CC (Type 2 Tag)" in lines
    assert "Page 04, Byte 3: TLV Type = 0xFE (Terminator)" in lines
    assert "No NDEF TLV found in data area" in lines
    assert "  AUTH0: FF (password protection disabled)" in lines
    assert "Page 2B: 04 00 05 FF (Configuration)" in lines


def test_format_report_shows_uri():
    memory = build_memory(0x2C, data=URL_TLV)
    lines = format_report(analyze_tag(MemoryPageStore(memory, uid=UID)), 'hex-reversed')

    assert lines[0] == "Tag UID: F7E6D5C4B2A104"
    assert "        URI: https://example.com" in lines
    assert "    End of NDEF message" in lines
    assert "NDEF TLV structure complete" in lines


def test_uid_failure_propagates():
    class NoUIDStore(MemoryPageStore):
        def get_uid(self):
            raise ReadError("APDU failed: SW=6300")

    with pytest.raises(ReadError, match="6300"):
        analyze_tag(NoUIDStore(build_memory(0x2C)))


def test_odd_record_type_does_not_break_the_report():
    memory = build_memory(0x2C, data=bytes([0x03, 0x04, 0xD1, 0x01, 0x00, 0x80, 0xFE]))
    report = analyze_tag(MemoryPageStore(memory, uid=UID))

    assert report.area.entries[0].records[0].value == "Record type '\x80' with 0 byte payload"
    assert "        Record type '\x80' with 0 byte payload" in format_report(report)
