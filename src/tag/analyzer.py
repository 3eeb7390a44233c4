"""Full tag analysis: header, data area, lock bytes and configuration."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..codec.area import DataArea, decode_data_area
from ..codec.data import DecodeResult, NDEFMessage, TextRecord, TLVKind, URIRecord, tnf_description
from ..codec.message import decode_message
from ..codec.tlv import TLV_NDEF_MESSAGE, TLV_TERMINATOR
from ..utils.uid import format_uid
from .capability import (
    CapabilityContainer,
    CCStatus,
    LockState,
    parse_capability_container,
    read_lock_state,
)
from .constants import (
    CC_PAGE,
    DATA_START_PAGE,
    MAX_CONSECUTIVE_READ_ERRORS,
    STATIC_LOCK_PAGE,
)
from .exceptions import IOFailure
from .store import PageStore
from .topology import TagProfile, detect_tag


@dataclass
class ScanHit:
    """NDEF TLV found by scanning the whole memory."""
    page: int
    byte_in_page: int
    length: int
    data: bytes
    message: DecodeResult[NDEFMessage]


@dataclass
class TagReport:
    """Everything learned about a tag in one pass."""
    uid: bytes
    profile: TagProfile
    header_pages: Dict[int, Optional[bytes]] = field(default_factory=dict)
    cc: Optional[CapabilityContainer] = None
    data_pages: List[Tuple[int, bytes]] = field(default_factory=list)
    area: Optional[DataArea] = None
    scan_hit: Optional[ScanHit] = None
    lock_state: Optional[LockState] = None
    config_pages: Dict[int, Optional[bytes]] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)

    @property
    def data(self) -> bytes:
        return b''.join(data for _, data in self.data_pages)


def _reader(store: PageStore) -> Callable[[int], bytes]:
    return getattr(store, 'read_page_alternative', store.read_page)


def read_data_area(store: PageStore, top_page: int, start_page: int = DATA_START_PAGE,
                   diagnostics: Optional[List[str]] = None) -> List[Tuple[int, bytes]]:
    """Read data pages until one containing a terminator byte.

    Reading also stops after repeated read errors, or at the first failure
    within five pages of ``top_page``, both of which usually mean the end of
    readable memory.
    """
    read = _reader(store)
    pages = []
    consecutive_errors = 0

    for page in range(start_page, top_page + 1):
        try:
            data = read(page)
        except IOFailure as e:
            consecutive_errors += 1
            if diagnostics is not None:
                diagnostics.append(f"Page {page:02X}: read failed: {e}")
            if consecutive_errors >= MAX_CONSECUTIVE_READ_ERRORS or page > top_page - 5:
                logging.debug(f"Stopping data read at page {page:02X} (likely memory boundary)")
                break
            continue

        consecutive_errors = 0
        pages.append((page, data))
        if TLV_TERMINATOR in data:
            break

    return pages


def scan_for_ndef(store: PageStore, top_page: int) -> Optional[ScanHit]:
    """Search every page for an NDEF TLV and decode the message it holds."""
    read = _reader(store)

    for page in range(0, top_page + 1):
        try:
            data = read(page)
        except IOFailure:
            continue

        for i, b in enumerate(data[:-1]):
            if b != TLV_NDEF_MESSAGE:
                continue
            length = data[i + 1]
            ndef_data = bytearray(data[i + 2:i + 2 + length])
            next_page = page + 1
            while len(ndef_data) < length and next_page <= top_page:
                try:
                    chunk = read(next_page)
                except IOFailure:
                    break
                ndef_data += chunk[:length - len(ndef_data)]
                next_page += 1

            logging.debug(f"Found NDEF TLV at page {page:02X}, byte {i} (length: {length})")
            return ScanHit(page, i, length, bytes(ndef_data), decode_message(bytes(ndef_data)))
    return None


def analyze_tag(store: PageStore) -> TagReport:
    """Read and decode the complete structure of a tag.

    Read failures past the UID are recorded as diagnostics rather than
    raised.
    """
    uid = store.get_uid()
    profile = detect_tag(store)
    report = TagReport(uid=uid, profile=profile)
    read = _reader(store)

    for page in range(0, DATA_START_PAGE):
        try:
            report.header_pages[page] = read(page)
        except IOFailure as e:
            report.header_pages[page] = None
            report.diagnostics.append(f"Page {page:02X}: all read methods failed: {e}")

    cc_page = report.header_pages.get(CC_PAGE)
    if cc_page:
        report.cc = parse_capability_container(cc_page)

    report.data_pages = read_data_area(store, profile.last_page, diagnostics=report.diagnostics)
    if report.data_pages:
        report.area = decode_data_area(report.data, report.data_pages[0][0])
    else:
        report.diagnostics.append("No NDEF data found in standard location (pages 4+)")
        report.scan_hit = scan_for_ndef(store, profile.last_page)
        if report.scan_hit is None:
            report.diagnostics.append("No NDEF data found anywhere on the tag")

    try:
        report.lock_state = read_lock_state(store, profile.family)
    except IOFailure as e:
        report.diagnostics.append(f"Lock bytes not readable: {e}")

    layout = profile.layout
    if profile.family.is_ntag and layout.dynamic_lock_page is not None:
        for page in range(layout.dynamic_lock_page - 1, layout.config_page + 2):
            if page > profile.last_page:
                continue
            try:
                report.config_pages[page] = store.read_page(page)
            except IOFailure as e:
                report.config_pages[page] = None
                report.diagnostics.append(f"Page {page:02X}: read failed: {e}")

    return report


def _hex(data: bytes) -> str:
    return ' '.join(f'{b:02X}' for b in data)


def _header_lines(page: int, data: bytes) -> List[str]:
    lines = []
    if page == 0x00:
        lines.append(f"Page {page:02d}: {_hex(data)} (UID part 1)")
        lines.append(f"    Manufacturer: {data[0]:02X}")
        lines.append(f"    UID bytes: {_hex(data[1:])}")
    elif page == 0x01:
        lines.append(f"Page {page:02d}: {_hex(data)} (UID part 2)")
    elif page == STATIC_LOCK_PAGE:
        lines.append(f"Page {page:02d}: {_hex(data)} (UID part 3 + Lock bytes: {data[2]:02X} {data[3]:02X})")
        lines.append(f"    Internal: {data[1]:02X}")
        lines.append(f"    Static Lock 0: {data[2]:02X}")
        lines.append(f"    Static Lock 1: {data[3]:02X}")
    elif page == CC_PAGE:
        cc = parse_capability_container(data)
        lines.append(f"Page {page:02d}: {_hex(data)} (Capability Container - CC)")
        lines.append(f"    Magic: {cc.magic0:02X} {cc.magic1:02X}")
        lines.append(f"    Size: {cc.size_unit:02X} (data area = {cc.data_area_size} bytes)")
        lines.append(f"    Access: {cc.access:02X}")
        status = cc.status.value
        if cc.status is CCStatus.NONSTANDARD_VERSION:
            status += f" ({cc.magic1:02X})"
        lines.append(f"    {status}")
    return lines


def _payload_lines(value, error) -> List[str]:
    if error is not None:
        return [f"        Error: {error}"]
    if isinstance(value, URIRecord):
        lines = [f"        URI: {value.uri}",
                 f"        Prefix Code: 0x{value.prefix_code:02X} ({value.prefix})"]
        if value.suffix:
            lines.append(f"        Suffix: {value.suffix}")
        return lines
    if isinstance(value, TextRecord):
        return [f"        Text: {value.text}",
                f"        Language: {value.language}",
                f"        Encoding: {value.encoding}"]
    if value:
        return [f"        {value}"]
    return []


def _message_lines(message: DecodeResult[NDEFMessage], views=None) -> List[str]:
    lines = ["  === NDEF MESSAGE ANALYSIS ==="]
    if not message.value.records and message.ok:
        return ["  (Empty NDEF message)"]

    for number, record in enumerate(message.value, start=1):
        flags = record.flags
        lines.append(f"    --- Record {number} ---")
        lines.append(f"    Record Header: 0x{flags.header(record.tnf):02X}")
        lines.append(f"      MB: {flags.mb}  ME: {flags.me}  CF: {flags.cf}  SR: {flags.sr}  IL: {flags.il}")
        lines.append(f"      TNF: {record.tnf} ({tnf_description(record.tnf)})")
        lines.append(f"      Type: {record.type_name or '(none)'}")
        if record.id:
            lines.append(f"      ID: {record.id.decode('latin-1')}")
        lines.append(f"      Payload ({len(record.payload)} bytes): {_hex(record.payload)}")
        if views is not None and number <= len(views):
            lines.extend(_payload_lines(views[number - 1].value, views[number - 1].error))

    if message.error is not None:
        lines.append(f"    Error: {message.error}")
    elif message.value.records and message.value.records[-1].flags.me:
        lines.append("    End of NDEF message")
    return lines


def format_area(area: DataArea) -> List[str]:
    """Describe a decoded data area, one TLV block at a time."""
    lines = ["=== NDEF TLV STRUCTURE ANALYSIS ==="]
    for item in area.entries:
        entry = item.entry
        lines.append(f"Page {item.page:02d}, Byte {item.byte_in_page}: "
                     f"TLV Type = 0x{entry.tag:02X} ({entry.kind.value})")
        if entry.length is not None:
            lines.append(f"  Length: {entry.length} bytes")
        if entry.error is not None:
            lines.append(f"  Error: {entry.error}")
        if entry.kind is TLVKind.NDEF_MESSAGE and item.message is not None:
            lines.append(f"  NDEF Data: {_hex(entry.value)}")
            lines.extend(_message_lines(item.message, item.records))

    if area.terminated and area.found_ndef:
        lines.append("NDEF TLV structure complete")
    if not area.found_ndef:
        lines.append("No NDEF TLV found in data area")
    return lines


def format_report(report: TagReport, uid_format: str = 'hex') -> List[str]:
    """Render a report as printable lines."""
    profile = report.profile
    lines = [
        f"Tag UID: {format_uid(report.uid, uid_format)}",
        f"Tag Type: {profile.family.value}",
        f"Memory Layout: {profile.page_count} pages (0x00 to 0x{profile.top_page:02X})",
        "",
        "=== HEADER PAGES (0-3) ===",
    ]
    for page, data in report.header_pages.items():
        if data is None:
            lines.append(f"Page {page:02d}: all read methods failed")
        else:
            lines.extend(_header_lines(page, data))

    lines += ["", "=== NDEF DATA AREA (Pages 4+) ==="]
    lines.extend(f"Page {page:02d}: {_hex(data)}" for page, data in report.data_pages)
    if report.area is not None:
        lines.append("")
        lines.extend(format_area(report.area))
    if report.scan_hit is not None:
        hit = report.scan_hit
        lines.append(f"Found NDEF TLV at page {hit.page:02X}, byte {hit.byte_in_page} (length: {hit.length})")
        lines.append(f"Alternative NDEF Data: {_hex(hit.data)}")
        lines.extend(_message_lines(hit.message))

    if report.lock_state is not None:
        lines += ["", "=== LOCK BYTES ANALYSIS ==="]
        state = report.lock_state
        lines.append(f"Static Lock Bytes (Page 2, bytes 2-3): "
                     f"{state.static_lock_bits & 0xFF:02X} {state.static_lock_bits >> 8:02X}")
        if state.locked_pages:
            lines.append(f"  Locked pages: {', '.join(str(p) for p in state.locked_pages)}")
        else:
            lines.append("  No pages locked by static lock bytes")
        if state.dynamic_lock_bytes:
            lines.append(f"Dynamic Lock Bytes (Page {profile.layout.dynamic_lock_page:02X}): "
                         f"{_hex(state.dynamic_lock_bytes)}")
        if state.config is not None:
            config = state.config
            lines.append(f"Configuration (Page {profile.layout.config_page:02X}): {_hex(config.to_bytes())}")
            lines.append(f"  MIRROR: {config.mirror:02X}")
            lines.append(f"  RFUI: {config.rfui:02X}")
            lines.append(f"  MIRROR_PAGE: {config.mirror_page:02X}")
            if config.password_protected:
                lines.append(f"  AUTH0: {config.auth0:02X} (password protection starts at page {config.auth0})")
            else:
                lines.append(f"  AUTH0: {config.auth0:02X} (password protection disabled)")

    if report.config_pages:
        lines += ["", "=== NTAG CONFIGURATION PAGES ==="]
        labels = {
            profile.layout.dynamic_lock_page: " (Dynamic Lock)",
            profile.layout.config_page: " (Configuration)",
            profile.layout.config_page + 1: " (Password)",
        }
        for page, data in report.config_pages.items():
            if data is None:
                lines.append(f"Page {page:02X}: read failed")
            else:
                lines.append(f"Page {page:02X}: {_hex(data)}{labels.get(page, '')}")

    if report.diagnostics:
        lines += ["", "=== DIAGNOSTICS ==="]
        lines.extend(report.diagnostics)
    return lines
